"""Lightweight lexical scanning of script source.

The scanner does not parse JavaScript. It only finds the spans of comments
and literal bodies (strings, template literal text, regular expressions) so
callers can search the remaining code with plain regular expressions
without matching text that merely mentions a keyword.

Masking keeps offsets stable: every masked character becomes a space,
newlines are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SpanKind = Literal["comment", "literal"]

# After these, a `/` starts a regular expression rather than a division.
_REGEX_AFTER_PUNCT = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_AFTER_WORD = {
	"return",
	"typeof",
	"case",
	"do",
	"else",
	"in",
	"of",
	"new",
	"delete",
	"void",
	"throw",
	"instanceof",
	"yield",
	"await",
	"default",
}


@dataclass(frozen=True, slots=True)
class Span:
	start: int
	end: int
	kind: SpanKind


def _is_ident(ch: str) -> bool:
	return ch.isalnum() or ch in "_$"


class _Scanner:
	source: str
	spans: list[Span]
	_braces: list[bool]
	_last: str

	def __init__(self, source: str) -> None:
		self.source = source
		self.spans = []
		# True marks a `${` opened inside a template literal
		self._braces = []
		self._last = ""

	def _regex_allowed(self) -> bool:
		last = self._last
		return last == "" or last in _REGEX_AFTER_PUNCT or last in _REGEX_AFTER_WORD

	def run(self) -> list[Span]:
		s = self.source
		n = len(s)
		i = 0
		while i < n:
			c = s[i]
			nxt = s[i + 1] if i + 1 < n else ""
			if c == "/" and nxt == "/":
				end = s.find("\n", i)
				end = n if end == -1 else end
				self.spans.append(Span(i, end, "comment"))
				i = end
			elif c == "/" and nxt == "*":
				end = s.find("*/", i + 2)
				end = n if end == -1 else end + 2
				self.spans.append(Span(i, end, "comment"))
				i = end
			elif c in "\"'":
				i = self._string(i)
			elif c == "`":
				i = self._template(i + 1)
			elif c == "/" and self._regex_allowed():
				i = self._regex(i)
			elif c == "{":
				self._braces.append(False)
				self._last = c
				i += 1
			elif c == "}":
				if self._braces and self._braces.pop():
					i = self._template(i + 1)
				else:
					self._last = c
					i += 1
			elif _is_ident(c):
				j = i + 1
				while j < n and _is_ident(s[j]):
					j += 1
				self._last = s[i:j]
				i = j
			elif c.isspace():
				i += 1
			else:
				self._last = c
				i += 1
		return self.spans

	def _string(self, start: int) -> int:
		s = self.source
		quote = s[start]
		j = start + 1
		while j < len(s) and s[j] != quote and s[j] != "\n":
			j += 2 if s[j] == "\\" else 1
		end = min(j, len(s))
		self.spans.append(Span(start + 1, end, "literal"))
		self._last = "a"
		return end + 1

	def _template(self, start: int) -> int:
		"""Scan template literal text from `start` until the closing backtick or `${`."""
		s = self.source
		j = start
		while j < len(s):
			ch = s[j]
			if ch == "\\":
				j += 2
				continue
			if ch == "`":
				self.spans.append(Span(start, j, "literal"))
				self._last = "a"
				return j + 1
			if ch == "$" and j + 1 < len(s) and s[j + 1] == "{":
				self.spans.append(Span(start, j, "literal"))
				self._braces.append(True)
				self._last = "{"
				return j + 2
			j += 1
		self.spans.append(Span(start, len(s), "literal"))
		return len(s)

	def _regex(self, start: int) -> int:
		s = self.source
		j = start + 1
		in_class = False
		while j < len(s):
			ch = s[j]
			if ch == "\\":
				j += 2
				continue
			if ch == "\n":
				# Not a regular expression after all
				self._last = "/"
				return start + 1
			if ch == "[":
				in_class = True
			elif ch == "]":
				in_class = False
			elif ch == "/" and not in_class:
				break
			j += 1
		else:
			self._last = "/"
			return start + 1
		self.spans.append(Span(start + 1, j, "literal"))
		j += 1
		while j < len(s) and _is_ident(s[j]):
			j += 1
		self._last = "a"
		return j


def scan(source: str) -> list[Span]:
	"""Return comment and literal-body spans of `source`, in order."""
	return _Scanner(source).run()


def _mask(source: str, spans: list[Span]) -> str:
	chars = list(source)
	for span in spans:
		for k in range(span.start, min(span.end, len(chars))):
			if chars[k] != "\n":
				chars[k] = " "
	return "".join(chars)


def mask_comments(source: str) -> str:
	"""Blank out comments, keeping string contents intact."""
	return _mask(source, [s for s in scan(source) if s.kind == "comment"])


def mask_code(source: str) -> str:
	"""Blank out comments and the bodies of every literal."""
	return _mask(source, scan(source))


__all__ = ["Span", "SpanKind", "mask_code", "mask_comments", "scan"]
