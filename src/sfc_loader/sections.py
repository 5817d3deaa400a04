"""Split component source into its style, script and template sections.

The document is scanned as generic markup. Only top-level elements count:
a `<template>` nested inside another template stays part of the outer
section's content, and `<script>`/`<style>` bodies are raw text up to the
matching closing tag.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal
from urllib.parse import unquote, urlsplit

from sfc_loader.errors import ParseError

SectionTag = Literal["style", "script", "template"]

_TOP_LEVEL = re.compile(
	r"(?P<comment><!--.*?-->)"
	+ r"|<(?P<tag>style|script|template)(?=[\s/>])"
	+ r"(?P<attrs>(?:[^>\"']|\"[^\"]*\"|'[^']*')*?)"
	+ r"(?P<selfclose>/?)>",
	re.IGNORECASE | re.DOTALL,
)
_TEMPLATE_TAG = re.compile(
	r"(?P<comment><!--.*?-->)"
	+ r"|<(?P<close>/?)template(?=[\s/>])(?:[^>\"']|\"[^\"]*\"|'[^']*')*?(?P<selfclose>/?)>",
	re.IGNORECASE | re.DOTALL,
)
_ATTRIBUTE = re.compile(
	r"(?P<name>[^\s=/>\"']+)"
	+ r"(?:\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\s\"'=<>`]+)))?"
)


@dataclass(frozen=True, slots=True)
class Section:
	"""One `<style>`, `<script>` or `<template>` element of a component."""

	tag: SectionTag
	content: str
	attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
	outer: str = ""
	offset: int = 0

	@property
	def src(self) -> str | None:
		"""External reference declared with `src="..."`, if any."""
		value = self.attributes.get("src")
		return value or None

	@property
	def scoped(self) -> bool:
		return "scoped" in self.attributes

	@property
	def lang(self) -> str | None:
		return self.attributes.get("lang") or None


@dataclass(frozen=True, slots=True)
class SectionSet:
	styles: tuple[Section, ...] = ()
	scripts: tuple[Section, ...] = ()
	templates: tuple[Section, ...] = ()

	def __iter__(self):
		yield from self.styles
		yield from self.scripts
		yield from self.templates


def parse_attributes(raw: str) -> Mapping[str, str]:
	"""Parse the attribute part of an opening tag.

	Names are lower-cased, values unescaped; bare flags map to "".
	The first occurrence of a repeated attribute wins, as in HTML.
	"""
	attributes: dict[str, str] = {}
	for match in _ATTRIBUTE.finditer(raw):
		name = match.group("name").lower()
		if name in attributes:
			continue
		value = match.group("dq")
		if value is None:
			value = match.group("sq")
		if value is None:
			value = match.group("bare")
		attributes[name] = html.unescape(value) if value else ""
	return MappingProxyType(attributes)


def _find_close(source: str, tag: str, start: int) -> tuple[int, int] | None:
	"""Return (content_end, element_end) of the element opened before `start`."""
	if tag != "template":
		closing = re.compile(rf"</{tag}\s*>", re.IGNORECASE)
		match = closing.search(source, start)
		if match is None:
			return None
		return match.start(), match.end()

	depth = 1
	for match in _TEMPLATE_TAG.finditer(source, start):
		if match.group("comment") is not None:
			continue
		if match.group("close"):
			depth -= 1
			if depth == 0:
				return match.start(), match.end()
		elif not match.group("selfclose"):
			depth += 1
	return None


def parse_sfc(source: str, *, identity: str | None = None) -> SectionSet:
	"""Extract every top-level style, script and template element in document order.

	Absent sections produce empty tuples. Raises ParseError when an element
	is opened but never closed.
	"""
	found: dict[SectionTag, list[Section]] = {
		"style": [],
		"script": [],
		"template": [],
	}
	pos = 0
	while True:
		match = _TOP_LEVEL.search(source, pos)
		if match is None:
			break
		if match.group("comment") is not None:
			pos = match.end()
			continue

		tag: SectionTag = match.group("tag").lower()  # pyright: ignore[reportAssignmentType]
		attributes = parse_attributes(match.group("attrs"))
		if match.group("selfclose"):
			content_end = element_end = match.end()
		else:
			closed = _find_close(source, tag, match.end())
			if closed is None:
				raise ParseError(
					f"Unterminated <{tag}> element at offset {match.start()}",
					identity=identity,
				)
			content_end, element_end = closed

		found[tag].append(
			Section(
				tag=tag,
				content=source[match.end() : content_end],
				attributes=attributes,
				outer=source[match.start() : element_end],
				offset=match.start(),
			)
		)
		pos = element_end

	return SectionSet(
		styles=tuple(found["style"]),
		scripts=tuple(found["script"]),
		templates=tuple(found["template"]),
	)


def parse_sfc_name(locator: str | None, extension: str = ".vue") -> str | None:
	"""Derive a component name from the last path segment of a locator.

	"./components/My-Button.vue" -> "my-button". Returns None when the file
	name is not a valid component name.
	"""
	if not locator:
		return None
	path = unquote(urlsplit(str(locator)).path)
	filename = path.rsplit("/", 1)[-1]
	if not filename:
		return None
	pattern = rf"^([a-z][-_a-z0-9]*)({re.escape(extension)})?$"
	match = re.match(pattern, filename, re.IGNORECASE)
	if match is None:
		return None
	return match.group(1).lower()


__all__ = [
	"Section",
	"SectionSet",
	"SectionTag",
	"parse_attributes",
	"parse_sfc",
	"parse_sfc_name",
]
