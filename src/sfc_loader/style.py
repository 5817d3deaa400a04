"""Merge a component's style sections, scoping the ones marked `scoped`."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, replace

import tinycss2
import tinycss2.ast

from sfc_loader.scope import ScopeAllocator
from sfc_loader.sections import Section

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[str]]

# At-rules whose block holds ordinary rules that must be scoped too
_GROUPING_AT_RULES = {"media", "supports", "container", "layer", "document"}


@dataclass(frozen=True, slots=True)
class CssRule:
	"""A top-level rule of a style sheet.

	Qualified rules have `selectors` and a declaration `body`. At-rules keep
	their keyword and prelude; grouping at-rules (`@media`, ...) carry their
	nested rules in `rules`, every other at-rule is kept verbatim in `source`.
	"""

	selectors: tuple[str, ...] = ()
	body: str | None = None
	at_keyword: str | None = None
	prelude: str = ""
	rules: tuple["CssRule", ...] = ()
	source: str = ""

	@property
	def selector(self) -> str:
		if self.at_keyword is not None:
			return f"@{self.at_keyword}{self.prelude}".rstrip()
		return ", ".join(self.selectors)

	@property
	def is_grouping(self) -> bool:
		return self.at_keyword is not None and self.body is None and bool(self.rules)

	def serialize(self) -> str:
		if self.at_keyword is None:
			return f"{self.selector} {{{self.body or ''}}}"
		if self.is_grouping:
			inner = "\n".join(rule.serialize() for rule in self.rules)
			return f"{self.selector} {{\n{inner}\n}}"
		return self.source


@dataclass(frozen=True, slots=True)
class StyleResult:
	scope_id: str | None
	css: str


def _split_selectors(prelude: list[tinycss2.ast.Node]) -> tuple[str, ...]:
	selectors: list[str] = []
	current: list[tinycss2.ast.Node] = []
	for token in prelude:
		if token.type == "literal" and token.value == ",":
			selectors.append(tinycss2.serialize(current).strip())
			current = []
		else:
			current.append(token)
	selectors.append(tinycss2.serialize(current).strip())
	return tuple(s for s in selectors if s)


def _convert(nodes: Iterable[tinycss2.ast.Node]) -> list[CssRule]:
	rules: list[CssRule] = []
	for node in nodes:
		if node.type == "qualified-rule":
			rules.append(
				CssRule(
					selectors=_split_selectors(node.prelude),
					body=tinycss2.serialize(node.content),
				)
			)
		elif node.type == "at-rule":
			keyword = node.lower_at_keyword
			if keyword in _GROUPING_AT_RULES and node.content is not None:
				nested = tinycss2.parse_rule_list(
					node.content, skip_comments=True, skip_whitespace=True
				)
				rules.append(
					CssRule(
						at_keyword=node.at_keyword,
						prelude=tinycss2.serialize(node.prelude),
						rules=tuple(_convert(nested)),
						source=node.serialize(),
					)
				)
			else:
				rules.append(
					CssRule(
						at_keyword=node.at_keyword,
						prelude=tinycss2.serialize(node.prelude),
						source=node.serialize(),
					)
				)
		elif node.type == "error":
			logger.debug("Dropping invalid CSS (%s): %s", node.kind, node.message)
	return rules


def parse_rules(css: str) -> list[CssRule]:
	"""Parse a style sheet into its ordered top-level rules. Comments are dropped."""
	nodes = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
	return _convert(nodes)


def scope_rule(rule: CssRule, scope_id: str) -> CssRule:
	"""Append `[scope_id]` to every selector of `rule`, recursing into groups."""
	if rule.at_keyword is None:
		return replace(
			rule, selectors=tuple(f"{s}[{scope_id}]" for s in rule.selectors)
		)
	if rule.is_grouping:
		return replace(rule, rules=tuple(scope_rule(r, scope_id) for r in rule.rules))
	return rule


def scope_css(css: str, scope_id: str) -> str:
	rules = parse_rules(css)
	return "".join(scope_rule(rule, scope_id).serialize() + "\n" for rule in rules)


async def process_styles(
	sections: Sequence[Section],
	scopes: ScopeAllocator,
	fetch: Fetch | None = None,
) -> StyleResult:
	"""Merge style sections in document order.

	Unscoped sections are copied verbatim. Scoped sections share one scope
	id, allocated on first need, and have every selector suffixed with it.
	External `src` content is placed before the section's inline text.
	"""
	scope_id: str | None = None
	parts: list[str] = []
	for section in sections:
		text = section.content
		if section.src and fetch is not None:
			text = await fetch(section.src) + text
		if not section.scoped:
			parts.append(text)
			continue
		if scope_id is None:
			scope_id = scopes.allocate()
		parts.append(scope_css(text, scope_id))
	return StyleResult(scope_id=scope_id, css="".join(parts))


__all__ = [
	"CssRule",
	"StyleResult",
	"parse_rules",
	"process_styles",
	"scope_css",
	"scope_rule",
]
