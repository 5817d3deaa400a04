"""Resolve component imports inside a script and point them at artifacts."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sfc_loader.errors import CyclicDependency
from sfc_loader.scanner import mask_code, mask_comments
from sfc_loader.sections import Section
from sfc_loader.sfc import CacheEntry

if TYPE_CHECKING:
	from sfc_loader.context import TranspileContext

logger = logging.getLogger(__name__)

_STATIC_IMPORT = re.compile(
	r"(?<![\w$.])(?P<keyword>import|export)\s*"
	+ r"(?:[\w$*{}\s,]*?\s*from\s*)?"
	+ r"(?P<quote>[\"'])(?P<path>[^\"'\n]*)(?P=quote)"
)
_DYNAMIC_IMPORT = re.compile(
	r"(?<![\w$.])(?P<keyword>import)\s*\(\s*"
	+ r"(?P<quote>[\"'`])(?P<path>[^\"'`\n]*)(?P=quote)\s*\)"
)


@dataclass(frozen=True, slots=True)
class SfcImport:
	"""A component import found in a script.

	`start`/`end` delimit the path inside its quotes; `dynamic` marks an
	`import(...)` expression.
	"""

	start: int
	end: int
	path: str
	dynamic: bool = False


@dataclass(frozen=True, slots=True)
class ResolvedScript:
	text: str
	children: tuple[str, ...]


def find_sfc_imports(script: str, extension: str = ".vue") -> list[SfcImport]:
	"""Find imports whose path ends in `extension`, in source order.

	Matches inside comments or inside string, template or regex literals
	are ignored.
	"""
	without_comments = mask_comments(script)
	code = mask_code(script)
	found: dict[int, SfcImport] = {}
	for pattern, dynamic in ((_STATIC_IMPORT, False), (_DYNAMIC_IMPORT, True)):
		pos = 0
		while (match := pattern.search(without_comments, pos)) is not None:
			keyword = match.start("keyword")
			# The keyword itself must be code, not text inside a literal
			if code[keyword : match.end("keyword")] != match.group("keyword"):
				pos = keyword + 1
				continue
			pos = match.end()
			path = match.group("path")
			if not path.endswith(extension):
				continue
			start = match.start("path")
			if start not in found:
				found[start] = SfcImport(
					start=start,
					end=match.end("path"),
					path=path,
					dynamic=dynamic,
				)
	return [found[k] for k in sorted(found)]


def rewrite_imports(
	script: str, imports: Sequence[SfcImport], locations: Sequence[str]
) -> str:
	"""Replace each import path with its location in one pass."""
	parts: list[str] = []
	pos = 0
	for imp, location in zip(imports, locations, strict=True):
		parts.append(script[pos : imp.start])
		parts.append(location)
		pos = imp.end
	parts.append(script[pos:])
	return "".join(parts)


TranspileChild = Callable[[str, tuple[str, ...]], Awaitable[CacheEntry]]


class DependencyResolver:
	"""Turns a component's script into one whose component imports point at artifacts.

	Unseen dependencies are transpiled through `transpile_child`, with the
	dependency stack extended by the child's identity. Shared dependencies
	are transpiled once: the cache hands every other importer the same
	in-flight entry.
	"""

	context: "TranspileContext"
	transpile_child: TranspileChild
	fetch: Callable[[str, str], Awaitable[str]]

	def __init__(
		self,
		context: "TranspileContext",
		transpile_child: TranspileChild,
		fetch: Callable[[str, str], Awaitable[str]],
	) -> None:
		self.context = context
		self.transpile_child = transpile_child
		self.fetch = fetch

	async def script_text(self, scripts: Sequence[Section], identity: str) -> str:
		"""Text of the last script section, external content first."""
		section = scripts[-1]
		text = section.content
		if section.src:
			text = await self.fetch(section.src, identity) + text
		return text

	async def _resolve_one(self, child: str, stack: tuple[str, ...]) -> CacheEntry:
		if child in stack:
			raise CyclicDependency((*stack, child))
		return await self.context.cache.get_or_create(
			child,
			lambda: self.transpile_child(child, (*stack, child)),
			stack=stack,
		)

	async def resolve(
		self,
		scripts: Sequence[Section],
		identity: str,
		stack: tuple[str, ...],
	) -> ResolvedScript:
		text = await self.script_text(scripts, identity)
		imports = find_sfc_imports(text, self.context.config.extension)
		if not imports:
			return ResolvedScript(text, ())

		children = [self.context.resolve_locator(imp.path, identity) for imp in imports]
		for imp, child in zip(imports, children, strict=True):
			logger.debug(
				"%s imports %s%s", identity, child, " (dynamic)" if imp.dynamic else ""
			)
		entries = await asyncio.gather(
			*(self._resolve_one(child, stack) for child in children)
		)
		rewritten = rewrite_imports(
			text, imports, [entry.artifact_location for entry in entries]
		)
		return ResolvedScript(rewritten, tuple(dict.fromkeys(children)))


__all__ = [
	"DependencyResolver",
	"ResolvedScript",
	"SfcImport",
	"find_sfc_imports",
	"rewrite_imports",
]
