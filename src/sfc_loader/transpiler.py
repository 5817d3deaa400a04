"""Turn single-file components into published ES modules.

`Transpiler.transpile` is the entry point: it parses the sections, runs the
style, template and dependency preprocessing concurrently, generates the
module, publishes it and returns the code with its immutable SFCObject.
Component imports are transpiled recursively through the context's
single-flight cache.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from sfc_loader.artifacts import Artifact
from sfc_loader.codegen import binding_name, generate
from sfc_loader.context import TranspileContext
from sfc_loader.errors import CyclicDependency, ParseError
from sfc_loader.resolver import DependencyResolver
from sfc_loader.sections import parse_sfc, parse_sfc_name
from sfc_loader.sfc import CacheEntry, SFCObject
from sfc_loader.style import process_styles
from sfc_loader.template import process_templates

logger = logging.getLogger(__name__)


class Transpiler:
	context: TranspileContext
	resolver: DependencyResolver

	def __init__(self, context: TranspileContext | None = None) -> None:
		self.context = context or TranspileContext()
		self.resolver = DependencyResolver(
			self.context, self._transpile_identity, self._fetch
		)

	async def _fetch(self, locator: str, base: str) -> str:
		return await self.context.fetch(locator, base)

	async def _transpile_identity(
		self, identity: str, stack: tuple[str, ...]
	) -> CacheEntry:
		source = await self.context.fetch(identity)
		return await self._transpile_source(source, identity, stack)

	async def transpile(
		self,
		source: str,
		stack: tuple[str, ...] = (),
		*,
		identity: str | None = None,
	) -> tuple[str, SFCObject]:
		"""Transpile component `source` into a published module.

		`identity` locates the source and is the base for its relative
		imports; it defaults to the configured root identity. `stack` is the
		chain of identities that led here, used to detect cycles.

		With an explicit `identity` the result is recorded in the cache, so
		components importing that identity reuse it instead of fetching it.
		A cached identity is not transpiled again.
		"""
		ctx = self.context
		explicit = identity is not None
		identity = ctx.resolve_locator(identity or ctx.config.root_identity)
		if stack and stack[-1] == identity:
			stack = stack[:-1]
		if identity in stack:
			raise CyclicDependency((*stack, identity))
		chain = (*stack, identity)

		if not explicit:
			entry = await self._transpile_source(source, identity, chain)
		else:
			entry = await ctx.cache.get_or_create(
				identity,
				lambda: self._transpile_source(source, identity, chain),
				stack=stack,
			)
		return entry.sfc.generated_code, entry.sfc

	async def _transpile_source(
		self, source: str, identity: str, stack: tuple[str, ...]
	) -> CacheEntry:
		ctx = self.context
		sections = parse_sfc(source, identity=identity)
		if not sections.scripts:
			raise ParseError("No script section", identity=identity)

		fetch = partial(self._fetch, base=identity)
		style, template, script = await asyncio.gather(
			process_styles(sections.styles, ctx.scope_allocator, fetch),
			process_templates(sections.templates, fetch),
			self.resolver.resolve(sections.scripts, identity, stack),
		)

		code = generate(
			script.text,
			template,
			style.scope_id,
			style.css,
			binding=binding_name(identity),
			config=ctx.config,
			identity=identity,
		)
		location = ctx.artifacts.publish(code)
		logger.debug("Transpiled %s -> %s", identity, location)

		sfc = SFCObject(
			identity=identity,
			name=parse_sfc_name(identity, ctx.config.extension),
			sections=sections,
			scope_id=style.scope_id,
			style_text=style.css,
			template_text=template,
			script_text=script.text,
			children=script.children,
			generated_code=code,
			artifact_location=location,
		)
		return CacheEntry(identity, location, sfc)

	async def transpile_locator(
		self, locator: str, stack: tuple[str, ...] = ()
	) -> tuple[str, SFCObject]:
		"""Transpile the component at `locator`, through the cache.

		The content is fetched once; later requests for the same identity
		return the cached result.
		"""
		identity = self.context.resolve_locator(locator, stack[-1] if stack else None)
		if identity in stack:
			raise CyclicDependency((*stack, identity))
		entry = await self.context.cache.get_or_create(
			identity,
			lambda: self._transpile_identity(identity, (*stack, identity)),
			stack=stack,
		)
		return entry.sfc.generated_code, entry.sfc

	def load_artifact(self, location: str) -> Artifact:
		return self.context.artifacts.load(location)


async def transpile(
	source: str,
	stack: tuple[str, ...] = (),
	*,
	identity: str | None = None,
	context: TranspileContext | None = None,
) -> tuple[str, SFCObject]:
	"""Transpile `source` with a one-off Transpiler over `context`."""
	return await Transpiler(context).transpile(source, stack, identity=identity)


__all__ = ["Transpiler", "transpile"]
