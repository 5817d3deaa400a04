from dataclasses import dataclass, field

from sfc_loader.artifacts import ArtifactStore, MemoryArtifactStore
from sfc_loader.cache import DependencyCache
from sfc_loader.config import TranspilerConfig
from sfc_loader.loaders import (
	ContentLoader,
	LocatorResolver,
	close_loader,
	default_loader,
	load_content,
	resolve_locator,
)
from sfc_loader.scope import ScopeAllocator


@dataclass
class TranspileContext:
	"""Everything a transpilation reads or mutates, passed explicitly.

	- config: TranspilerConfig
	- loader: fetches component and `src` content
	- artifacts: where generated modules are published
	- cache: single-flight map of identity -> transpiled component
	- scopes: scope id allocator shared by every component of this context
	- resolve_locator: canonicalizes a reference against a base identity

	Independent contexts hold independent dependency graphs.
	"""

	config: TranspilerConfig = field(default_factory=TranspilerConfig)
	loader: ContentLoader = field(default_factory=default_loader)
	artifacts: ArtifactStore = field(default_factory=MemoryArtifactStore)
	cache: DependencyCache = field(default_factory=DependencyCache)
	scopes: ScopeAllocator | None = None
	resolve_locator: LocatorResolver = resolve_locator

	def __post_init__(self) -> None:
		if self.scopes is None:
			self.scopes = ScopeAllocator(self.config.scope_prefix)

	@property
	def scope_allocator(self) -> ScopeAllocator:
		assert self.scopes is not None
		return self.scopes

	async def fetch(self, locator: str, base: str | None = None) -> str:
		"""Load `locator` (resolved against `base`) under the configured policy."""
		resolved = self.resolve_locator(locator, base)
		return await load_content(self.loader, resolved, self.config.on_load_error)

	async def aclose(self) -> None:
		"""Release the loader's resources, such as its HTTP client."""
		await close_loader(self.loader)


__all__ = ["TranspileContext"]
