# Public API re-exports
from sfc_loader.artifacts import (
	Artifact,
	ArtifactStore,
	DataUrlArtifactStore,
	MemoryArtifactStore,
)
from sfc_loader.cache import DependencyCache
from sfc_loader.config import TranspilerConfig
from sfc_loader.context import TranspileContext
from sfc_loader.errors import (
	ArtifactNotFound,
	ContentLoadError,
	CyclicDependency,
	DefaultExportError,
	GenerationError,
	ParseError,
	SfcError,
)
from sfc_loader.loaders import (
	ContentLoader,
	FileContentLoader,
	HttpContentLoader,
	MemoryContentLoader,
	RoutingContentLoader,
	resolve_locator,
)
from sfc_loader.scope import ScopeAllocator
from sfc_loader.sections import Section, SectionSet, parse_sfc, parse_sfc_name
from sfc_loader.sfc import CacheEntry, SFCObject
from sfc_loader.style import CssRule, StyleResult, parse_rules, process_styles
from sfc_loader.template import process_templates
from sfc_loader.transpiler import Transpiler, transpile

__all__ = [
	"Artifact",
	"ArtifactNotFound",
	"ArtifactStore",
	"CacheEntry",
	"ContentLoadError",
	"ContentLoader",
	"CssRule",
	"CyclicDependency",
	"DataUrlArtifactStore",
	"DefaultExportError",
	"DependencyCache",
	"FileContentLoader",
	"GenerationError",
	"HttpContentLoader",
	"MemoryArtifactStore",
	"MemoryContentLoader",
	"ParseError",
	"RoutingContentLoader",
	"SFCObject",
	"ScopeAllocator",
	"Section",
	"SectionSet",
	"SfcError",
	"StyleResult",
	"TranspileContext",
	"Transpiler",
	"TranspilerConfig",
	"parse_rules",
	"parse_sfc",
	"parse_sfc_name",
	"process_styles",
	"process_templates",
	"resolve_locator",
	"transpile",
]
