from __future__ import annotations

from dataclasses import dataclass

from sfc_loader.sections import SectionSet


@dataclass(frozen=True, slots=True)
class SFCObject:
	"""A fully processed component.

	Built once, after its module has been generated and published, and never
	modified afterwards.

	Attributes:
		identity: Canonical locator of the source; the cache key.
		name: Component name derived from the identity, if it has one.
		sections: The parsed style/script/template sections.
		scope_id: Present iff at least one style section is scoped.
		style_text: Merged (and partially scoped) CSS.
		template_text: Merged template.
		script_text: Script of the last script section with component
			imports redirected to artifact locations.
		children: Identities of imported components, in import order.
		generated_code: The final module source.
		artifact_location: Where `generated_code` was published.
	"""

	identity: str
	name: str | None
	sections: SectionSet
	scope_id: str | None
	style_text: str
	template_text: str
	script_text: str
	children: tuple[str, ...]
	generated_code: str
	artifact_location: str

	@property
	def scoped(self) -> bool:
		return self.scope_id is not None


@dataclass(frozen=True, slots=True)
class CacheEntry:
	identity: str
	artifact_location: str
	sfc: SFCObject


__all__ = ["CacheEntry", "SFCObject"]
