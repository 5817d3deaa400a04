from collections.abc import Awaitable, Callable, Sequence

from sfc_loader.sections import Section


async def process_templates(
	sections: Sequence[Section],
	fetch: Callable[[str], Awaitable[str]] | None = None,
) -> str:
	"""Concatenate template sections in document order and strip the result.

	A section with a `src` reference contributes the referenced content
	followed by its own inline content. Nothing is escaped here.
	"""
	parts: list[str] = []
	for section in sections:
		if section.src and fetch is not None:
			parts.append(await fetch(section.src))
		parts.append(section.content)
	return "".join(parts).strip()


__all__ = ["process_templates"]
