from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

ErrorCode = Literal[
	"sfc",
	"parse",
	"generate",
	"generate.export",
	"cycle",
	"load",
	"artifact",
]


class SfcError(Exception):
	"""Base class for every failure raised while transpiling a component."""

	code: ErrorCode = "sfc"
	identity: str | None

	def __init__(self, message: str, *, identity: str | None = None) -> None:
		self.identity = identity
		if identity is not None:
			message = f"{message} (in {identity})"
		super().__init__(message)


class ParseError(SfcError):
	"""The source could not be split into sections, or lacks a script section."""

	code: ErrorCode = "parse"


class GenerationError(SfcError):
	"""The script could not be turned into a module."""

	code: ErrorCode = "generate"


class DefaultExportError(GenerationError, ParseError):
	"""The script has zero or several `export default` markers."""

	code: ErrorCode = "generate.export"
	count: int

	def __init__(self, count: int, *, identity: str | None = None) -> None:
		self.count = count
		if count == 0:
			message = "Script section has no `export default`"
		else:
			message = f"Script section has {count} `export default` markers, expected 1"
		super().__init__(message, identity=identity)


class CyclicDependency(SfcError):
	"""A component imports itself, directly or through other components."""

	code: ErrorCode = "cycle"
	chain: tuple[str, ...]

	def __init__(self, chain: Sequence[str]) -> None:
		self.chain = tuple(chain)
		super().__init__("Cyclic dependency: " + " -> ".join(self.chain))


class ContentLoadError(SfcError):
	"""Content for a locator could not be fetched."""

	code: ErrorCode = "load"
	locator: str

	def __init__(self, locator: str, reason: str | None = None) -> None:
		self.locator = locator
		message = f"Failed to load {locator}"
		if reason:
			message += f": {reason}"
		super().__init__(message)


class ArtifactNotFound(SfcError, KeyError):
	"""No artifact is published under the requested location."""

	code: ErrorCode = "artifact"
	location: str

	def __init__(self, location: str) -> None:
		self.location = location
		super().__init__(f"No artifact published at {location}")

	def __str__(self) -> str:
		return Exception.__str__(self)


__all__ = [
	"ArtifactNotFound",
	"ContentLoadError",
	"CyclicDependency",
	"DefaultExportError",
	"ErrorCode",
	"GenerationError",
	"ParseError",
	"SfcError",
]
