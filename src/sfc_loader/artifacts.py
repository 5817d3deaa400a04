"""Publishing generated modules as loadable in-memory artifacts."""

from __future__ import annotations

import base64
import logging
import uuid
from dataclasses import dataclass
from typing import Protocol

from sfc_loader.errors import ArtifactNotFound

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:text/javascript;base64,"


@dataclass(frozen=True, slots=True)
class Artifact:
	"""A published module: where it lives and its source text."""

	location: str
	code: str


class ArtifactStore(Protocol):
	def publish(self, code: str) -> str: ...
	def load(self, location: str) -> Artifact: ...


class MemoryArtifactStore:
	"""Keeps artifacts in memory under `blob:sfc/<uuid>` locations.

	Code is stored as given; syntax errors only surface when a module loader
	evaluates it.
	"""

	prefix: str
	_artifacts: dict[str, Artifact]

	def __init__(self, prefix: str = "blob:sfc/") -> None:
		self.prefix = prefix
		self._artifacts = {}

	def publish(self, code: str) -> str:
		location = f"{self.prefix}{uuid.uuid4()}"
		self._artifacts[location] = Artifact(location, code)
		logger.debug("Published artifact %s (%d chars)", location, len(code))
		return location

	def load(self, location: str) -> Artifact:
		try:
			return self._artifacts[location]
		except KeyError:
			raise ArtifactNotFound(location) from None

	def revoke(self, location: str) -> None:
		self._artifacts.pop(location, None)

	def __contains__(self, location: object) -> bool:
		return location in self._artifacts

	def __len__(self) -> int:
		return len(self._artifacts)


class DataUrlArtifactStore:
	"""Publishes self-contained `data:` URLs that any `import()` can load."""

	def publish(self, code: str) -> str:
		encoded = base64.b64encode(code.encode("utf-8")).decode("ascii")
		return DATA_URL_PREFIX + encoded

	def load(self, location: str) -> Artifact:
		if not location.startswith(DATA_URL_PREFIX):
			raise ArtifactNotFound(location)
		try:
			raw = base64.b64decode(location[len(DATA_URL_PREFIX) :], validate=True)
			code = raw.decode("utf-8")
		except ValueError:
			raise ArtifactNotFound(location) from None
		return Artifact(location, code)


__all__ = [
	"DATA_URL_PREFIX",
	"Artifact",
	"ArtifactStore",
	"DataUrlArtifactStore",
	"MemoryArtifactStore",
]
