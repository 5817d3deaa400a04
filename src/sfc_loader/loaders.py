"""Content fetching and locator resolution.

Locators are either URLs (`https://host/app/Button.vue`, `memory:///a.vue`)
or filesystem paths. Identities are the canonical, absolute form of a
locator: two spellings of the same document resolve to one identity.
"""

from __future__ import annotations

import logging
import os
import posixpath
from collections import Counter
from collections.abc import Mapping
from typing import Protocol
from urllib.parse import SplitResult, unquote, urlsplit

import anyio
import httpx

from sfc_loader.config import LoadErrorPolicy
from sfc_loader.errors import ContentLoadError

logger = logging.getLogger(__name__)


class ContentLoader(Protocol):
	async def load(self, locator: str) -> str: ...


class LocatorResolver(Protocol):
	def __call__(self, path: str, base: str | None = None) -> str: ...


def _has_scheme(parts: SplitResult) -> bool:
	# Single letters are Windows drive letters, not schemes
	return len(parts.scheme) > 1


def _build_url(parts: SplitResult, path: str) -> str:
	url = parts.scheme.lower() + ":"
	if parts.netloc or path.startswith("/"):
		url += "//" + parts.netloc.lower()
	url += path
	if parts.query:
		url += "?" + parts.query
	if parts.fragment:
		url += "#" + parts.fragment
	return url


def _normalize_url_path(path: str) -> str:
	if not path:
		return "/"
	normalized = posixpath.normpath(path)
	if normalized.startswith("//"):
		normalized = "/" + normalized.lstrip("/")
	if path.endswith("/") and not normalized.endswith("/"):
		normalized += "/"
	return normalized


def resolve_locator(path: str, base: str | None = None) -> str:
	"""Canonicalize `path`, resolving it against the identity `base` when relative.

	URLs keep their scheme and host and get dot segments removed. Paths
	without a scheme are filesystem paths made absolute against the
	directory of `base` (or the working directory).
	"""
	parts = urlsplit(path)
	if _has_scheme(parts):
		if not parts.netloc and not parts.path.startswith("/"):
			# Opaque URLs (blob:, data:) have no path to normalize
			return _build_url(parts, parts.path)
		return _build_url(parts, _normalize_url_path(parts.path))

	base_parts = urlsplit(base) if base is not None else None
	if base_parts is None or not _has_scheme(base_parts):
		root = os.path.dirname(base) if base is not None else os.getcwd()
		return os.path.normpath(os.path.join(os.path.abspath(root), path))

	if path.startswith("//"):
		return resolve_locator(f"{base_parts.scheme}:{path}")
	if parts.path.startswith("/"):
		joined = parts.path
	elif not parts.path:
		joined = base_parts.path
	else:
		directory = posixpath.dirname(base_parts.path) or "/"
		joined = posixpath.join(directory, parts.path)
	resolved = base_parts._replace(
		query=parts.query if parts.path or parts.query else base_parts.query,
		fragment=parts.fragment,
	)
	return _build_url(resolved, _normalize_url_path(joined))


class MemoryContentLoader:
	"""Serves content from a mapping of locator to text. Counts fetches."""

	files: dict[str, str]
	fetches: Counter[str]

	def __init__(self, files: Mapping[str, str] | None = None) -> None:
		self.files = dict(files or {})
		self.fetches = Counter()

	def add(self, locator: str, content: str) -> None:
		self.files[locator] = content

	async def load(self, locator: str) -> str:
		self.fetches[locator] += 1
		try:
			return self.files[locator]
		except KeyError:
			raise ContentLoadError(locator, "not found") from None


class FileContentLoader:
	"""Reads local files, given as paths or `file://` URLs."""

	encoding: str

	def __init__(self, encoding: str = "utf-8") -> None:
		self.encoding = encoding

	async def load(self, locator: str) -> str:
		parts = urlsplit(locator)
		path = unquote(parts.path) if parts.scheme == "file" else locator
		try:
			return await anyio.Path(path).read_text(encoding=self.encoding)
		except (OSError, UnicodeDecodeError) as exc:
			raise ContentLoadError(locator, str(exc)) from exc


class HttpContentLoader:
	"""Fetches `http(s)` locators with a shared httpx client."""

	timeout: float
	_client: httpx.AsyncClient | None

	def __init__(
		self, client: httpx.AsyncClient | None = None, timeout: float = 30.0
	) -> None:
		self.timeout = timeout
		self._client = client

	@property
	def client(self) -> httpx.AsyncClient:
		"""Lazy initialization of HTTP client."""
		if self._client is None:
			self._client = httpx.AsyncClient(
				timeout=httpx.Timeout(self.timeout),
				follow_redirects=True,
			)
		return self._client

	async def load(self, locator: str) -> str:
		try:
			response = await self.client.get(locator)
			response.raise_for_status()
		except httpx.HTTPError as exc:
			raise ContentLoadError(locator, str(exc)) from exc
		return response.text

	async def aclose(self) -> None:
		if self._client is not None:
			await self._client.aclose()
			self._client = None


class RoutingContentLoader:
	"""Dispatches to a loader by locator scheme. Paths count as `file`."""

	routes: dict[str, ContentLoader]

	def __init__(self, routes: Mapping[str, ContentLoader]) -> None:
		self.routes = {scheme.lower(): loader for scheme, loader in routes.items()}

	async def load(self, locator: str) -> str:
		parts = urlsplit(locator)
		scheme = parts.scheme.lower() if _has_scheme(parts) else "file"
		loader = self.routes.get(scheme)
		if loader is None:
			raise ContentLoadError(locator, f"no loader for scheme {scheme!r}")
		return await loader.load(locator)

	async def aclose(self) -> None:
		"""Close every routed loader that holds resources, once each."""
		seen: set[int] = set()
		for loader in self.routes.values():
			if id(loader) in seen:
				continue
			seen.add(id(loader))
			await close_loader(loader)


async def close_loader(loader: object) -> None:
	aclose = getattr(loader, "aclose", None)
	if aclose is not None:
		await aclose()


def default_loader() -> RoutingContentLoader:
	http = HttpContentLoader()
	return RoutingContentLoader(
		{"file": FileContentLoader(), "http": http, "https": http}
	)


async def load_content(
	loader: ContentLoader, locator: str, policy: LoadErrorPolicy = "degrade"
) -> str:
	"""Fetch `locator`, applying the load-failure policy.

	With 'degrade' a failure is logged and empty content returned. With
	'fail' it raises ContentLoadError.
	"""
	try:
		return await loader.load(locator)
	except ContentLoadError as exc:
		if policy == "fail":
			raise
		logger.warning("%s; continuing with empty content", exc)
		return ""
	except Exception as exc:
		if policy == "fail":
			raise ContentLoadError(locator, str(exc)) from exc
		logger.warning(
			"Failed to load %s (%s); continuing with empty content", locator, exc
		)
		return ""


__all__ = [
	"ContentLoader",
	"FileContentLoader",
	"HttpContentLoader",
	"LocatorResolver",
	"MemoryContentLoader",
	"RoutingContentLoader",
	"close_loader",
	"default_loader",
	"load_content",
	"resolve_locator",
]
