"""Single-flight cache of transpiled components.

Every identity gets exactly one entry: an asyncio future installed by the
first caller, with no suspension between the lookup and the install. Later
callers await that same future. A failed entry stays failed until evicted.

The cache also tracks which identities each in-flight transpilation is
waiting on, so that joining a placeholder that (transitively) waits on the
joiner is reported as a cycle instead of deadlocking.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter, deque
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType

from sfc_loader.errors import CyclicDependency
from sfc_loader.sfc import CacheEntry

logger = logging.getLogger(__name__)


def _retrieve(future: asyncio.Future[CacheEntry]) -> None:
	# Failures reach the owner directly; mark them retrieved for lone futures
	if not future.cancelled():
		future.exception()


class DependencyCache:
	_entries: dict[str, asyncio.Future[CacheEntry]]
	_waits: dict[str, Counter[str]]

	def __init__(self) -> None:
		self._entries = {}
		self._waits = {}

	def _wait_path(self, source: str, target: str) -> list[str] | None:
		"""Shortest chain of waits from `source` to `target`, both included."""
		queue: deque[list[str]] = deque([[source]])
		seen = {source}
		while queue:
			path = queue.popleft()
			if path[-1] == target:
				return path
			for nxt in self._waits.get(path[-1], ()):
				if nxt not in seen:
					seen.add(nxt)
					queue.append([*path, nxt])
		return None

	async def get_or_create(
		self,
		identity: str,
		factory: Callable[[], Awaitable[CacheEntry]],
		*,
		stack: tuple[str, ...] = (),
	) -> CacheEntry:
		"""Return the entry for `identity`, creating it with `factory` if absent.

		`stack` is the dependency chain of the caller; its last identity is
		recorded as waiting on `identity` while the entry is in flight.
		"""
		waiter = stack[-1] if stack else None
		future = self._entries.get(identity)
		owner = future is None
		if future is None:
			future = asyncio.get_running_loop().create_future()
			future.add_done_callback(_retrieve)
			self._entries[identity] = future
			logger.debug("Cache miss for %s", identity)
		else:
			logger.debug("Cache hit for %s", identity)
			if waiter is not None and not future.done():
				path = self._wait_path(identity, waiter)
				if path is not None:
					raise CyclicDependency((*stack, *path))

		if waiter is not None:
			self._waits.setdefault(waiter, Counter())[identity] += 1
		try:
			if not owner:
				return await future
			try:
				entry = await factory()
			except asyncio.CancelledError:
				# A cancelled transpilation leaves no entry behind
				future.cancel()
				if self._entries.get(identity) is future:
					del self._entries[identity]
				raise
			except BaseException as exc:
				future.set_exception(exc)
				raise
			future.set_result(entry)
			return entry
		finally:
			if waiter is not None:
				waits = self._waits.get(waiter)
				if waits is not None:
					waits[identity] -= 1
					if waits[identity] <= 0:
						del waits[identity]
					if not waits:
						del self._waits[waiter]

	def get(self, identity: str) -> CacheEntry | None:
		"""The settled, successful entry for `identity`, if any."""
		future = self._entries.get(identity)
		if future is None or not future.done() or future.cancelled():
			return None
		if future.exception() is not None:
			return None
		return future.result()

	def failed(self, identity: str) -> BaseException | None:
		future = self._entries.get(identity)
		if future is None or not future.done() or future.cancelled():
			return None
		return future.exception()

	def entries(self) -> Mapping[str, CacheEntry]:
		"""Read-only view of every successfully transpiled identity."""
		resolved: dict[str, CacheEntry] = {}
		for identity in self._entries:
			entry = self.get(identity)
			if entry is not None:
				resolved[identity] = entry
		return MappingProxyType(resolved)

	def in_flight(self) -> list[str]:
		return [k for k, f in self._entries.items() if not f.done()]

	def graph(self) -> dict[str, tuple[str, ...]]:
		"""Dependency graph of the settled entries: identity -> children."""
		return {k: entry.sfc.children for k, entry in self.entries().items()}

	def evict(self, identity: str) -> None:
		"""Forget a settled entry so the next request transpiles it afresh."""
		future = self._entries.get(identity)
		if future is None:
			return
		if not future.done():
			raise RuntimeError(f"Cannot evict {identity} while it is in flight")
		del self._entries[identity]

	def clear(self) -> None:
		"""Forget every settled entry. In-flight entries are kept."""
		for identity in [k for k, f in self._entries.items() if f.done()]:
			del self._entries[identity]

	def __contains__(self, identity: object) -> bool:
		return identity in self._entries

	def __len__(self) -> int:
		return len(self._entries)


__all__ = ["DependencyCache"]
