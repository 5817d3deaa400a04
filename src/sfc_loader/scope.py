import random
import threading
import time


class ScopeAllocator:
	"""Issues scope ids that never repeat for the lifetime of the allocator.

	Ids look like `data-v-1a2b3c4d`: four hex digits from the clock and four
	random ones. Every issued id is remembered; a colliding candidate is
	discarded and a new one drawn. Checking and registering happen under a
	single lock.
	"""

	prefix: str
	_issued: set[str]
	_lock: threading.Lock
	_random: random.Random

	def __init__(self, prefix: str = "data-v-", *, seed: int | None = None) -> None:
		self.prefix = prefix
		self._issued = set()
		self._lock = threading.Lock()
		self._random = random.Random(seed)

	def _candidate(self) -> str:
		clock = (time.time_ns() // 1_000_000) % 65535
		noise = self._random.randint(1, 65535)
		return f"{self.prefix}{clock:04x}{noise:04x}"

	def allocate(self) -> str:
		with self._lock:
			candidate = self._candidate()
			while candidate in self._issued:
				candidate = self._candidate()
			self._issued.add(candidate)
			return candidate

	@property
	def issued(self) -> frozenset[str]:
		with self._lock:
			return frozenset(self._issued)

	def __contains__(self, scope_id: object) -> bool:
		with self._lock:
			return scope_id in self._issued

	def __len__(self) -> int:
		with self._lock:
			return len(self._issued)


__all__ = ["ScopeAllocator"]
