from __future__ import annotations

import threading


class GradientIdAllocator:
    """Monotonic id source for gradient definitions within an output document."""

    def __init__(self, start: int = 0) -> None:
        self._lock = threading.Lock()
        self._counter = int(start)

    def next_id(self, prefix: str = "gradient") -> str:
        with self._lock:
            self._counter += 1
            value = self._counter
        return f"{prefix}-{value}"

    @property
    def current(self) -> int:
        with self._lock:
            return self._counter


_GLOBAL_ALLOCATOR = GradientIdAllocator()


def next_gradient_id(prefix: str = "gradient") -> str:
    return _GLOBAL_ALLOCATOR.next_id(prefix)
