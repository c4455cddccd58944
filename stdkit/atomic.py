"""Small thread-safe primitives: booleans, 32-bit counters and a try-lock."""

from __future__ import annotations

import threading

_UINT32_MOD = 1 << 32
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def _wrap_uint32(value: int) -> int:
    return value % _UINT32_MOD


def _wrap_int32(value: int) -> int:
    return (value - _INT32_MIN) % _UINT32_MOD + _INT32_MIN


def _check_uint32(value: int) -> int:
    if not 0 <= value < _UINT32_MOD:
        raise ValueError(f"value {value} does not fit in an unsigned 32-bit integer")
    return value


def _check_int32(value: int) -> int:
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"value {value} does not fit in a signed 32-bit integer")
    return value


class AtomicBool:
    """A boolean whose operations are atomic with respect to other threads."""

    def __init__(self, initial: bool = False) -> None:
        self._value = bool(initial)
        self._lock = threading.Lock()

    def load(self) -> bool:
        with self._lock:
            return self._value

    def compare_and_swap(self, old: bool, new: bool) -> bool:
        """Set the value to ``new`` if it currently equals ``old``; report success."""
        with self._lock:
            if self._value != bool(old):
                return False
            self._value = bool(new)
            return True

    def store(self, new: bool) -> None:
        with self._lock:
            self._value = bool(new)

    def swap(self, new: bool) -> bool:
        """Set the value and return the previous one."""
        with self._lock:
            previous = self._value
            self._value = bool(new)
            return previous

    def toggle(self) -> bool:
        """Negate the value and return the previous one."""
        with self._lock:
            previous = self._value
            self._value = not previous
            return previous

    def __bool__(self) -> bool:
        return self.load()

    def __repr__(self) -> str:
        return f"AtomicBool({self.load()})"


class AtomicUint32:
    """An unsigned 32-bit integer with atomic operations; arithmetic wraps around."""

    def __init__(self, value: int = 0) -> None:
        self._value = _check_uint32(value)
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def compare_and_swap(self, old: int, new: int) -> bool:
        _check_uint32(new)
        with self._lock:
            if self._value != old:
                return False
            self._value = new
            return True

    def add(self, delta: int) -> int:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value = _wrap_uint32(self._value + delta)
            return self._value

    def inc(self) -> int:
        return self.add(1)

    def store(self, value: int) -> None:
        _check_uint32(value)
        with self._lock:
            self._value = value

    def __repr__(self) -> str:
        return f"AtomicUint32({self.load()})"


class AtomicInt32:
    """A signed 32-bit integer with atomic operations; arithmetic wraps around."""

    def __init__(self, value: int = 0) -> None:
        self._value = _check_int32(value)
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def compare_and_swap(self, old: int, new: int) -> bool:
        _check_int32(new)
        with self._lock:
            if self._value != old:
                return False
            self._value = new
            return True

    def add(self, delta: int) -> int:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value = _wrap_int32(self._value + delta)
            return self._value

    def sub(self, delta: int) -> int:
        """Subtract ``delta`` and return the new value."""
        return self.add(-delta)

    def inc(self) -> int:
        return self.add(1)

    def dec(self) -> int:
        return self.add(-1)

    def store(self, value: int) -> None:
        _check_int32(value)
        with self._lock:
            self._value = value

    def __repr__(self) -> str:
        return f"AtomicInt32({self.load()})"


class NonBlockingLock:
    """A lock that is only ever tried, never waited on.

    Releasing a lock that is not held is allowed and has no effect.
    """

    def __init__(self) -> None:
        self._held = AtomicBool(False)

    def try_lock(self) -> bool:
        """Acquire the lock if it is free; return whether it was acquired."""
        return self._held.compare_and_swap(False, True)

    def release(self) -> None:
        self._held.store(False)