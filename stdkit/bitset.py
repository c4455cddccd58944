"""A growable set of bits stored in 32-bit blocks."""

from __future__ import annotations

from collections.abc import Iterable

BLOCK_SIZE = 32
_BLOCK_MASK = (1 << BLOCK_SIZE) - 1


class BitSet:
    """A set of bits that can be set, cleared and queried."""

    def __init__(self, blocks: Iterable[int] | None = None) -> None:
        self._blocks: list[int] = []
        for block in blocks or ():
            block = int(block)
            if not 0 <= block <= _BLOCK_MASK:
                raise ValueError(f"block value {block} does not fit in {BLOCK_SIZE} bits")
            self._blocks.append(block)

    @classmethod
    def with_capacity(cls, desired_cap: int) -> "BitSet":
        """Create a bit set with enough blocks to hold ``desired_cap`` bits."""
        if desired_cap < 0:
            raise ValueError("capacity must not be negative")
        return cls([0] * ((desired_cap - 1) // BLOCK_SIZE + 1))

    def set(self, i: int) -> None:
        """Ensure bit ``i`` is set, growing the set if needed."""
        self._check_index(i)
        block, bit = divmod(i, BLOCK_SIZE)
        if len(self._blocks) < block + 1:
            self._blocks.extend([0] * (block + 1))
        self._blocks[block] |= 1 << bit

    def clear(self, i: int) -> None:
        """Ensure bit ``i`` is cleared."""
        self._check_index(i)
        block, bit = divmod(i, BLOCK_SIZE)
        if block < len(self._blocks):
            self._blocks[block] &= ~(1 << bit) & _BLOCK_MASK

    def is_set(self, i: int) -> bool:
        self._check_index(i)
        block, bit = divmod(i, BLOCK_SIZE)
        if block >= len(self._blocks):
            return False
        return bool(self._blocks[block] & (1 << bit))

    def block_count(self) -> int:
        return len(self._blocks)

    def cap(self) -> int:
        """Number of bits the current blocks can hold."""
        return len(self._blocks) * BLOCK_SIZE

    def blocks(self) -> list[int]:
        """A copy of the underlying blocks."""
        return list(self._blocks)

    def copy(self) -> "BitSet":
        return BitSet(self._blocks)

    def __contains__(self, i: object) -> bool:
        return isinstance(i, int) and i >= 0 and self.is_set(i)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSet):
            return NotImplemented
        return self._blocks == other._blocks

    def __repr__(self) -> str:
        return f"BitSet({self._blocks!r})"

    @staticmethod
    def _check_index(i: int) -> None:
        if i < 0:
            raise IndexError(f"bit index {i} must not be negative")