"""An array of small unsigned integers packed into a bit set."""

from __future__ import annotations

import json

from stdkit.bitset import BitSet

ITEM_BITS = 64
_MAX_ITEM = (1 << ITEM_BITS) - 1


def bits_needed(max_value: int) -> int:
    """Number of bits needed to represent every value from 0 to ``max_value``."""
    if not 0 <= max_value <= _MAX_ITEM:
        raise ValueError(f"max value {max_value} must be within 0 and {_MAX_ITEM}")
    return max_value.bit_length()


class CompactArray:
    """A fixed-length array of unsigned items, each stored in ``item_size`` bits."""

    def __init__(self, size: int, max_value: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        item_size = bits_needed(max_value)
        if item_size >= ITEM_BITS:
            raise ValueError("invalid item size, must be less than the size of an item")
        self.bitset = BitSet.with_capacity(size)
        self.item_size = item_size
        self.items_count = size

    def _validate_index(self, index: int) -> None:
        if index < 0 or index >= self.items_count:
            raise IndexError(
                f"Attempt to access index [{index}] in CompactArray of size [{self.items_count}]"
            )

    def _validate_value(self, value: int) -> None:
        max_value = (1 << self.item_size) - 1
        if value < 0 or value > max_value:
            raise ValueError(f"Value [{value}] is too big. Max value is [{max_value}].")

    def _bit_positions(self, index: int):
        # Most significant bit first: the lowest bit of an item sits last.
        base = index * self.item_size
        return enumerate(range(base + self.item_size - 1, base - 1, -1))

    def set_item(self, index: int, value: int) -> None:
        self._validate_index(index)
        self._validate_value(value)
        for shift, bit in self._bit_positions(index):
            if value >> shift & 1:
                self.bitset.set(bit)
            else:
                self.bitset.clear(bit)

    def get_item(self, index: int) -> int:
        self._validate_index(index)
        return sum(
            1 << shift for shift, bit in self._bit_positions(index) if self.bitset.is_set(bit)
        )

    def get_items(self) -> list[int]:
        return [self.get_item(i) for i in range(self.items_count)]

    def __getitem__(self, index: int) -> int:
        return self.get_item(index)

    def __setitem__(self, index: int, value: int) -> None:
        self.set_item(index, value)

    def __iter__(self):
        return iter(self.get_items())

    def __len__(self) -> int:
        return self.items_count

    def __str__(self) -> str:
        return "[" + "".join(f"{item}, " for item in self.get_items()) + "]"

    def __repr__(self) -> str:
        return f"CompactArray(item_size={self.item_size}, items={self.get_items()})"

    def copy(self) -> "CompactArray":
        clone = CompactArray.__new__(CompactArray)
        clone.bitset = self.bitset.copy()
        clone.item_size = self.item_size
        clone.items_count = self.items_count
        return clone

    def to_json(self) -> str:
        """Serialise to compact JSON: the raw blocks, item size and count."""
        data: dict = {"BitSet": self.bitset.blocks()}
        if self.item_size:
            data["item"] = self.item_size
        if self.items_count:
            data["count"] = self.items_count
        return json.dumps(data, separators=(",", ":"))

    def load_json(self, raw: str | bytes) -> None:
        """Overwrite this array with the fields found in ``raw``."""
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        if "BitSet" in data:
            blocks = data["BitSet"]
            if blocks is not None and not isinstance(blocks, list):
                raise ValueError("BitSet must be a list of blocks")
            self.bitset = BitSet(blocks)
        if "item" in data:
            item_size = int(data["item"])
            if not 0 <= item_size < ITEM_BITS:
                raise ValueError(f"invalid item size {item_size}")
            self.item_size = item_size
        if "count" in data:
            count = int(data["count"])
            if count < 0:
                raise ValueError(f"invalid item count {count}")
            self.items_count = count