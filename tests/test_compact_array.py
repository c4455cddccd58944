import json
import random

import pytest

from stdkit.compact_array import CompactArray, bits_needed


@pytest.mark.parametrize("item_size", range(1, 60))
def test_new_item_array(item_size):
    rng = random.Random(item_size)
    max_item_value = 1 << (item_size - 1)
    items_count = min(200, max_item_value)
    arr = CompactArray(items_count, 1 << (item_size - 1))

    expected = []
    for i in range(items_count):
        val = rng.getrandbits(64) % (1 << (item_size - 1))
        arr.set_item(i, val // 3)
        arr.set_item(i, val)
        expected.append(val)

    assert arr.get_items() == expected


def test_marshal():
    item_array = CompactArray(105, 7)
    for idx in range(len(item_array.get_items())):
        item_array.set_item(idx, 4)

    raw = item_array.to_json()
    as_map = json.loads(raw)
    raw = json.dumps(as_map)

    actual = CompactArray(105, 7)
    actual.load_json(raw)
    items = actual.get_items()
    assert len(items) == 105
    assert all(item == 4 for item in items)


def test_get_items():
    item_array = CompactArray(2, 15)
    item_array.set_item(0, 3)
    item_array.set_item(1, 3)
    item_array.set_item(0, 8)
    assert item_array.get_item(0) == 8
    assert item_array.get_item(1) == 3


def test_string():
    item_array = CompactArray(2, 15)
    item_array.set_item(0, 3)
    item_array.set_item(1, 3)
    item_array.set_item(0, 8)
    assert str(item_array) == "[8, 3, ]"


def test_size():
    item_array = CompactArray(5000, 7)
    assert len(item_array.to_json()) == 348


def test_out_of_bounds():
    item_array = CompactArray(5, 3)
    assert item_array.get_item(0) == 0
    assert item_array.get_item(4) == 0
    with pytest.raises(IndexError):
        item_array.get_item(-1)
    with pytest.raises(IndexError):
        item_array.get_item(5)


def test_oversized_value():
    item_array = CompactArray(5, 3)
    with pytest.raises(ValueError):
        item_array.set_item(0, 4)
    for value in range(4):
        item_array.set_item(0, value)
        assert item_array.get_item(0) == value


def test_bits_needed():
    assert bits_needed(1) == 1
    assert bits_needed(2) == 2
    assert bits_needed(3) == 2
    assert bits_needed(4) == 3
    assert bits_needed(5) == 3
    assert bits_needed(6) == 3
    assert bits_needed(7) == 3
    assert bits_needed(8) == 4


def test_item_size_too_large():
    with pytest.raises(ValueError):
        CompactArray(1, 1 << 63)


def test_len_and_copy():
    arr = CompactArray(3, 7)
    arr.set_item(1, 5)
    clone = arr.copy()
    clone.set_item(1, 2)
    assert len(arr) == 3
    assert arr.get_item(1) == 5
    assert clone.get_item(1) == 2


def test_bit_layout_is_msb_first():
    arr = CompactArray(2, 7)
    arr.set_item(0, 1)
    assert arr.bitset.blocks() == [1 << 2]


def test_load_json_rejects_non_object():
    with pytest.raises(ValueError):
        CompactArray(1, 1).load_json("[1, 2]")