import pytest

from stdkit.bitset import BLOCK_SIZE, BitSet


def test_example():
    s = BitSet()
    s.set(13)
    s.set(45)
    s.clear(13)
    assert (s.is_set(13), s.is_set(45), s.is_set(30)) == (False, True, False)


def test_set_on_empty():
    b = BitSet()
    b.set(5)
    assert b.is_set(5)


def test_auto_resize():
    b = BitSet()
    b.set(2)
    assert b.block_count() == 1
    assert not b.is_set(500)
    b.set(500)
    assert b.is_set(2)
    assert b.is_set(500)


def test_with_capacity_block_size():
    assert BitSet.with_capacity(63).block_count() == 2


def test_with_capacity_bigger_than_block():
    assert BitSet.with_capacity(100).block_count() == 4


def test_cap_equals_size():
    b = BitSet.with_capacity(BLOCK_SIZE * 5)
    assert b.cap() == BLOCK_SIZE * 5


def test_cap_greater_than_size():
    b = BitSet.with_capacity(BLOCK_SIZE * 2 + 20)
    assert b.cap() == BLOCK_SIZE * 3


def test_clear_beyond_end_does_nothing():
    b = BitSet()
    b.clear(1000)
    assert b.block_count() == 0
    assert not b.is_set(1000)


def test_blocks_layout():
    b = BitSet.with_capacity(64)
    b.set(0)
    b.set(33)
    assert b.blocks() == [1, 2]


def test_copy_is_independent():
    original = BitSet()
    original.set(3)
    duplicate = original.copy()
    duplicate.set(4)
    original.clear(3)
    assert duplicate.is_set(3)
    assert duplicate.is_set(4)
    assert not original.is_set(4)


def test_negative_index_rejected():
    with pytest.raises(IndexError):
        BitSet().set(-1)


def test_block_value_out_of_range():
    with pytest.raises(ValueError):
        BitSet([1 << 32])