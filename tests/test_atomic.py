import threading

import pytest

from stdkit.atomic import AtomicBool, AtomicInt32, AtomicUint32, NonBlockingLock


def test_bool():
    atom = AtomicBool(False)
    assert atom.toggle() is False
    assert atom.load() is True

    assert atom.compare_and_swap(True, True) is True
    assert atom.load() is True
    assert atom.compare_and_swap(True, False) is True
    assert atom.load() is False
    assert atom.compare_and_swap(True, False) is False
    assert atom.load() is False

    atom.store(False)
    assert atom.load() is False

    assert atom.swap(False) is False
    assert atom.swap(True) is False
    assert atom.load() is True


def test_bool_toggle_twice_restores():
    atom = AtomicBool(True)
    assert atom.toggle() is True
    assert atom.toggle() is False
    assert atom.load() is True


def test_int32():
    atom = AtomicInt32(2)
    assert atom.compare_and_swap(3, 4) is False
    assert atom.load() == 2

    assert atom.compare_and_swap(2, 2) is True
    assert atom.load() == 2
    assert atom.compare_and_swap(2, 4) is True
    assert atom.load() == 4
    assert atom.compare_and_swap(2, 3) is False
    assert atom.load() == 4

    atom.store(5)
    assert atom.load() == 5


def test_int32_arithmetic():
    atom = AtomicInt32(0)
    assert atom.inc() == 1
    assert atom.add(10) == 11
    assert atom.sub(4) == 7
    assert atom.dec() == 6
    assert atom.load() == 6


def test_int32_wraps():
    atom = AtomicInt32(2**31 - 1)
    assert atom.inc() == -(2**31)
    assert atom.dec() == 2**31 - 1


def test_int32_rejects_out_of_range_store():
    atom = AtomicInt32(0)
    with pytest.raises(ValueError):
        atom.store(2**31)
    assert atom.load() == 0


def test_uint32():
    atom = AtomicUint32(2)
    assert atom.compare_and_swap(3, 4) is False
    assert atom.load() == 2

    assert atom.compare_and_swap(2, 2) is True
    assert atom.load() == 2
    assert atom.compare_and_swap(2, 4) is True
    assert atom.load() == 4
    assert atom.compare_and_swap(2, 3) is False
    assert atom.load() == 4

    atom.store(5)
    assert atom.load() == 5


def test_uint32_arithmetic_and_wrap():
    atom = AtomicUint32(2**32 - 1)
    assert atom.inc() == 0
    assert atom.add(7) == 7


def test_uint32_rejects_negative():
    with pytest.raises(ValueError):
        AtomicUint32(-1)


def test_concurrent_increments():
    atom = AtomicInt32(0)

    def worker():
        for _ in range(1000):
            atom.inc()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert atom.load() == 8000


def test_non_blocking_lock():
    lock = NonBlockingLock()
    assert lock.try_lock() is True
    assert lock.try_lock() is False
    lock.release()
    assert lock.try_lock() is True


def test_non_blocking_lock_release_unheld():
    lock = NonBlockingLock()
    lock.release()
    assert lock.try_lock() is True