# stdkit

A handful of small utilities with no dependencies outside the standard library:

- **`stdkit.atomic`**: thread-safe `AtomicBool`, `AtomicUint32` and `AtomicInt32`
  values with `load`, `store` and `compare_and_swap`, plus a `NonBlockingLock`
  that offers `try_lock()` and `release()` and never waits.
- **`stdkit.bitset`**: `BitSet`, a growable set of bits stored in 32-bit blocks.
- **`stdkit.compact_array`**: `CompactArray`, a fixed-length array of small unsigned
  integers packed into a `BitSet`, with JSON round-tripping, and `bits_needed`.
- **`stdkit.sync_set`**: `SyncSet`, a thread-safe set that may be changed while
  it is being iterated over.
- **`stdkit.auto_refresh`**: `AutoRefreshCache`, a bounded LRU cache whose items are
  refreshed by background threads through a sync callback you supply.
- **`stdkit.pflag_tag`**: parsing of `json:"..." pflag:"..."` struct-field tags
  (`parse_tag`) and small naming helpers (`capitalize`, `camel_case`,
  `append_accessors`).

## Installation

```
pip install .
```

## Examples

### Atomics

```python
from stdkit.atomic import AtomicBool, AtomicInt32, NonBlockingLock

flag = AtomicBool(False)
flag.toggle()                       # returns False; flag is now True
flag.compare_and_swap(True, False)  # True; flag is now False

counter = AtomicInt32(2)
counter.inc()                       # 3
counter.sub(5)                      # -2

lock = NonBlockingLock()
if lock.try_lock():
    try:
        ...
    finally:
        lock.release()
```

`AtomicUint32` and `AtomicInt32` wrap around on overflow in `add`, `inc`,
`sub` and `dec`; `store`, `compare_and_swap` and the constructor raise
`ValueError` for a value outside the 32-bit range.

### Bit sets and compact arrays

```python
from stdkit.bitset import BitSet
from stdkit.compact_array import CompactArray, bits_needed

bits = BitSet.with_capacity(100)   # 4 blocks
bits.set(45)
bits.is_set(45)      # True
bits.set(500)        # grows as needed
bits.cap()           # number of bits the current blocks hold

bits_needed(7)       # 3

arr = CompactArray(2, max_value=15)   # two items, 4 bits each
arr.set_item(0, 8)
arr.set_item(1, 3)
arr.get_items()      # [8, 3]
str(arr)             # "[8, 3, ]"

raw = arr.to_json()
other = CompactArray(2, max_value=15)
other.load_json(raw)
```

An index outside the array raises `IndexError`; a value too large for the
item size raises `ValueError`. Items may also be read and written with
`arr[i]`, and `copy()` gives an independent array.

### Thread-safe set

```python
from stdkit.sync_set import SyncSet

s = SyncSet()
s.insert("a")
"a" in s          # True
for key in s:     # iterates over a snapshot
    s.remove(key)
```

### Auto-refresh cache

```python
from stdkit.auto_refresh import (
    AutoRefreshCache, ItemNotFoundError, ItemSyncResponse, SyncAction,
)

def sync(batch):
    return [
        ItemSyncResponse(w.id, w.item + 1, SyncAction.UPDATE)
        for w in batch if w.item < 10
    ]

with AutoRefreshCache("counters", sync, resync_period=0.001,
                      parallelism=4, size=100) as cache:
    cache.get_or_create("a", 0)
    ...
    try:
        value = cache.get("a")
    except ItemNotFoundError:
        value = None
```

Every `resync_period` seconds a snapshot of the cache is split into batches
(one item per batch unless a `create_batches` callable is given) and queued;
`parallelism` worker threads pass each batch to the sync callback and store
the items it returns with `SyncAction.UPDATE`. A callback that raises is
counted in `cache.metrics.sync_errors` and the batch is dropped.

Items added beyond `size` evict the least recently used ones. After
`delete_delayed(item_id)` the item is left out of further sync batches and is
removed once a worker next finishes syncing a batch; until then `get` and
`get_or_create` still return it. `cache.metrics` counts hits, misses,
evictions, sync errors and syncs. Use `start()` and `stop()` instead of the
`with` block if you prefer; starting a cache twice raises `RuntimeError`.

### Struct tags

```python
from stdkit.pflag_tag import parse_tag, append_accessors

tag = parse_tag('json:"str" pflag:"\\"hello\\",This is a string"')
tag.name           # "str"
tag.default_value  # '"hello"'
tag.usage          # '"This is a string"'

append_accessors("var1", "field1", "subField")   # "var1.field1.subField"
```

A malformed tag raises `TagParseError`.

## What this package does not do

`stdkit.pflag_tag` only parses tags and builds names. There is no command
and no code generator here: nothing inspects types or writes flag-set
source files.

## Running the tests

```
pip install .[test]
pytest
```