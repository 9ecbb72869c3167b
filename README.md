# vsdag

Layered key-value maps arranged as a directed acyclic graph.

Each `DagMapRaw` (in `vsdag.raw`) holds its own byte-to-byte entries and may
have a parent. A lookup that misses in a node falls through to its parent,
then to that parent's parent, and so on. A child is registered with its
parent under a unique 16-byte id, so a node can fork into several branches.
When a branch is settled, `prune()` folds the chain of ancestors and the node
itself into the oldest ancestor, drops that ancestor's other branches and
returns it as the new head.

`DagMapRawKey` (in `vsdag.rawkey`) is the same structure with typed values:
keys stay raw bytes, and values go through a codec, `PickleCodec` by default.
Any object with `encode(value) -> bytes` and `decode(data) -> value` methods
can be passed as `codec`.

Keys and raw values may be given as `bytes`, `bytearray`, `memoryview` or
`str`; a `str` is encoded as UTF-8. Values are returned as `bytes`.

## Installation

```
pip install vsdag
```

## Usage

```python
from vsdag.orphan import Orphan
from vsdag.raw import DagMapRaw

root = DagMapRaw(Orphan(None))
root.insert(b"k0", b"v0")

child = DagMapRaw(Orphan(root))
child.insert(b"k1", b"v1")

assert child.get(b"k0") == b"v0"   # read through from the parent
assert root.get(b"k1") is None     # the parent does not see the child

child.remove(b"k0")                # hides the key in this layer only
assert child.get(b"k0") is None
assert root.get(b"k0") == b"v0"

head = child.prune()               # fold the chain into the root
assert head.get(b"k1") == b"v1"
assert head.get(b"k0") is None
```

`insert` and `remove` return the value previously stored in that node
itself, or `None`. A removal stores an empty value, which masks the key in
the parents; an empty value therefore always reads as `None`.

Editing a value stored in a node goes through `get_mut`, which returns a
`ValueMut` (or `None` if the node itself holds no entry for the key). Used
as a context manager, it writes the new value back when the block ends
without an exception; `commit()` does the same by hand:

```python
with head.get_mut(b"k1") as slot:
    slot.value = b"changed"
assert head.get(b"k1") == b"changed"
```

Typed values:

```python
from vsdag.orphan import Orphan
from vsdag.rawkey import DagMapRawKey

base = DagMapRawKey(Orphan(None))
base.insert(b"height", 42)
top = DagMapRawKey(Orphan(base.into_inner()))
assert top.get(b"height") == 42

with top.get_mut(b"height") as slot:   # None for keys top itself lacks
    slot.value += 1
```

`DagMapRawKey.get_mut` returns a `TypedValueMut`, which decodes the value and
encodes it again on commit.

## Orphan

`vsdag.orphan.Orphan` holds a single value. `get_value()` and `set_value()`
read and replace it, and `shadow()` returns another handle onto the same
slot, so a change through one handle is seen through all of them. An orphan
compares and does arithmetic and bitwise operations like the value it holds,
including the in-place forms (`+=`, `<<=`, `^=` and so on), which store the
result back.

Parents are passed to `DagMapRaw` wrapped in an `Orphan`; the node keeps a
shadow of it, and pruning clears a discarded node's parent through that
shared slot.

## Branch management

- `prune_children_include(ids)` drops the listed children.
- `prune_children_exclude(ids)` drops every child not listed.
- `destroy()` clears a node and all of its descendants.
- `is_dead()` tells whether a node has no data, no parent and no children.
- `no_children()` tells whether a node has no children.
- `shadow()` returns another handle on the same node's storage, and
  `is_the_same_instance(other)` tells whether two handles share it.

## Child ids

Child ids are 16-byte big-endian numbers produced by
`vsdag.ids.gen_dag_map_id_num()`. The counter is kept in a text file named
`id_num` in the `__CUSTOM__` directory under `$VSDAG_BASE_DIR`, or under
`~/.vsdag` when that variable is unset, so ids stay unique across runs.
`IdCounter(path)` gives a counter bound to a file of your choice; its
`next()` advances and saves it.

## What it does not do

The maps live in memory only. Apart from the id counter file, nothing is
written to disk, and a map's contents are gone when the process ends.

## Running the tests

```
pip install -e .[test]
pytest
```