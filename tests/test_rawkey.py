import json
import os
import tempfile

import pytest

from vsdag.orphan import Orphan
from vsdag.rawkey import DagMapRawKey, PickleCodec

os.environ.setdefault("VSDAG_BASE_DIR", tempfile.mkdtemp(prefix="vsdag-test-"))


def enc(value):
    return PickleCodec().encode(value)


def test_dagmaprawkey_functions():
    i0 = DagMapRawKey(Orphan(None))
    i0.insert("k0", b"v0")
    assert i0.get("k0") == b"v0"
    assert i0.get("k1") is None
    i0_raw = Orphan(i0.into_inner())

    i1 = DagMapRawKey(i0_raw)
    i1.insert("k1", b"v1")
    assert i1.get("k1") == b"v1"
    assert i1.get("k0") == b"v0"
    i1_raw = Orphan(i1.into_inner())

    i2 = DagMapRawKey(i1_raw)
    i2.insert("k2", b"v2")
    assert i2.get("k2") == b"v2"
    assert i2.get("k1") == b"v1"
    assert i2.get("k0") == b"v0"
    i2.insert("k2", b"v2x")
    assert i2.get("k2") == b"v2x"
    assert i2.get("k1") == b"v1"
    assert i2.get("k0") == b"v0"
    i2.insert("k1", b"v1x")
    assert i2.get("k2") == b"v2x"
    assert i2.get("k1") == b"v1x"
    assert i2.get("k0") == b"v0"
    i2.insert("k0", b"v0x")
    assert i2.get("k2") == b"v2x"
    assert i2.get("k1") == b"v1x"
    assert i2.get("k0") == b"v0x"

    assert i1_raw.get_value().get("k2") is None
    assert i1_raw.get_value().get("k1") == enc(b"v1")
    assert i1_raw.get_value().get("k0") == enc(b"v0")

    assert i0_raw.get_value().get("k2") is None
    assert i0_raw.get_value().get("k1") is None
    assert i0_raw.get_value().get("k0") == enc(b"v0")

    head = i2.prune()

    assert head.get("k2") == b"v2x"
    assert head.get("k1") == b"v1x"
    assert head.get("k0") == b"v0x"

    assert i1_raw.get_value() is None
    assert i0_raw.get_value() is None

    # prune with a deep stack
    for i in range(10, 256):
        head.insert(bytes([i]), bytes([i]))
        head = DagMapRawKey(Orphan(head.into_inner()))

    head = head.prune()

    for i in range(10, 256):
        assert head.get(bytes([i])) == bytes([i])

    for i in range(0, 255):
        head.remove(bytes([i]))
        assert head.get(bytes([i])) is None

    with head.get_mut(bytes([255])) as slot:
        slot.value = bytes([0])
    assert head.get(bytes([255])) == bytes([0])


class JsonCodec:
    def encode(self, value):
        return json.dumps(value).encode("utf-8")

    def decode(self, data):
        return json.loads(data)


def test_custom_codec_is_used_for_storage():
    m = DagMapRawKey(Orphan(None), JsonCodec())
    m.insert("k", {"a": [1, 2]})
    assert m.get("k") == {"a": [1, 2]}
    assert m.into_inner().get("k") == JsonCodec().encode({"a": [1, 2]})


def test_insert_and_remove_return_previous_values():
    m = DagMapRawKey(Orphan(None))
    assert m.insert("k", [1]) is None
    assert m.insert("k", [2]) == [1]
    assert m.remove("k") == [2]
    assert m.remove("k") is None
    assert m.get_mut("k") is None


def test_typed_value_mut_commit_and_abort():
    m = DagMapRawKey(Orphan(None))
    m.insert("k", {"n": 1})
    with m.get_mut("k") as slot:
        slot.value["n"] = 5
    assert m.get("k") == {"n": 5}

    with pytest.raises(RuntimeError):
        with m.get_mut("k") as slot:
            slot.value["n"] = 9
            raise RuntimeError("abort")
    assert m.get("k") == {"n": 5}


def test_shadow_and_destroy():
    m = DagMapRawKey(Orphan(None))
    twin = m.shadow()
    twin.insert("k", 7)
    assert m.get("k") == 7
    assert m.is_the_same_instance(twin)
    assert m.shadow_inner().is_the_same_instance(m.into_inner())
    m.destroy()
    assert twin.is_dead()


def test_prune_children_on_typed_map():
    root = DagMapRawKey(Orphan(None))
    root_raw = Orphan(root.into_inner())
    child = DagMapRawKey(root_raw)
    child.insert("x", 1)
    assert not root.no_children()
    root.prune_children_include([])
    assert child.get("x") == 1
    root.prune_children_exclude([])
    assert root.no_children()
    assert child.is_dead()