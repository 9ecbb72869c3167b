"""A layered byte map: each map sees its own writes over its parents'."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from vsdag.ids import gen_dag_map_id_num
from vsdag.orphan import Orphan


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes or str, got {type(data).__name__}")


class DagMapRaw:
    """A node of a DAG of byte maps; reads fall through to the parent chain."""

    def __init__(self, parent: Optional[Orphan[Optional["DagMapRaw"]]] = None) -> None:
        if parent is None:
            parent = Orphan(None)
        self._data: dict[bytes, bytes] = {}
        self._parent: Orphan[Optional[DagMapRaw]] = parent.shadow()
        self._children: dict[bytes, DagMapRaw] = {}

        p = parent.get_value()
        if p is not None:
            child_id = gen_dag_map_id_num().to_bytes(16, "big")
            if child_id in p._children:
                raise RuntimeError("child id already exists")
            p._children[child_id] = self.shadow()

    @classmethod
    def _from_parts(
        cls,
        data: dict[bytes, bytes],
        parent: Orphan[Optional["DagMapRaw"]],
        children: dict[bytes, "DagMapRaw"],
    ) -> "DagMapRaw":
        node = cls.__new__(cls)
        node._data = data
        node._parent = parent
        node._children = children
        return node

    def shadow(self) -> "DagMapRaw":
        """Return another handle to the same underlying storage."""
        return self._from_parts(self._data, self._parent.shadow(), self._children)

    def is_dead(self) -> bool:
        """True when the node holds no data, no parent and no children."""
        return not self._data and self._parent.get_value() is None and self.no_children()

    def no_children(self) -> bool:
        return not self._children

    def get(self, key: Any) -> Optional[bytes]:
        """Look the key up here, then up the parent chain; removed keys read as None."""
        key = _as_bytes(key)
        node: Optional[DagMapRaw] = self
        while node is not None:
            value = node._data.get(key)
            if value is not None:
                return value or None
            node = node._parent.get_value()
        return None

    def get_mut(self, key: Any) -> Optional["ValueMut"]:
        """Return an editable view of a value stored in this node itself."""
        key = _as_bytes(key)
        value = self._data.get(key)
        if value is None:
            return None
        return ValueMut(self, key, value)

    def insert(self, key: Any, value: Any) -> Optional[bytes]:
        """Store a value in this node and return the one it replaced."""
        key = _as_bytes(key)
        old = self._data.get(key)
        self._data[key] = _as_bytes(value)
        return old

    def remove(self, key: Any) -> Optional[bytes]:
        """Mask the key in this node, hiding any value held by the parents."""
        return self.insert(key, b"")

    def prune(self) -> "DagMapRaw":
        """Fold the whole mainline into its genesis node and return that node."""
        first = self._parent.get_value()
        if first is None:
            return self

        line = [first]
        while (ancestor := line[-1]._parent.get_value()) is not None:
            line.append(ancestor)
        genesis = line[-1]

        for node in reversed(line[:-1]):
            genesis._data.update(node._data)
        genesis._data.update(self._data)

        kept = []
        for child_id, child in sorted(self._children.items()):
            child._parent.set_value(genesis.shadow())
            genesis._children[child_id] = child
            kept.append(child_id)

        self._parent.set_value(None)
        self._data.clear()
        self._children.clear()

        genesis.prune_children_exclude(kept)
        return genesis

    def prune_children_include(self, include_targets: Iterable[Any]) -> None:
        """Drop the children whose ids are listed."""
        self._prune_children(include_targets, exclude_mode=False)

    def prune_children_exclude(self, exclude_targets: Iterable[Any]) -> None:
        """Drop the children whose ids are not listed."""
        self._prune_children(exclude_targets, exclude_mode=True)

    def _prune_children(self, targets: Iterable[Any], exclude_mode: bool) -> None:
        wanted = {_as_bytes(t) for t in targets}
        dropped = [
            (child_id, child)
            for child_id, child in sorted(self._children.items())
            if (child_id in wanted) != exclude_mode
        ]
        for child_id, _ in dropped:
            del self._children[child_id]
        for _, child in dropped:
            child.destroy()

    def destroy(self) -> None:
        """Drop all data of this node and of every descendant."""
        pending = [self]
        while pending:
            node = pending.pop()
            node._parent.set_value(None)
            node._data.clear()
            children = list(node._children.values())
            node._children.clear()
            pending.extend(children)

    def is_the_same_instance(self, other: "DagMapRaw") -> bool:
        return self._data is other._data

    def __repr__(self) -> str:
        return f"DagMapRaw(keys={len(self._data)}, children={len(self._children)})"


class ValueMut:
    """An editable copy of a stored value, written back on commit."""

    def __init__(self, owner: DagMapRaw, key: bytes, value: bytes) -> None:
        self.owner = owner
        self.key = key
        self.value = value

    def __enter__(self) -> "ValueMut":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.commit()

    def commit(self) -> None:
        """Write the current value back into the owning map."""
        self.owner.insert(self.key, self.value)