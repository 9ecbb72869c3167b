"""A layered map with byte keys and values encoded by a codec."""

from __future__ import annotations

import pickle
from typing import Any, Generic, Iterable, Optional, Protocol, TypeVar

from vsdag.orphan import Orphan
from vsdag.raw import DagMapRaw, ValueMut

V = TypeVar("V")


class Codec(Protocol):
    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...


class PickleCodec:
    """Encodes values with pickle."""

    def encode(self, value: Any) -> bytes:
        return pickle.dumps(value)

    def decode(self, data: bytes) -> Any:
        return pickle.loads(data)


class DagMapRawKey(Generic[V]):
    """A DAG map whose values are encoded objects rather than raw bytes."""

    def __init__(
        self,
        raw_parent: Optional[Orphan[Optional[DagMapRaw]]] = None,
        codec: Optional[Codec] = None,
    ) -> None:
        self._inner = DagMapRaw(raw_parent)
        self._codec: Codec = codec if codec is not None else PickleCodec()

    @classmethod
    def _wrap(cls, inner: DagMapRaw, codec: Codec) -> "DagMapRawKey[V]":
        obj = cls.__new__(cls)
        obj._inner = inner
        obj._codec = codec
        return obj

    def _decode(self, data: Optional[bytes]) -> Optional[V]:
        if not data:
            return None
        return self._codec.decode(data)

    def into_inner(self) -> DagMapRaw:
        return self._inner

    def shadow_inner(self) -> DagMapRaw:
        return self._inner.shadow()

    def shadow(self) -> "DagMapRawKey[V]":
        return self._wrap(self.shadow_inner(), self._codec)

    def is_dead(self) -> bool:
        return self._inner.is_dead()

    def no_children(self) -> bool:
        return self._inner.no_children()

    def get(self, key: Any) -> Optional[V]:
        return self._decode(self._inner.get(key))

    def get_mut(self, key: Any) -> Optional["TypedValueMut"]:
        raw = self._inner.get_mut(key)
        if raw is None or not raw.value:
            return None
        return TypedValueMut(raw, self._codec)

    def insert(self, key: Any, value: V) -> Optional[V]:
        return self._decode(self._inner.insert(key, self._codec.encode(value)))

    def remove(self, key: Any) -> Optional[V]:
        return self._decode(self._inner.remove(key))

    def prune(self) -> "DagMapRawKey[V]":
        """Fold the mainline into its genesis node and return that node."""
        return self._wrap(self._inner.prune(), self._codec)

    def prune_children_include(self, include_targets: Iterable[Any]) -> None:
        self._inner.prune_children_include(include_targets)

    def prune_children_exclude(self, exclude_targets: Iterable[Any]) -> None:
        self._inner.prune_children_exclude(exclude_targets)

    def destroy(self) -> None:
        self._inner.destroy()

    def is_the_same_instance(self, other: "DagMapRawKey[V]") -> bool:
        return self._inner.is_the_same_instance(other._inner)


class TypedValueMut:
    """An editable decoded value, encoded and written back on commit."""

    def __init__(self, inner: ValueMut, codec: Codec) -> None:
        self.inner = inner
        self.codec = codec
        self.value = codec.decode(inner.value)

    def __enter__(self) -> "TypedValueMut":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.commit()

    def commit(self) -> None:
        self.inner.value = self.codec.encode(self.value)
        self.inner.commit()