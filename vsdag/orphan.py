"""A single value held in a storage slot that several handles may share."""

from __future__ import annotations

import operator
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class _Slot:
    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value


def _unwrap(item: Any) -> Any:
    return item.get_value() if isinstance(item, Orphan) else item


def _binary(op: Callable[[Any, Any], Any]) -> Callable[["Orphan", Any], Any]:
    def method(self: "Orphan", other: Any) -> Any:
        return op(self.get_value(), _unwrap(other))

    return method


def _reflected(op: Callable[[Any, Any], Any]) -> Callable[["Orphan", Any], Any]:
    def method(self: "Orphan", other: Any) -> Any:
        return op(_unwrap(other), self.get_value())

    return method


def _inplace(op: Callable[[Any, Any], Any]) -> Callable[["Orphan", Any], "Orphan"]:
    def method(self: "Orphan", other: Any) -> "Orphan":
        self.set_value(op(self.get_value(), _unwrap(other)))
        return self

    return method


def _unary(op: Callable[[Any], Any]) -> Callable[["Orphan"], Any]:
    def method(self: "Orphan") -> Any:
        return op(self.get_value())

    return method


class Orphan(Generic[T]):
    """Holds one value; shadows of an orphan read and write the same slot."""

    __slots__ = ("_slot",)

    def __init__(self, value: T) -> None:
        self._slot = _Slot(value)

    def get_value(self) -> T:
        """Return the stored value."""
        return self._slot.value

    def set_value(self, value: T) -> None:
        """Replace the stored value, visible through every shadow."""
        self._slot.value = value

    def shadow(self) -> "Orphan[T]":
        """Return another handle that shares this orphan's storage."""
        twin = Orphan.__new__(Orphan)
        twin._slot = self._slot
        return twin

    def __repr__(self) -> str:
        return f"Orphan({self.get_value()!r})"

    __eq__ = _binary(operator.eq)  # type: ignore[assignment]
    __ne__ = _binary(operator.ne)  # type: ignore[assignment]
    __lt__ = _binary(operator.lt)
    __le__ = _binary(operator.le)
    __gt__ = _binary(operator.gt)
    __ge__ = _binary(operator.ge)
    __hash__ = None  # type: ignore[assignment]

    __add__ = _binary(operator.add)
    __sub__ = _binary(operator.sub)
    __mul__ = _binary(operator.mul)
    __truediv__ = _binary(operator.truediv)
    __floordiv__ = _binary(operator.floordiv)
    __mod__ = _binary(operator.mod)
    __lshift__ = _binary(operator.lshift)
    __rshift__ = _binary(operator.rshift)
    __and__ = _binary(operator.and_)
    __or__ = _binary(operator.or_)
    __xor__ = _binary(operator.xor)

    __radd__ = _reflected(operator.add)
    __rsub__ = _reflected(operator.sub)
    __rmul__ = _reflected(operator.mul)
    __rtruediv__ = _reflected(operator.truediv)
    __rfloordiv__ = _reflected(operator.floordiv)
    __rmod__ = _reflected(operator.mod)
    __rlshift__ = _reflected(operator.lshift)
    __rrshift__ = _reflected(operator.rshift)
    __rand__ = _reflected(operator.and_)
    __ror__ = _reflected(operator.or_)
    __rxor__ = _reflected(operator.xor)

    __iadd__ = _inplace(operator.add)
    __isub__ = _inplace(operator.sub)
    __imul__ = _inplace(operator.mul)
    __itruediv__ = _inplace(operator.truediv)
    __ifloordiv__ = _inplace(operator.floordiv)
    __imod__ = _inplace(operator.mod)
    __ilshift__ = _inplace(operator.lshift)
    __irshift__ = _inplace(operator.rshift)
    __iand__ = _inplace(operator.and_)
    __ior__ = _inplace(operator.or_)
    __ixor__ = _inplace(operator.xor)

    __neg__ = _unary(operator.neg)
    __pos__ = _unary(operator.pos)
    __invert__ = _unary(operator.invert)