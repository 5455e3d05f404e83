"""Rank-parameterized nested array container."""

from __future__ import annotations

import copy
import numbers
from collections.abc import Iterable
from functools import lru_cache
from typing import Any, ClassVar

from .sequence import IndexableSequence
from .slicing import Range, parse_slices


def _is_count(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _as_literal(data: object) -> Iterable[Any]:
    if hasattr(data, "tolist") and not isinstance(data, RankedArray):
        data = data.tolist()
    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise TypeError(f"nested literal must be a non-string iterable, got {type(data).__name__}")
    return data


class RankedArray(IndexableSequence):
    """Array of fixed rank built from nested, independently owned sequences.

    ``RankedArray[dtype, rank]`` returns the concrete class for that element
    type and rank. Rank 1 holds scalars directly (:class:`LeafArray`); higher
    ranks hold arrays of rank - 1 (:class:`NestedArray`).

    Construction:

    * ``Cls()`` builds an empty array;
    * ``Cls(n, *fill)`` fills ``n`` elements, each built from ``fill``;
    * ``Cls(other)`` copies a same-rank array or lifts a lower-rank one into a
      single outer element;
    * ``Cls(nested)`` builds from a nested literal; sibling lengths are not
      checked.
    """

    dtype: ClassVar[type] = object
    rank: ClassVar[int] = 0

    def __class_getitem__(cls, params: tuple[type, int]) -> type[RankedArray]:
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError("RankedArray[...] expects (dtype, rank)")
        dtype, rank = params
        return ranked_array_type(dtype, rank)

    def __init__(self, *args: Any) -> None:
        super().__init__()
        if type(self).rank < 1:
            raise TypeError("use RankedArray[dtype, rank] to pick a concrete array type")
        if not args:
            return
        first = args[0]
        if _is_count(first):
            n = int(first)
            if n < 0:
                raise ValueError(f"array length must be non-negative, got {n}")
            self._fill(n, args[1:])
            return
        if len(args) > 1:
            raise TypeError(f"{type(self).__name__}() takes a single nested literal or array, got {len(args)} arguments")
        if isinstance(first, RankedArray):
            self._adopt(first)
            return
        self._extend_nested(first)

    @classmethod
    def from_nested(cls, data: object) -> RankedArray:
        """Build from a nested literal; a scalar never means a fill count here."""
        if isinstance(data, RankedArray):
            return cls(data)
        out = cls()
        out._extend_nested(data)
        return out

    @classmethod
    def _from_items(cls, items: Iterable[Any]) -> RankedArray:
        out = cls()
        list.extend(out, items)
        return out

    def _adopt(self, other: RankedArray) -> None:
        if other.rank == self.rank:
            list.extend(self, other.copy())
        elif other.rank < self.rank:
            list.append(self, self.element_type(other))
        else:
            raise TypeError(f"cannot build {type(self).__name__} from an array of rank {other.rank}")

    def _fill(self, n: int, fill: tuple[Any, ...]) -> None:
        raise NotImplementedError

    def _extend_nested(self, data: object) -> None:
        raise NotImplementedError

    def _coerce_child(self, value: Any) -> Any:
        raise NotImplementedError

    def _derive_child(self, child: Any, ranges: tuple[Range, ...], axis: int) -> Any:
        raise NotImplementedError

    def tolist(self) -> list[Any]:
        raise NotImplementedError

    def is_rectangular(self) -> bool:
        raise NotImplementedError

    # Indexing: returns the stored element itself.

    def __call__(self, *indices: int) -> Any:
        if not indices:
            raise TypeError(f"{type(self).__name__}() indexing needs at least one index")
        if len(indices) > self.rank:
            raise TypeError(f"{type(self).__name__} takes at most {self.rank} indices, got {len(indices)}")
        node: Any = self
        for idx in indices:
            node = node.at(idx)
        return node

    # Slicing: always returns a new array.

    def sliced(self, spec: str) -> RankedArray:
        ranges = parse_slices(spec, self.rank)
        return self._select_axes(ranges, 0)

    def _select_axes(self, ranges: tuple[Range, ...], axis: int) -> RankedArray:
        if axis == len(ranges):
            return self.copy()
        return self._from_items(self._derive_child(child, ranges, axis + 1) for child in self.select(ranges[axis]))

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, str):
            return self.sliced(key)
        if isinstance(key, tuple):
            return self(*key)
        if isinstance(key, slice):
            return self._from_items(self._derive_child(child, (), 0) for child in list.__getitem__(self, key))
        return self(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, (str, slice)):
            raise TypeError(f"{type(self).__name__} does not support slice assignment")
        if not isinstance(key, tuple):
            key = (key,)
        if not key:
            raise TypeError("assignment needs at least one index")
        if len(key) > self.rank:
            raise TypeError(f"{type(self).__name__} takes at most {self.rank} indices, got {len(key)}")
        target = self(*key[:-1]) if len(key) > 1 else self
        target.set_at(key[-1], target._coerce_child(value))

    def append(self, value: Any) -> None:
        list.append(self, self._coerce_child(value))

    def insert(self, index: int, value: Any) -> None:
        list.insert(self, index, self._coerce_child(value))

    def extend(self, values: Iterable[Any]) -> None:
        list.extend(self, [self._coerce_child(value) for value in values])

    # Concatenation and repetition: coerced, never sharing rows with an operand.

    def _coerced_items(self, other: object) -> list[Any]:
        if isinstance(other, RankedArray):
            if other.rank != self.rank:
                raise TypeError(f"cannot concatenate {type(self).__name__} with an array of rank {other.rank}")
            return list(other.copy())
        return [self._coerce_child(value) for value in _as_literal(other)]

    def __add__(self, other: object) -> RankedArray:
        out = self.copy()
        list.extend(out, self._coerced_items(other))
        return out

    def __radd__(self, other: object) -> RankedArray:
        out = self._from_items(self._coerced_items(other))
        list.extend(out, self.copy())
        return out

    def __iadd__(self, other: object) -> RankedArray:
        list.extend(self, self._coerced_items(other))
        return self

    def __mul__(self, n: object) -> RankedArray:
        if not _is_count(n):
            return NotImplemented
        out = type(self)()
        for _ in range(int(n)):
            list.extend(out, self.copy())
        return out

    __rmul__ = __mul__

    def __imul__(self, n: object) -> RankedArray:
        if not _is_count(n):
            return NotImplemented
        items = [child for _ in range(int(n)) for child in self.copy()]
        list.clear(self)
        list.extend(self, items)
        return self

    def copy(self) -> RankedArray:
        return self._from_items(self._derive_child(child, (), 0) for child in self)

    def __copy__(self) -> RankedArray:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> RankedArray:
        return self.copy()

    @property
    def shape(self) -> tuple[int, ...]:
        """Lengths along the first element at every level; 0 below an empty axis."""
        dims: list[int] = []
        node: Any = self
        for _ in range(self.rank):
            dims.append(len(node))
            node = list.__getitem__(node, 0) if len(node) else ()
        return tuple(dims)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tolist()!r})"


class LeafArray(RankedArray):
    """Rank-1 specialization holding scalars of ``dtype`` directly."""

    rank: ClassVar[int] = 1

    def _fill(self, n: int, fill: tuple[Any, ...]) -> None:
        if len(fill) > 1:
            raise TypeError(f"{type(self).__name__} takes at most one fill value, got {len(fill)}")
        value = fill[0] if fill else self.dtype()
        list.extend(self, (copy.deepcopy(value) for _ in range(n)))

    def _extend_nested(self, data: object) -> None:
        list.extend(self, _as_literal(data))

    def _coerce_child(self, value: Any) -> Any:
        return value

    def _derive_child(self, child: Any, ranges: tuple[Range, ...], axis: int) -> Any:
        return copy.deepcopy(child)

    def tolist(self) -> list[Any]:
        return list(self)

    def is_rectangular(self) -> bool:
        return True


class NestedArray(RankedArray):
    """Rank > 1 case: every element is an array of rank - 1."""

    def _fill(self, n: int, fill: tuple[Any, ...]) -> None:
        list.extend(self, (self.element_type(*fill) for _ in range(n)))

    def _extend_nested(self, data: object) -> None:
        list.extend(self, (self.element_type.from_nested(item) for item in _as_literal(data)))

    def _coerce_child(self, value: Any) -> RankedArray:
        return self.element_type.from_nested(value)

    def _derive_child(self, child: RankedArray, ranges: tuple[Range, ...], axis: int) -> RankedArray:
        return child._select_axes(ranges, axis)

    def tolist(self) -> list[Any]:
        return [child.tolist() for child in self]

    def is_rectangular(self) -> bool:
        if not self:
            return True
        first = list.__getitem__(self, 0).shape
        return all(child.is_rectangular() and child.shape == first for child in self)


def ranked_array_type(dtype: type, rank: int) -> type[RankedArray]:
    """Return the cached array class for ``dtype`` and ``rank``."""
    if isinstance(rank, bool) or not isinstance(rank, numbers.Integral):
        raise TypeError(f"rank must be an integer, got {type(rank).__name__}")
    rank = int(rank)
    if rank < 1:
        raise ValueError(f"rank must be at least 1, got {rank}")
    return _build_array_type(dtype, rank)


@lru_cache(maxsize=None)
def _build_array_type(dtype: type, rank: int) -> type[RankedArray]:
    name = f"RankedArray[{getattr(dtype, '__name__', repr(dtype))}, {rank}]"
    if rank == 1:
        namespace = {"dtype": dtype, "element_type": dtype, "__module__": __name__, "__qualname__": name}
        return type(name, (LeafArray,), namespace)

    child = _build_array_type(dtype, rank - 1)
    namespace = {"dtype": dtype, "rank": rank, "element_type": child, "__module__": __name__, "__qualname__": name}
    return type(name, (NestedArray,), namespace)
