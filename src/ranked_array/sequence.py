"""Growable sequence with negative-index-aware access and type-level rendering."""

from __future__ import annotations

import numbers
import os
from collections.abc import Iterator
from functools import cache
from typing import ClassVar, Final, Generic, TypeVar

from .errors import OutOfRangeError
from .slicing import Range

_INDENT_WIDTH: Final[int] = max(0, int(os.environ.get("RANKED_ARRAY_INDENT_WIDTH", "2")))

T = TypeVar("T")


def _check_index(idx: object) -> int:
    if isinstance(idx, bool) or not isinstance(idx, numbers.Integral):
        raise TypeError(f"indices must be integers, got {type(idx).__name__}")
    return int(idx)


class IndexableSequence(list, Generic[T]):
    """``list`` whose element access understands negative indices.

    ``element_type`` is a class-level property: rendering picks the flat or the
    nested text form from it once per class, never from the values held.
    """

    element_type: ClassVar[type] = object

    def normalize_index(self, idx: int) -> int:
        i = _check_index(idx)
        if i < 0:
            i += len(self)
            if i < 0:
                raise OutOfRangeError(index=idx, length=len(self))
        return i

    def at(self, idx: int) -> T:
        i = self.normalize_index(idx)
        if i >= len(self):
            raise OutOfRangeError(index=idx, length=len(self))
        return list.__getitem__(self, i)

    def set_at(self, idx: int, value: T) -> None:
        i = self.normalize_index(idx)
        if i >= len(self):
            raise OutOfRangeError(index=idx, length=len(self))
        list.__setitem__(self, i, value)

    def indices(self, rng: Range) -> Iterator[int]:
        """Yield raw indices from ``rng.start`` while they stay below the limit.

        The limit is the explicit stop, taken as written, or the current
        length. Indices are not normalized here; :meth:`select` passes each
        one through :meth:`at`, which wraps negatives and reports anything out
        of range. A negative step therefore only ends once :meth:`at` raises.
        """
        limit = rng.stop if rng.has_stop else len(self)
        i = rng.start
        while i < limit:
            yield i
            i += rng.step

    def select(self, rng: Range) -> Iterator[T]:
        for i in self.indices(rng):
            yield self.at(i)

    @classmethod
    @cache
    def renders_nested(cls) -> bool:
        return callable(getattr(cls.element_type, "render", None))

    def render(self, indent_level: int = 0) -> str:
        if not self:
            return "[ ]"
        if not self.renders_nested():
            return "[ " + ", ".join(str(item) for item in self) + " ]"

        indent = " " * (indent_level * _INDENT_WIDTH)
        child_indent = " " * ((indent_level + 1) * _INDENT_WIDTH)
        children = ",\n".join(child_indent + item.render(indent_level + 1) for item in self)
        return "[\n" + children + "\n" + indent + "]"

    def __str__(self) -> str:
        return self.render()
