"""Type-level helpers naming "array of dtype E and rank r"."""

from __future__ import annotations

from dataclasses import dataclass

from .array import RankedArray, ranked_array_type


@dataclass(frozen=True)
class DtypeFacade:
    """``Ndarray[dtype]``: pick a rank with ``.dim(rank)`` or ``[rank]``."""

    dtype: type

    def dim(self, rank: int) -> type[RankedArray]:
        return ranked_array_type(self.dtype, rank)

    def __getitem__(self, rank: int) -> type[RankedArray]:
        return self.dim(rank)


class Ndarray:
    """Stateless entry point for choosing an array type.

    ``Ndarray[float, 3]`` and ``Ndarray[float].dim(3)`` are the same class as
    ``RankedArray[float, 3]`` and accept all of its constructors.
    """

    def __new__(cls, *args, **kwargs):
        raise TypeError("Ndarray is a type selector; use Ndarray[dtype, rank](...)")

    def __class_getitem__(cls, params):
        if isinstance(params, tuple):
            if len(params) != 2:
                raise TypeError("Ndarray[...] expects a dtype or (dtype, rank)")
            dtype, rank = params
            return ranked_array_type(dtype, rank)
        return DtypeFacade(params)
