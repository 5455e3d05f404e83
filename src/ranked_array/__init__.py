"""ranked-array public API."""

from .array import LeafArray, NestedArray, RankedArray, ranked_array_type
from .errors import (
    FormatError,
    OutOfRangeError,
    RankedArrayError,
    ShapeError,
    TooManySlicesError,
)
from .facade import DtypeFacade, Ndarray
from .jax_interop import from_jax, to_jax
from .sequence import IndexableSequence
from .slicing import Range, parse_range, parse_slices, range_cache_stats, split_slices

__all__ = [
    "Ndarray",
    "DtypeFacade",
    "RankedArray",
    "LeafArray",
    "NestedArray",
    "ranked_array_type",
    "IndexableSequence",
    "Range",
    "parse_range",
    "parse_slices",
    "split_slices",
    "range_cache_stats",
    "to_jax",
    "from_jax",
    "RankedArrayError",
    "FormatError",
    "TooManySlicesError",
    "OutOfRangeError",
    "ShapeError",
]
