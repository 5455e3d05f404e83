"""Conversion between ranked arrays and JAX arrays."""

from __future__ import annotations

import jax.numpy as jnp

from .array import RankedArray, ranked_array_type
from .errors import ShapeError


def python_dtype_of(dtype) -> type:
    """Map a JAX/NumPy dtype onto the Python scalar type used for ``RankedArray`` elements."""
    if jnp.issubdtype(dtype, jnp.bool_):
        return bool
    if jnp.issubdtype(dtype, jnp.integer):
        return int
    if jnp.issubdtype(dtype, jnp.floating):
        return float
    if jnp.issubdtype(dtype, jnp.complexfloating):
        return complex
    return object


def to_jax(array: RankedArray, dtype=None) -> jnp.ndarray:
    if not isinstance(array, RankedArray):
        raise TypeError(f"to_jax expects a RankedArray, got {type(array).__name__}")
    if not array.is_rectangular():
        raise ShapeError(f"cannot convert ragged {type(array).__name__} to a JAX array")
    out = jnp.asarray(array.tolist(), dtype=dtype)
    if out.ndim != array.rank:
        # Empty axes collapse the nesting that jnp.asarray can see.
        out = jnp.reshape(out, array.shape)
    return out


def from_jax(value, dtype: type | None = None) -> RankedArray:
    arr = value if isinstance(value, jnp.ndarray) else jnp.asarray(value)
    if arr.ndim == 0:
        raise ValueError("cannot build a ranked array from a 0-d value")
    elem = python_dtype_of(arr.dtype) if dtype is None else dtype
    return ranked_array_type(elem, arr.ndim).from_nested(arr.tolist())
