"""Parsing of textual slice expressions such as ``"1:5:2, :, -3:"``."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from .errors import FormatError, TooManySlicesError

_RANGE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("RANKED_ARRAY_RANGE_CACHE_MAX", "512")))

_INT = r"-?[0-9]+"

_RANGE_RE: Final = re.compile(
    rf"""
    ^
    \s*(?P<start>{_INT})?
    \s*:
    \s*(?P<stop>{_INT})?
    \s*
    (?:
        :
        \s*(?P<step>{_INT})?
        \s*
    )?
    $
    """,
    re.VERBOSE,
)

_SLICE_SEPARATOR_RE: Final = re.compile(r"\s*,\s*")


@dataclass(frozen=True)
class Range:
    """Strided index range for a single axis.

    ``has_stop`` is False when the stop was omitted; the stop then means "the
    length of the axis being sliced" and is resolved at slice time.
    """

    start: int
    stop: int
    step: int = 1
    has_stop: bool = True

    def __post_init__(self) -> None:
        if self.step == 0:
            raise ValueError("Range step cannot be zero")

    @classmethod
    def parse(cls, text: str) -> "Range":
        return parse_range(text)


def _error(message: str, text: str, start: int = 0, end: int | None = None) -> FormatError:
    return FormatError(message=message, text=text, start=start, end=end)


@lru_cache(maxsize=_RANGE_CACHE_MAX)
def parse_range(text: str) -> Range:
    """Parse ``start?:stop?`` or ``start?:stop?:step?`` into a :class:`Range`.

    A bare integer without a colon is rejected, as is a zero step.
    """
    if not isinstance(text, str):
        raise TypeError(f"slice expression must be str, got {type(text).__name__}")

    m = _RANGE_RE.match(text)
    if m is None:
        if text.strip() and ":" not in text:
            raise _error("Slice expression needs at least one ':'", text)
        raise _error("Invalid slice format", text)

    start_text = m.group("start")
    stop_text = m.group("stop")
    step_text = m.group("step")

    start = 0 if start_text is None else int(start_text)
    stop = 0 if stop_text is None else int(stop_text)
    step = 1 if step_text is None else int(step_text)
    if step == 0:
        raise _error("Slice step cannot be zero", text, m.start("step"), m.end("step"))

    return Range(start=start, stop=stop, step=step, has_stop=stop_text is not None)


def split_slices(spec: str) -> tuple[str, ...]:
    """Split a multi-axis slice spec on commas, dropping the whitespace around them."""
    if not isinstance(spec, str):
        raise TypeError(f"slice spec must be str, got {type(spec).__name__}")
    return tuple(_SLICE_SEPARATOR_RE.split(spec))


def parse_slices(spec: str, rank: int) -> tuple[Range, ...]:
    """Parse one range per leading axis; fewer ranges than ``rank`` is allowed."""
    parts = split_slices(spec)
    if len(parts) > rank:
        raise TooManySlicesError(given=len(parts), rank=rank)
    return tuple(parse_range(part) for part in parts)


def range_cache_stats(*, reset: bool = False) -> dict[str, float | int]:
    info = parse_range.cache_info()
    total = info.hits + info.misses
    stats: dict[str, float | int] = {
        "hits": int(info.hits),
        "misses": int(info.misses),
        "size": int(info.currsize),
        "max_size": int(info.maxsize) if info.maxsize is not None else 0,
        "hit_rate": float(info.hits / total) if total else 0.0,
    }
    if reset:
        parse_range.cache_clear()
    return stats
