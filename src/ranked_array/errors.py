"""Structured error types for parsing, slicing and indexing failures."""

from __future__ import annotations

from dataclasses import dataclass


class RankedArrayError(Exception):
    """Base class for structured ranked-array errors."""


@dataclass(frozen=True)
class FormatError(RankedArrayError, ValueError):
    """A slice expression does not match the `start:stop[:step]` grammar."""

    message: str
    text: str
    start: int = 0
    end: int | None = None

    def __str__(self) -> str:
        end = len(self.text) if self.end is None else self.end
        return f"{self.message} at span [{self.start}, {end}) in {self.text!r}"


@dataclass(frozen=True)
class TooManySlicesError(RankedArrayError, ValueError):
    """More comma-separated slice expressions than the array has axes."""

    given: int
    rank: int

    def __str__(self) -> str:
        return f"Too many slices: got {self.given} for an array of rank {self.rank}"


@dataclass(frozen=True)
class OutOfRangeError(RankedArrayError, IndexError):
    """An index stays outside `[0, length)` after negative-index normalization."""

    index: int
    length: int

    def __str__(self) -> str:
        return f"Index {self.index} out of range for axis of length {self.length}"


class ShapeError(RankedArrayError, ValueError):
    """Ragged content where a rectangular array is required."""
