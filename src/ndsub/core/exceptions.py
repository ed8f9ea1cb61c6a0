from __future__ import annotations

from typing import Any, Optional, Sequence


class NdsubError(Exception):
    """Base class for ndsub-specific exceptions."""


class IncompatibleDimensions(NdsubError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        expected: Optional[Sequence[int]] = None,
        actual: Optional[Sequence[int]] = None,
    ):
        detail = ""
        if expected is not None or actual is not None:
            detail = f" (expected {_format_shape(expected)}, got {_format_shape(actual)})"
        super().__init__(f"{message}{detail}")
        self.expected = None if expected is None else tuple(expected)
        self.actual = None if actual is None else tuple(actual)


class IndexOutOfRange(NdsubError, IndexError):
    def __init__(self, index: int, dimension: Optional[int], message: Optional[str] = None):
        if message is None:
            if dimension is None:
                message = f"Index {index} is out of range"
            else:
                message = f"Index {index} is out of range for dimension {dimension}"
        super().__init__(message)
        self.index = index
        self.dimension = dimension


class InvalidIndexSpecification(NdsubError, ValueError):
    def __init__(self, message: str, *, spec: Any = None):
        super().__init__(message)
        self.spec = spec


class InvalidRangeDirection(InvalidIndexSpecification):
    pass


class MissingDimension(NdsubError, ValueError):
    pass


class NotAMatrix(NdsubError, ValueError):
    def __init__(self, rank: int, operation: str = "operation"):
        super().__init__(f"{operation} requires a matrix (rank 2), got rank {rank}")
        self.rank = rank


class IndexOverflow(NdsubError, OverflowError):
    pass


class UnsupportedContainer(NdsubError, TypeError):
    pass


class TraversalExhausted(NdsubError, RuntimeError):
    pass


class IndexParseError(InvalidIndexSpecification):
    def __init__(
        self,
        message: str,
        *,
        column: Optional[int] = None,
        text: Optional[str] = None,
    ):
        detail = _format_location(column, text)
        super().__init__(f"{message}{detail}", spec=text)
        self.column = column
        self.text = text


def _format_shape(shape: Optional[Sequence[int]]) -> str:
    if shape is None:
        return "?"
    return "(" + ", ".join(str(int(d)) for d in shape) + ")"


def _format_location(column: Optional[int], text: Optional[str]) -> str:
    if column is None:
        return ""
    location_str = f" (col {column})"
    if text is None or column < 1:
        return location_str
    caret = " " * (column - 1) + "^"
    return f"{location_str}\n  {text}\n  {caret}"
