"""Shape queries and flat-storage adapters for the supported containers.

Two container kinds are supported:

* ``ContainerKind.ARRAY``: :class:`numpy.ndarray` of any rank. Elements are
  addressed through the array's native flat storage, in row-major order for
  C-contiguous arrays and column-major order for Fortran-contiguous ones.
  Other layouts go through the row-major :attr:`numpy.ndarray.flat` iterator.
* ``ContainerKind.SEQUENCE``: any :class:`collections.abc.Sequence` except
  text and bytes, treated as rank 1. Elements are read and written by
  position, which is slow for sequences without cheap random access.
"""

from __future__ import annotations

from array import array as typed_array
from collections.abc import MutableSequence, Sequence
from enum import Enum
from typing import Any, Iterable, List, Tuple

import numpy as np

from .exceptions import IndexOutOfRange, NotAMatrix, UnsupportedContainer
from .resolver import resolve_position

Dimensions = Tuple[int, ...]

_TEXT_TYPES = (str, bytes, bytearray)


class ContainerKind(str, Enum):
    ARRAY = "array"
    SEQUENCE = "sequence"


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def container_kind(obj: Any) -> ContainerKind:
    if isinstance(obj, np.ndarray):
        return ContainerKind.ARRAY
    if is_sequence(obj):
        return ContainerKind.SEQUENCE
    raise UnsupportedContainer(f"Unsupported container type {type(obj).__name__}")


def dims(obj: Any) -> Dimensions:
    if container_kind(obj) is ContainerKind.ARRAY:
        return tuple(int(d) for d in obj.shape)
    return (len(obj),)


def rank(obj: Any) -> int:
    return len(dims(obj))


def dim(obj: Any, axis: int) -> int:
    shape = dims(obj)
    position = resolve_position(axis, len(shape))
    if position >= len(shape):
        raise IndexOutOfRange(axis, len(shape), f"Axis {axis} is out of range for rank {len(shape)}")
    return shape[position]


def element_type(obj: Any):
    """NumPy dtype for arrays; the common element type for sequences."""
    if container_kind(obj) is ContainerKind.ARRAY:
        return obj.dtype
    types = {type(item) for item in obj}
    if len(types) == 1:
        return types.pop()
    return object


def matrix_dims(obj: Any, operation: str = "matrix operation") -> Dimensions:
    shape = dims(obj)
    if len(shape) != 2:
        raise NotAMatrix(len(shape), operation)
    return shape


def nrow(obj: Any) -> int:
    return matrix_dims(obj, "nrow")[0]


def ncol(obj: Any) -> int:
    return matrix_dims(obj, "ncol")[1]


def storage_order(array: np.ndarray) -> str:
    if array.flags.f_contiguous and not array.flags.c_contiguous:
        return "column"
    return "row"


def flat_storage(array: np.ndarray):
    """Return ``(flat, order)``: a writable flat view of ``array`` and its order."""
    if array.flags.c_contiguous:
        return array.reshape(-1), "row"
    if array.flags.f_contiguous:
        return array.reshape(-1, order="F"), "column"
    return array.flat, "row"


def rebuild_sequence(template: Sequence, items: Iterable[Any]) -> Sequence:
    """Build a sequence of the same kind as ``template`` where possible.

    Mutable sequences whose constructor does not take a single iterable fall
    back to a list.
    """
    items = list(items)
    if isinstance(template, typed_array):
        return type(template)(template.typecode, items)
    if isinstance(template, MutableSequence):
        try:
            return type(template)(items)
        except TypeError:
            return items
    if isinstance(template, tuple):
        return tuple(items)
    return items


def gather_sequence(seq: Sequence, addresses: Iterable[int]) -> List[Any]:
    return [seq[int(address)] for address in addresses]


def require_mutable(obj: Any) -> None:
    if container_kind(obj) is ContainerKind.SEQUENCE and not isinstance(obj, MutableSequence):
        raise UnsupportedContainer(
            f"Cannot assign into immutable sequence of type {type(obj).__name__}"
        )


def as_array(obj: Any) -> np.ndarray:
    """View a container as an ndarray, keeping sequences one-dimensional."""
    if container_kind(obj) is ContainerKind.ARRAY:
        return obj
    items = list(obj)
    if not any(is_sequence(item) or isinstance(item, np.ndarray) for item in items):
        return np.asarray(items)
    out = np.empty(len(items), dtype=object)
    for position, item in enumerate(items):
        out[position] = item
    return out
