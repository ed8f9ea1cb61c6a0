from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .config import normalize_order
from .exceptions import IndexOverflow
from .resolver import ResolvedIndex, ScalarAddr


def _prod(values: Iterable[int]) -> int:
    result = 1
    for value in values:
        result *= int(value)
    return int(result)


def _index_limit(index_dtype) -> int:
    return int(np.iinfo(np.dtype(index_dtype)).max)


def compute_coefficients(
    dimensions: Sequence[int],
    order: str = "row",
    index_dtype=np.intp,
) -> Tuple[int, ...]:
    """Per-axis multipliers of the affine map ``address = offset + sum(c_k * i_k)``.

    Row-major gives every axis the product of the dimensions to its right,
    column-major the product of the dimensions to its left.
    """
    order = normalize_order(order)
    limit = _index_limit(index_dtype)
    dims = [int(d) for d in dimensions]
    axes = range(len(dims) - 1, -1, -1) if order == "row" else range(len(dims))
    coefficients = [0] * len(dims)
    running = 1
    for axis in axes:
        coefficients[axis] = running
        running *= dims[axis]
        if running > limit:
            raise IndexOverflow(
                f"Shape {tuple(dims)} has more elements than {np.dtype(index_dtype).name} can address"
            )
    return tuple(coefficients)


def drop_scalar_axes(
    resolved: Sequence[ResolvedIndex],
    coefficients: Sequence[int],
) -> Tuple[int, List[ResolvedIndex], List[int]]:
    """Fold scalar-addressed axes into a base offset.

    Returns ``(offset, retained_specs, retained_coefficients)`` with the
    retained axes in their original relative order.
    """
    offset = 0
    retained: List[ResolvedIndex] = []
    retained_coefficients: List[int] = []
    for spec, coefficient in zip(resolved, coefficients):
        if isinstance(spec, ScalarAddr):
            offset += spec.index * int(coefficient)
        else:
            retained.append(spec)
            retained_coefficients.append(int(coefficient))
    return offset, retained, retained_coefficients


def effective_dimensions(retained: Sequence[ResolvedIndex]) -> Tuple[int, ...]:
    return tuple(int(spec.length) for spec in retained)


def element_count(dimensions: Sequence[int]) -> int:
    return _prod(dimensions)
