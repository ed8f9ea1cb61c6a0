"""Operations built on top of ``sub``/``assign`` and the traversal iterator."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .affine import compute_coefficients, element_count
from .config import IndexingConfig, normalize_order, resolve_config
from .containers import (
    ContainerKind,
    Dimensions,
    as_array,
    container_kind,
    dims,
    flat_storage,
    gather_sequence,
    is_sequence,
    matrix_dims,
    rebuild_sequence,
    storage_order,
)
from .exceptions import IncompatibleDimensions
from .resolver import check_bounds, resolve
from .specs import ALL, vector
from .subset import assign, sub
from .traversal import Traversal

logger = logging.getLogger(__name__)

Placeholder = Optional[int]


def _complete_dimensions(dimensions: Sequence[Placeholder], total: int) -> Dimensions:
    placeholders = [pos for pos, size in enumerate(dimensions) if size is None or size == -1]
    if len(placeholders) > 1:
        raise IncompatibleDimensions(
            f"At most one placeholder dimension is allowed, got {len(placeholders)}"
        )
    known = [int(size) for size in dimensions if size is not None and size != -1]
    if any(size < 0 for size in known):
        raise IncompatibleDimensions(f"Dimensions must be non-negative, got {tuple(dimensions)}")
    known_count = element_count(known)
    if placeholders:
        if known_count == 0 or total % known_count != 0:
            raise IncompatibleDimensions(
                f"Cannot infer a placeholder dimension for {total} elements from {tuple(dimensions)}"
            )
        completed = list(dimensions)
        completed[placeholders[0]] = total // known_count
        return tuple(int(size) for size in completed)
    if known_count != total:
        raise IncompatibleDimensions(
            f"Cannot reshape {total} elements into {tuple(known)}",
            expected=(total,),
            actual=(known_count,),
        )
    return tuple(known)


def reshape(
    obj: Any,
    dimensions: Sequence[Placeholder],
    order: Optional[str] = None,
    copy: Optional[bool] = None,
    config: Optional[IndexingConfig] = None,
) -> np.ndarray:
    """Give the elements of ``obj`` a new shape.

    One entry of ``dimensions`` may be ``-1`` or ``None`` and is inferred
    from the element count. Row-major reshapes return a view of the source
    when its storage allows it, unless ``copy`` is set. Column-major reshapes
    always build a new array.
    """
    cfg = resolve_config(config)
    order = cfg.order if order is None else normalize_order(order)
    copy = cfg.copy if copy is None else bool(copy)
    source = as_array(obj)
    target = _complete_dimensions(dimensions, int(source.size))

    if order == "row":
        logger.debug("row-major reshape %s -> %s (copy=%s)", source.shape, target, copy)
        reshaped = source.reshape(target)
        return reshaped.copy() if copy else reshaped

    logger.debug("column-major reshape %s -> %s", source.shape, target)
    out = np.empty(target, dtype=source.dtype)
    src_flat, src_order = flat_storage(source)
    src_coefficients = compute_coefficients(source.shape, src_order, cfg.dtype)
    src_addresses = Traversal.over_shape(source.shape, "column", src_coefficients).addresses(
        cfg.dtype
    )
    dst_addresses = Traversal.over_shape(target, "column").addresses(cfg.dtype)
    out.reshape(-1)[dst_addresses] = src_flat[src_addresses]
    return out


def transpose(matrix: Any) -> np.ndarray:
    n_rows, n_cols = matrix_dims(matrix, "transpose")
    flat, order = flat_storage(matrix)
    coefficients = compute_coefficients((n_rows, n_cols), order)
    addresses = Traversal.over_shape((n_rows, n_cols), "column", coefficients).addresses()
    return np.asarray(flat[addresses]).reshape(n_cols, n_rows)


def rows(matrix: Any, as_vector: bool = False) -> Union[List[Any], Tuple[Any, ...]]:
    n_rows, _ = matrix_dims(matrix, "rows")
    extracted = [sub(matrix, i, ALL) for i in range(n_rows)]
    return tuple(extracted) if as_vector else extracted


def columns(matrix: Any, as_vector: bool = False) -> Union[List[Any], Tuple[Any, ...]]:
    _, n_cols = matrix_dims(matrix, "columns")
    extracted = [sub(matrix, ALL, j) for j in range(n_cols)]
    return tuple(extracted) if as_vector else extracted


def _result_length(result: Any) -> Optional[int]:
    """Length of a vector result, ``None`` for a scalar one."""
    if isinstance(result, np.ndarray):
        if result.ndim == 0:
            return None
        if result.ndim != 1:
            raise IncompatibleDimensions(
                f"Mapped function must return a scalar or a vector, got shape {result.shape}"
            )
        return int(result.shape[0])
    if is_sequence(result):
        return len(result)
    return None


def _result_dtype(result: Any, length: Optional[int]) -> np.dtype:
    return as_array(result).dtype if length is not None else np.asarray(result).dtype


def _map_axis(fn: Callable[[Any], Any], matrix: Any, axis: int, name: str) -> np.ndarray:
    shape = matrix_dims(matrix, name)
    count = shape[axis]
    out: Optional[np.ndarray] = None
    expected: Optional[int] = None
    for position in range(count):
        piece = sub(matrix, position, ALL) if axis == 0 else sub(matrix, ALL, position)
        result = fn(piece)
        length = _result_length(result)
        dtype = _result_dtype(result, length)
        if out is None:
            expected = length
            if length is None:
                out = np.empty(count, dtype=dtype)
            elif axis == 0:
                out = np.empty((count, length), dtype=dtype)
            else:
                out = np.empty((length, count), dtype=dtype)
        elif length != expected:
            raise IncompatibleDimensions(
                f"{name}: result {position} has length {length}, expected {expected}"
                if length is not None and expected is not None
                else f"{name}: result {position} does not match the kind of the first result"
            )
        elif dtype.kind != out.dtype.kind or np.result_type(out.dtype, dtype) != out.dtype:
            # later results must fit the element type fixed by the first one
            raise IncompatibleDimensions(
                f"{name}: result {position} has element type {dtype}, "
                f"expected {out.dtype}"
            )
        if length is None:
            assign(out, result, position)
        elif axis == 0:
            assign(out, result, position, ALL)
        else:
            assign(out, result, ALL, position)
    if out is None:
        return np.empty(0)
    return out


def map_rows(fn: Callable[[Any], Any], matrix: Any) -> np.ndarray:
    """Apply ``fn`` to every row; vector results are stacked as rows."""
    return _map_axis(fn, matrix, 0, "map_rows")


def map_columns(fn: Callable[[Any], Any], matrix: Any) -> np.ndarray:
    """Apply ``fn`` to every column; vector results are stacked as columns."""
    return _map_axis(fn, matrix, 1, "map_columns")


def pref(obj: Any, *index_vectors: Any, config: Optional[IndexingConfig] = None) -> Any:
    """Parallel pointwise indexing.

    Element ``k`` of the result is ``obj`` addressed by the ``k``-th entry of
    every index vector, one vector per axis.
    """
    cfg = resolve_config(config)
    kind = container_kind(obj)
    shape = dims(obj)
    if len(index_vectors) != len(shape) or not shape:
        raise IncompatibleDimensions(
            f"pref needs one index vector per axis: got {len(index_vectors)} for rank {len(shape)}"
        )
    resolved = [
        check_bounds(resolve(vector(values), size), size).indices
        for values, size in zip(index_vectors, shape)
    ]
    lengths = {len(indices) for indices in resolved}
    if len(lengths) != 1:
        raise IncompatibleDimensions(
            f"pref index vectors must have equal lengths, got {[len(i) for i in resolved]}"
        )
    order = storage_order(obj) if kind is ContainerKind.ARRAY else "row"
    coefficients = compute_coefficients(shape, order, cfg.dtype)
    addresses = np.zeros(lengths.pop(), dtype=cfg.dtype)
    for indices, coefficient in zip(resolved, coefficients):
        addresses += np.asarray(indices, dtype=cfg.dtype) * coefficient
    if kind is ContainerKind.ARRAY:
        flat, _ = flat_storage(obj)
        return np.asarray(flat[addresses])
    return rebuild_sequence(obj, gather_sequence(obj, addresses.tolist()))


def which(predicate: Callable[[Any], Any], sequence: Any) -> np.ndarray:
    """Ascending positions of the elements of ``sequence`` satisfying ``predicate``."""
    container_kind(sequence)
    positions = [position for position, item in enumerate(sequence) if predicate(item)]
    return np.asarray(positions, dtype=np.intp)
