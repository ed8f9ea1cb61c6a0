"""Reading and writing the subset addressed by per-axis index specifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

import numpy as np

from .affine import compute_coefficients, drop_scalar_axes, effective_dimensions
from .config import IndexingConfig, resolve_config
from .containers import (
    ContainerKind,
    Dimensions,
    as_array,
    container_kind,
    dims,
    flat_storage,
    gather_sequence,
    is_sequence,
    rebuild_sequence,
    require_mutable,
    storage_order,
)
from .exceptions import IncompatibleDimensions
from .resolver import ResolvedIndex, resolve_all
from .traversal import Traversal

logger = logging.getLogger(__name__)


class SourceKind(str, Enum):
    SCALAR = "scalar"
    CONTAINER = "container"
    SEQUENCE = "sequence"


@dataclass
class Selection:
    """Resolved addressing for one ``sub``/``assign`` call."""

    kind: ContainerKind
    offset: int
    retained: List[ResolvedIndex]
    coefficients: List[int]
    shape: Dimensions
    index_dtype: np.dtype

    @property
    def is_scalar(self) -> bool:
        return not self.shape

    def traversal(self) -> Traversal:
        return Traversal(self.retained, self.coefficients, self.offset)

    def addresses(self) -> np.ndarray:
        return self.traversal().addresses(self.index_dtype)


def select(obj: Any, specs: Sequence[Any], config: Optional[IndexingConfig] = None) -> Selection:
    cfg = resolve_config(config)
    kind = container_kind(obj)
    shape = dims(obj)
    resolved = resolve_all(specs, shape)
    order = storage_order(obj) if kind is ContainerKind.ARRAY else "row"
    coefficients = compute_coefficients(shape, order, cfg.dtype)
    offset, retained, retained_coefficients = drop_scalar_axes(resolved, coefficients)
    return Selection(
        kind=kind,
        offset=offset,
        retained=retained,
        coefficients=retained_coefficients,
        shape=effective_dimensions(retained),
        index_dtype=cfg.dtype,
    )


def sub(obj: Any, *specs: Any, config: Optional[IndexingConfig] = None) -> Any:
    """Return the subset of ``obj`` addressed by one spec per axis.

    Axes addressed by a single integer are dropped from the result. When every
    axis is dropped the addressed element itself is returned.
    """
    selection = select(obj, specs, config)
    addresses = selection.addresses()
    if selection.kind is ContainerKind.ARRAY:
        flat, _ = flat_storage(obj)
        if selection.is_scalar:
            return flat[int(addresses[0])]
        return np.asarray(flat[addresses]).reshape(selection.shape)
    if selection.is_scalar:
        return obj[int(addresses[0])]
    return rebuild_sequence(obj, gather_sequence(obj, addresses))


def source_kind(value: Any, effective_rank: int) -> SourceKind:
    if effective_rank == 0:
        return SourceKind.SCALAR
    if isinstance(value, np.ndarray):
        return SourceKind.SCALAR if value.ndim == 0 else SourceKind.CONTAINER
    if is_sequence(value):
        return SourceKind.SEQUENCE
    return SourceKind.SCALAR


def _check_source(kind: SourceKind, value: Any, shape: Dimensions) -> None:
    if kind is SourceKind.CONTAINER:
        if tuple(value.shape) != tuple(shape):
            raise IncompatibleDimensions(
                "Assigned array does not match the selected region",
                expected=shape,
                actual=value.shape,
            )
    elif kind is SourceKind.SEQUENCE:
        if len(shape) != 1 or len(value) != shape[0]:
            raise IncompatibleDimensions(
                "A flat sequence can only fill a rank-1 selection of the same length",
                expected=shape,
                actual=(len(value),),
            )


def _source_items(kind: SourceKind, value: Any, count: int) -> List[Any]:
    if kind is SourceKind.SCALAR:
        return [value] * count
    if kind is SourceKind.CONTAINER:
        return value.reshape(-1).tolist()
    return list(value)


def assign(obj: Any, value: Any, *specs: Any, config: Optional[IndexingConfig] = None) -> Any:
    """Write ``value`` into the subset of ``obj`` addressed by ``specs``.

    ``value`` is broadcast when it is a scalar, copied pairwise when it is an
    array of exactly the selected shape, or copied in order when it is a flat
    sequence and the selection is rank 1. Shapes are checked before anything
    is written. Returns ``value``.
    """
    selection = select(obj, specs, config)
    if selection.kind is ContainerKind.SEQUENCE:
        require_mutable(obj)
    kind = source_kind(value, len(selection.shape))
    _check_source(kind, value, selection.shape)
    addresses = selection.addresses()
    logger.debug(
        "assigning %s source into %s selection of shape %s (%d addresses)",
        kind.value,
        selection.kind.value,
        selection.shape,
        addresses.size,
    )

    if selection.kind is ContainerKind.ARRAY:
        flat, _ = flat_storage(obj)
        if selection.is_scalar:
            flat[int(addresses[0])] = value
        elif kind is SourceKind.CONTAINER:
            flat[addresses] = value.reshape(-1)
        elif kind is SourceKind.SEQUENCE:
            flat[addresses] = as_array(value)
        else:
            flat[addresses] = value
        return value

    for address, item in zip(addresses.tolist(), _source_items(kind, value, addresses.size)):
        obj[address] = item
    return value
