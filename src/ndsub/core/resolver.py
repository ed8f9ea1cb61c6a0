"""Resolution of index specifications against known dimensions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .exceptions import (
    IncompatibleDimensions,
    IndexOutOfRange,
    InvalidIndexSpecification,
    InvalidRangeDirection,
    MissingDimension,
)
from .specs import (
    All,
    Concat,
    IndexSpec,
    Mask,
    NestedSub,
    Range,
    Reverse,
    Scalar,
    Vector,
    as_spec,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalarAddr:
    index: int

    @property
    def length(self) -> int:
        return 1


@dataclass(frozen=True)
class StridedRange:
    start: int
    length: int
    step: int = 1

    def at(self, counter: int) -> int:
        return self.start + counter * self.step

    def indices(self) -> Tuple[int, ...]:
        return tuple(self.start + k * self.step for k in range(self.length))


@dataclass(frozen=True)
class IndexVector:
    indices: Tuple[int, ...]

    @property
    def length(self) -> int:
        return len(self.indices)

    def at(self, counter: int) -> int:
        return self.indices[counter]


ResolvedIndex = Union[ScalarAddr, StridedRange, IndexVector]


def _require(dimension: Optional[int], what: str) -> int:
    if dimension is None:
        raise MissingDimension(f"Resolving {what} requires a known dimension")
    return int(dimension)


def resolve_position(value: int, dimension: Optional[int] = None, end: bool = False) -> int:
    """Resolve a single, possibly relative, position.

    Negative values count from the end. In an end slot ``0`` stands for the
    dimension itself (one past the last element). The upper bound is not
    checked here.
    """
    value = int(value)
    if end and value == 0:
        return _require(dimension, "an end position of 0")
    if value < 0:
        size = _require(dimension, f"negative index {value}")
        resolved = size + value
        if resolved < 0:
            raise IndexOutOfRange(value, size)
        return resolved
    return value


def as_vector(resolved: ResolvedIndex) -> IndexVector:
    if isinstance(resolved, IndexVector):
        return resolved
    if isinstance(resolved, ScalarAddr):
        return IndexVector((resolved.index,))
    return IndexVector(resolved.indices())


def _resolve_range(spec: Range, dimension: Optional[int]) -> StridedRange:
    if spec.step == 0:
        raise InvalidIndexSpecification("Range step must be non-zero", spec=spec)
    start = resolve_position(spec.start, dimension)
    end = resolve_position(spec.end, dimension, end=True)
    span = end - start
    step = spec.step
    if spec.strict:
        if span * step <= 0:
            raise InvalidRangeDirection(
                f"Range from {start} to {end} cannot be traversed with step {step}",
                spec=spec,
            )
    elif span != 0:
        step = abs(step) if span > 0 else -abs(step)
    length = 0 if span == 0 else -(-span // step)
    return StridedRange(start, length, step)


def _reverse(resolved: ResolvedIndex) -> ResolvedIndex:
    if isinstance(resolved, ScalarAddr):
        return resolved
    if isinstance(resolved, IndexVector):
        return IndexVector(tuple(reversed(resolved.indices)))
    if resolved.length == 0:
        return resolved
    last = resolved.start + (resolved.length - 1) * resolved.step
    return StridedRange(last, resolved.length, -resolved.step)


def _select(base: IndexVector, inner: ResolvedIndex) -> ResolvedIndex:
    size = base.length
    if isinstance(inner, ScalarAddr):
        if inner.index >= size:
            raise IndexOutOfRange(inner.index, size)
        return ScalarAddr(base.indices[inner.index])
    picked = as_vector(inner).indices
    for position in picked:
        if position >= size:
            raise IndexOutOfRange(position, size)
    return IndexVector(tuple(base.indices[position] for position in picked))


def resolve(
    spec: IndexSpec,
    dimension: Optional[int] = None,
    force_vector: bool = False,
) -> ResolvedIndex:
    """Turn ``spec`` into a dimension-independent :data:`ResolvedIndex`.

    ``force_vector`` materialises ranges and scalars as an
    :class:`IndexVector`; concatenation and nested sub-selection rely on it.
    """
    if isinstance(spec, Scalar):
        result: ResolvedIndex = ScalarAddr(resolve_position(spec.value, dimension, spec.end))
    elif isinstance(spec, All):
        result = StridedRange(0, _require(dimension, "ALL"), 1)
    elif isinstance(spec, Mask):
        if dimension is not None and len(spec.bits) != int(dimension):
            raise IncompatibleDimensions(
                "Mask length does not match the axis",
                expected=(int(dimension),),
                actual=(len(spec.bits),),
            )
        result = IndexVector(tuple(pos for pos, bit in enumerate(spec.bits) if bit))
    elif isinstance(spec, Vector):
        result = IndexVector(tuple(resolve_position(value, dimension) for value in spec.values))
    elif isinstance(spec, Range):
        result = _resolve_range(spec, dimension)
    elif isinstance(spec, Reverse):
        result = _reverse(resolve(spec.spec, dimension, force_vector))
    elif isinstance(spec, Concat):
        indices: List[int] = []
        for member in spec.specs:
            indices.extend(as_vector(resolve(member, dimension, True)).indices)
        result = IndexVector(tuple(indices))
    elif isinstance(spec, NestedSub):
        base = as_vector(resolve(spec.outer, dimension, True))
        result = _select(base, resolve(spec.inner, base.length, force_vector))
    else:
        raise InvalidIndexSpecification(
            f"Cannot resolve index specification {spec!r}", spec=spec
        )
    if force_vector and not isinstance(result, IndexVector):
        return as_vector(result)
    return result


def check_bounds(resolved: ResolvedIndex, dimension: int) -> ResolvedIndex:
    dimension = int(dimension)
    if isinstance(resolved, ScalarAddr):
        candidates: Sequence[int] = (resolved.index,)
    elif isinstance(resolved, StridedRange):
        if resolved.length == 0:
            return resolved
        candidates = (resolved.start, resolved.at(resolved.length - 1))
    else:
        candidates = resolved.indices
    for index in candidates:
        if index < 0 or index >= dimension:
            raise IndexOutOfRange(index, dimension)
    return resolved


def resolve_all(specs: Sequence[object], dimensions: Sequence[int]) -> List[ResolvedIndex]:
    """Resolve and bounds-check one spec per axis of ``dimensions``."""
    if len(specs) != len(dimensions):
        raise IncompatibleDimensions(
            f"Got {len(specs)} index specifications for an object of rank {len(dimensions)}"
        )
    resolved = [
        check_bounds(resolve(as_spec(spec), int(size)), int(size))
        for spec, size in zip(specs, dimensions)
    ]
    logger.debug("resolved %s against %s -> %s", specs, tuple(dimensions), resolved)
    return resolved
