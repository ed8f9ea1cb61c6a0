"""Index specification model.

An index specification describes the subset requested along one axis. Values
are immutable and may still be *unresolved*: negative positions count from the
end of the axis and ``0`` in the ``end`` slot of a :class:`Range` means
"through the last element", so both need the axis dimension before they turn
into concrete addresses (see :mod:`ndsub.core.resolver`).
"""

from __future__ import annotations

import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

import numpy as np

from .exceptions import InvalidIndexSpecification


@dataclass(frozen=True)
class Scalar:
    value: int
    end: bool = False  # position sits in an "end" slot: 0 means one past the last element


@dataclass(frozen=True)
class All:
    def __repr__(self) -> str:
        return "ALL"


@dataclass(frozen=True)
class Mask:
    bits: Tuple[bool, ...]


@dataclass(frozen=True)
class Vector:
    values: Tuple[int, ...]


@dataclass(frozen=True)
class Range:
    start: int = 0
    end: int = 0
    step: int = 1
    strict: bool = False


@dataclass(frozen=True)
class Reverse:
    spec: "IndexSpec"


@dataclass(frozen=True)
class Concat:
    specs: Tuple["IndexSpec", ...]


@dataclass(frozen=True)
class NestedSub:
    outer: "IndexSpec"
    inner: "IndexSpec"


IndexSpec = Union[Scalar, All, Mask, Vector, Range, Reverse, Concat, NestedSub]

SPEC_TYPES = (Scalar, All, Mask, Vector, Range, Reverse, Concat, NestedSub)

ALL = All()


def is_spec(value: Any) -> bool:
    return isinstance(value, SPEC_TYPES)


def is_concrete(spec: IndexSpec) -> bool:
    """True when ``spec`` addresses fixed positions that need no dimension."""
    if isinstance(spec, Scalar):
        return spec.value >= 0 and not spec.end
    if isinstance(spec, Vector):
        return all(value >= 0 for value in spec.values)
    return False


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise InvalidIndexSpecification(f"{what} must be an integer, got {value!r}", spec=value)
    return int(value)


def scalar(value: int) -> Scalar:
    return Scalar(_as_int(value, "Scalar index"))


def mask(bits: Iterable[Any]) -> Mask:
    return Mask(tuple(bool(bit) for bit in bits))


def vector(values: Iterable[Any]) -> Vector:
    return Vector(tuple(_as_int(value, "Vector element") for value in values))


def rng(start: int = 0, end: int = 0, step: int = 1, strict: bool = False) -> Range:
    """Strided range from ``start`` up to (excluding) ``end``.

    ``end == 0`` means "through the last element". Unless ``strict`` is set,
    the sign of ``step`` is corrected during resolution to point from
    ``start`` towards ``end``.
    """
    step = _as_int(step, "Range step")
    if step == 0:
        raise InvalidIndexSpecification("Range step must be non-zero", spec=(start, end, step))
    return Range(_as_int(start, "Range start"), _as_int(end, "Range end"), step, bool(strict))


def rev(spec: Any) -> IndexSpec:
    inner = as_spec(spec)
    if isinstance(inner, Scalar) and is_concrete(inner):
        return inner
    if isinstance(inner, Vector) and is_concrete(inner):
        return Vector(tuple(reversed(inner.values)))
    return Reverse(inner)


def cat(*specs: Any) -> IndexSpec:
    members = tuple(as_spec(spec) for spec in specs)
    if all(is_concrete(member) for member in members):
        values = []
        for member in members:
            if isinstance(member, Scalar):
                values.append(member.value)
            else:
                values.extend(member.values)
        return Vector(tuple(values))
    return Concat(members)


def nested(outer: Any, inner: Any) -> NestedSub:
    return NestedSub(as_spec(outer), as_spec(inner))


def as_spec(value: Any) -> IndexSpec:
    """Wrap a user-supplied indexing argument into an :data:`IndexSpec`."""
    if isinstance(value, SPEC_TYPES):
        return value
    if value is None or value is Ellipsis:
        return ALL
    if isinstance(value, str):
        from .parser import parse_index

        return parse_index(value)
    if isinstance(value, (bool, np.bool_)):
        raise InvalidIndexSpecification(
            "A bare boolean is not an index; use a mask sequence", spec=value
        )
    if isinstance(value, numbers.Integral):
        return Scalar(int(value))
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise InvalidIndexSpecification(
                f"Index arrays must be one-dimensional, got shape {value.shape}", spec=value
            )
        if value.dtype == np.bool_:
            return mask(value.tolist())
        if np.issubdtype(value.dtype, np.integer):
            return Vector(tuple(int(v) for v in value.tolist()))
        raise InvalidIndexSpecification(
            f"Index arrays must hold integers or booleans, got {value.dtype}", spec=value
        )
    if isinstance(value, (Sequence, range)):
        items = list(value)
        if items and all(isinstance(item, (bool, np.bool_)) for item in items):
            return mask(items)
        return vector(items)
    raise InvalidIndexSpecification(
        f"Unsupported index specification of type {type(value).__name__}", spec=value
    )
