"""Ordered traversal of the flat addresses selected by resolved indices.

A :class:`Traversal` walks the Cartesian product of the retained axes with the
last axis varying fastest. It keeps one counter per axis plus a cache of
partial affine sums; after an increment only the suffix starting at the first
changed axis is recomputed.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .affine import compute_coefficients, element_count
from .config import normalize_order
from .exceptions import IncompatibleDimensions, TraversalExhausted
from .resolver import ResolvedIndex, ScalarAddr, StridedRange

logger = logging.getLogger(__name__)


class Traversal:
    def __init__(
        self,
        resolved: Sequence[ResolvedIndex],
        coefficients: Sequence[int],
        offset: int = 0,
    ):
        if len(resolved) != len(coefficients):
            raise IncompatibleDimensions(
                f"Got {len(coefficients)} coefficients for {len(resolved)} axes"
            )
        self.specs: Tuple[ResolvedIndex, ...] = tuple(resolved)
        self.coefficients: Tuple[int, ...] = tuple(int(c) for c in coefficients)
        self.offset = int(offset)
        self.limits: Tuple[int, ...] = tuple(
            1 if isinstance(spec, ScalarAddr) else int(spec.length) for spec in self.specs
        )
        self.counters: List[int] = [0] * len(self.specs)
        self.cumsum: List[int] = [0] * len(self.specs)
        self.valid_end = 0
        self._done = any(limit == 0 for limit in self.limits)
        self._started = False

    @classmethod
    def over_shape(
        cls,
        dimensions: Sequence[int],
        order: str = "row",
        coefficients: Optional[Sequence[int]] = None,
        reverse_axes: bool = False,
    ) -> "Traversal":
        """Traverse every element of ``dimensions`` without spec resolution.

        ``coefficients`` map positions to storage addresses and default to
        row-major storage. ``order`` selects which axis varies fastest;
        column-major order runs the row-major odometer over the axes in
        reverse. ``reverse_axes`` flips that choice once more.
        """
        dims = [int(d) for d in dimensions]
        coeffs = list(coefficients) if coefficients is not None else list(compute_coefficients(dims))
        specs: List[ResolvedIndex] = [StridedRange(0, d, 1) for d in dims]
        flip = (normalize_order(order) == "column") != bool(reverse_axes)
        if flip:
            specs.reverse()
            coeffs.reverse()
        return cls(specs, coeffs)

    @property
    def done(self) -> bool:
        return self._done

    @property
    def state(self) -> str:
        if self._done:
            return "done"
        return "iterating" if self._started else "init"

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(
            limit for spec, limit in zip(self.specs, self.limits) if not isinstance(spec, ScalarAddr)
        )

    @property
    def size(self) -> int:
        return element_count(self.limits)

    def _position(self, axis: int) -> int:
        spec = self.specs[axis]
        if isinstance(spec, ScalarAddr):
            return spec.index
        return spec.at(self.counters[axis])

    def next_index(self) -> int:
        if self._done:
            raise TraversalExhausted("Traversal has already produced its last address")
        self._started = True
        total = self.offset if self.valid_end == 0 else self.cumsum[self.valid_end - 1]
        for axis in range(self.valid_end, len(self.specs)):
            total += self._position(axis) * self.coefficients[axis]
            self.cumsum[axis] = total
        self._increment()
        return total

    def _increment(self) -> None:
        axis = len(self.counters) - 1
        while axis >= 0:
            self.counters[axis] += 1
            if self.counters[axis] < self.limits[axis]:
                self.valid_end = axis
                return
            self.counters[axis] = 0
            axis -= 1
        self.valid_end = 0
        self._done = True

    def step(self) -> Tuple[int, bool]:
        address = self.next_index()
        return address, self._done

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if self._done:
            raise StopIteration
        return self.next_index()

    def addresses(self, index_dtype=np.intp) -> np.ndarray:
        """Drain the remaining addresses into a one-dimensional array."""
        if self._started:
            return np.fromiter(self, dtype=index_dtype)
        count = 0 if self._done else self.size
        logger.debug("materialising %d addresses for shape %s", count, self.shape)
        return np.fromiter(self, dtype=index_dtype, count=count)
