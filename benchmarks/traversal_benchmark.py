#!/usr/bin/env python3
"""
Traversal and subsetting benchmark.

Times the address odometer against numpy's own indexing for the same
selections, on row-major and column-major sources. Useful for spotting
regressions in the partial-sum cache of :class:`ndsub.Traversal`.
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np

from ndsub import ALL, Traversal, reshape, rev, rng, sub


@dataclass
class BenchmarkResult:
    case: str
    layout: str
    min_s: float
    mean_s: float
    iterations: int
    elements_per_s: Optional[float]


def build_inputs(*, size: int, seed: int) -> Dict[str, np.ndarray]:
    generator = np.random.default_rng(seed)
    values = generator.normal(size=(size, size, 8)).astype(np.float32)
    return {"row": values, "column": np.asfortranarray(values)}


def bench(fn: Callable[[], Any], *, iterations: int, warmup: int) -> List[float]:
    timings = []
    for step in range(iterations + warmup):
        start = time.perf_counter()
        fn()
        elapsed = time.perf_counter() - start
        if step >= warmup:
            timings.append(elapsed)
    return timings


def _cases(source: np.ndarray) -> Dict[str, Callable[[], Any]]:
    return {
        "traverse": lambda: Traversal.over_shape(source.shape).addresses(),
        "sub": lambda: sub(source, rev(ALL), rng(0, 0, 2), 3),
        "numpy": lambda: source[::-1, ::2, 3].copy(),
        "reshape-F": lambda: reshape(source, (-1, 8), order="column"),
    }


def run_case(
    name: str,
    layout: str,
    fn: Callable[[], Any],
    *,
    elements: int,
    iterations: int,
    warmup: int,
) -> BenchmarkResult:
    timings = bench(fn, iterations=iterations, warmup=warmup)
    min_s = min(timings)
    mean_s = sum(timings) / len(timings)
    elements_per_s = elements / mean_s if mean_s > 0 else None
    return BenchmarkResult(
        case=name,
        layout=layout,
        min_s=min_s,
        mean_s=mean_s,
        iterations=iterations,
        elements_per_s=elements_per_s,
    )


def format_results(results: Iterable[BenchmarkResult]) -> str:
    header = f"{'case':<10} {'layout':<8} {'min (ms)':>12} {'mean (ms)':>12} {'iters':>8} {'elems/s':>14}"
    rows = [header]
    for result in results:
        min_ms = result.min_s * 1e3
        mean_ms = result.mean_s * 1e3
        elements_per_s = result.elements_per_s or math.nan
        rows.append(
            f"{result.case:<10} {result.layout:<8} {min_ms:12.3f} {mean_ms:12.3f} {result.iterations:8d} {elements_per_s:14.2f}"
        )
    return "\n".join(rows)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark ndsub traversal and subsetting against numpy indexing."
    )
    parser.add_argument(
        "--layout",
        choices=("row", "column", "all"),
        default="all",
        help="Storage layout(s) of the source array (default: all).",
    )
    parser.add_argument(
        "--size", type=int, default=128, help="Leading dimensions of the source array (default: 128)."
    )
    parser.add_argument(
        "--seed", type=int, default=2024, help="Random seed for inputs (default: 2024)."
    )
    parser.add_argument(
        "--iterations", type=int, default=10, help="Timed iterations per case (default: 10)."
    )
    parser.add_argument(
        "--warmup", type=int, default=2, help="Warmup iterations to discard (default: 2)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    if args.size < 1 or args.iterations < 1:
        print("--size and --iterations must be positive.", file=sys.stderr)
        return 1
    inputs = build_inputs(size=args.size, seed=args.seed)
    layouts = ("row", "column") if args.layout == "all" else (args.layout,)

    results = []
    for layout in layouts:
        source = inputs[layout]
        for name, fn in _cases(source).items():
            results.append(
                run_case(
                    name,
                    layout,
                    fn,
                    elements=source.size,
                    iterations=args.iterations,
                    warmup=args.warmup,
                )
            )

    print(format_results(results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
