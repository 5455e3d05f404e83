"""Benchmark construction, indexing, slicing and rendering of ranked arrays."""

from __future__ import annotations

import argparse
import json
import math
import os
import platform
import statistics
import time
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable

import jax

from ranked_array import Ndarray, RankedArray, range_cache_stats, to_jax


N_DEFAULT = (8, 64, 256)
PROFILE_CONFIG: dict[str, dict[str, float | int]] = {
    "quick": {"samples": 3, "warmup": 1, "target_sample_ms": 10.0, "min_repeats": 4},
    "full": {"samples": 7, "warmup": 2, "target_sample_ms": 20.0, "min_repeats": 12},
}
MAX_REPEATS = 200_000
CONFIG_ENV_VARS = ("RANKED_ARRAY_INDENT_WIDTH", "RANKED_ARRAY_RANGE_CACHE_MAX", "XLA_FLAGS")


@dataclass(frozen=True)
class BenchCase:
    name: str
    n: int
    build: Callable[[int], tuple[object, ...]]
    run: Callable[..., object]


@dataclass(frozen=True)
class BenchRow:
    name: str
    n: int
    shape: tuple[int, ...]
    repeats: int
    mean_ms: float
    p50_ms: float
    p90_ms: float
    stddev_ms: float
    range_cache_hit_rate: float


def _grid(n: int):
    return Ndarray[int, 2](n, n, 1)


def _cases(ns: tuple[int, ...]) -> list[BenchCase]:
    cases: list[BenchCase] = []
    for n in ns:
        cases.extend(
            [
                BenchCase("fill_rank2", n, lambda n: (n,), lambda n: Ndarray[int, 2](n, n, 0)),
                BenchCase("index_corner", n, lambda n: (_grid(n),), lambda a: a(-1, -1)),
                BenchCase("slice_full", n, lambda n: (_grid(n),), lambda a: a[":"]),
                BenchCase("slice_strided", n, lambda n: (_grid(n),), lambda a: a["::2, 1::3"]),
                BenchCase("slice_wrap", n, lambda n: (_grid(n),), lambda a: a["-1:, -2:"]),
                BenchCase("render", n, lambda n: (_grid(n),), lambda a: a.render()),
                BenchCase("to_jax", n, lambda n: (_grid(n),), lambda a: to_jax(a).block_until_ready()),
            ]
        )
    return cases


def _sizes_from_arg(raw: str) -> tuple[int, ...]:
    sizes = tuple(int(part) for part in raw.split(",") if part.strip())
    return sizes or N_DEFAULT


def _input_shape(fn_args: tuple[object, ...]) -> tuple[int, ...]:
    for arg in fn_args:
        if isinstance(arg, RankedArray):
            return arg.shape
    return ()


def _call_ms(case: BenchCase, fn_args: tuple[object, ...], repeats: int) -> float:
    start_ns = time.perf_counter_ns()
    for _ in range(repeats):
        case.run(*fn_args)
    return (time.perf_counter_ns() - start_ns) / repeats / 1e6


def _repeats_for(case: BenchCase, fn_args: tuple[object, ...], *, target_sample_ms: float, min_repeats: int) -> int:
    """Pick a repeat count so one sample of ``case`` lasts about ``target_sample_ms``."""
    per_call_ms = max(_call_ms(case, fn_args, max(4, min_repeats // 4)), 1e-3)
    wanted = math.ceil(max(target_sample_ms, 1.0) / per_call_ms)
    return max(min_repeats, min(wanted, MAX_REPEATS))


def _time_case(case: BenchCase, fn_args: tuple[object, ...], *, repeats: int, warmup: int, samples: int) -> list[float]:
    for _ in range(max(0, warmup)):
        case.run(*fn_args)
    return [_call_ms(case, fn_args, repeats) for _ in range(samples)]


def _summarize(times: list[float]) -> dict[str, float]:
    if len(times) < 2:
        only = times[0]
        return {"mean_ms": only, "p50_ms": only, "p90_ms": only, "stddev_ms": 0.0}
    return {
        "mean_ms": statistics.fmean(times),
        "p50_ms": statistics.median(times),
        "p90_ms": statistics.quantiles(times, n=10, method="inclusive")[-1],
        "stddev_ms": statistics.stdev(times),
    }


def _measure(case: BenchCase, profile: dict[str, float | int], *, warmup: int, samples: int) -> BenchRow:
    fn_args = case.build(case.n)
    range_cache_stats(reset=True)
    repeats = _repeats_for(
        case,
        fn_args,
        target_sample_ms=float(profile["target_sample_ms"]),
        min_repeats=int(profile["min_repeats"]),
    )
    times = _time_case(case, fn_args, repeats=repeats, warmup=warmup, samples=samples)
    return BenchRow(
        name=case.name,
        n=case.n,
        shape=_input_shape(fn_args),
        repeats=repeats,
        range_cache_hit_rate=float(range_cache_stats()["hit_rate"]),
        **_summarize(times),
    )


def _host() -> dict[str, Any]:
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "jax": getattr(jax, "__version__", "unknown"),
        "cpu_count": os.cpu_count(),
        "env": {name: os.environ[name] for name in CONFIG_ENV_VARS if name in os.environ},
    }


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--profile",
        choices=sorted(PROFILE_CONFIG),
        default="quick",
        help="fixed benchmark profile presets",
    )
    parser.add_argument("--ns", default=",".join(str(n) for n in N_DEFAULT), help="comma-separated square sizes")
    parser.add_argument("--samples", type=int, default=None, help="timing samples per case")
    parser.add_argument("--warmup", type=int, default=None, help="warmup rounds before timing")
    parser.add_argument(
        "--json-out",
        default="",
        help="optional path for machine-readable output",
    )
    args = parser.parse_args()

    profile = PROFILE_CONFIG[args.profile]
    samples = max(1, int(profile["samples"] if args.samples is None else args.samples))
    warmup = int(profile["warmup"] if args.warmup is None else args.warmup)

    rows: list[BenchRow] = []
    for case in _cases(_sizes_from_arg(args.ns)):
        row = _measure(case, profile, warmup=warmup, samples=samples)
        rows.append(row)
        print(
            f"{row.name:<16} shape={str(row.shape):<12} mean={row.mean_ms:9.4f} ms  "
            f"p90={row.p90_ms:9.4f} ms  reps={row.repeats}  cache_hits={row.range_cache_hit_rate:.2f}"
        )

    if args.json_out:
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "generated_at": datetime.now(UTC).isoformat(),
            "profile": args.profile,
            "host": _host(),
            "rows": [asdict(row) for row in rows],
        }
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
