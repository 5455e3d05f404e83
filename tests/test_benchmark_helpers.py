from __future__ import annotations

import importlib.util
from pathlib import Path
import sys
import unittest


REPO_ROOT = Path(__file__).resolve().parent.parent
BENCH_DIR = REPO_ROOT / "benchmarks"


def _load_module(name: str):
    spec = importlib.util.spec_from_file_location(name, BENCH_DIR / f"{name}.py")
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Unable to load {name} module")
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


class BenchTimingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.bench = _load_module("slicing_benchmarks")

    def test_summary_statistics(self) -> None:
        summary = self.bench._summarize([1.0, 2.0, 3.0, 4.0])
        self.assertAlmostEqual(summary["mean_ms"], 2.5)
        self.assertAlmostEqual(summary["p50_ms"], 2.5)
        self.assertAlmostEqual(summary["p90_ms"], 3.7)
        self.assertGreater(summary["stddev_ms"], 0.0)

    def test_single_sample_summary(self) -> None:
        summary = self.bench._summarize([3.0])
        self.assertEqual(summary, {"mean_ms": 3.0, "p50_ms": 3.0, "p90_ms": 3.0, "stddev_ms": 0.0})

    def test_timing_counts_calls(self) -> None:
        calls: list[int] = []
        case = self.bench.BenchCase("count", 1, lambda n: (n,), calls.append)

        times = self.bench._time_case(case, (1,), repeats=3, warmup=2, samples=4)
        self.assertEqual(len(times), 4)
        self.assertEqual(len(calls), 2 + 3 * 4)
        self.assertGreaterEqual(self.bench._repeats_for(case, (1,), target_sample_ms=1.0, min_repeats=5), 5)

    def test_host_metadata_keys(self) -> None:
        meta = self.bench._host()
        self.assertTrue({"platform", "python", "jax", "cpu_count", "env"} <= set(meta))


class SlicingBenchmarkCaseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.bench = _load_module("slicing_benchmarks")

    def test_every_case_runs_once(self) -> None:
        cases = self.bench._cases((4,))
        self.assertEqual(
            [case.name for case in cases],
            ["fill_rank2", "index_corner", "slice_full", "slice_strided", "slice_wrap", "render", "to_jax"],
        )
        for case in cases:
            with self.subTest(case=case.name):
                case.run(*case.build(case.n))

    def test_wrap_case_repeats_the_tail(self) -> None:
        case = next(case for case in self.bench._cases((4,)) if case.name == "slice_wrap")
        out = case.run(*case.build(case.n))
        self.assertEqual(out.shape, (5, 6))

    def test_measure_records_shape_and_cache_use(self) -> None:
        case = next(case for case in self.bench._cases((3,)) if case.name == "slice_strided")
        profile = {"target_sample_ms": 1.0, "min_repeats": 2}
        row = self.bench._measure(case, profile, warmup=0, samples=2)
        self.assertEqual(row.shape, (3, 3))
        self.assertGreater(row.range_cache_hit_rate, 0.0)
        self.assertGreaterEqual(row.repeats, 2)

    def test_sizes_from_arg(self) -> None:
        self.assertEqual(self.bench._sizes_from_arg("2, 5"), (2, 5))
        self.assertEqual(self.bench._sizes_from_arg(""), self.bench.N_DEFAULT)


if __name__ == "__main__":
    unittest.main()
