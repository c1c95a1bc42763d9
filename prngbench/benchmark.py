"""Benchmark runner and report for the random byte generators."""

from __future__ import annotations

import argparse
import math
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

from prngbench.basic import CryptoCSPRNG, Generator, MathPRNG
from prngbench.seeded import HybridCSPRNG, MultiEntropyCSPRNG, WeatherCSPRNG
from prngbench.stats import chi_square, nist_monobit_p_value, shannon_entropy

DEFAULT_ITERATIONS = 1000
DEFAULT_DATA_SIZE = 1024 * 128
NIST_THRESHOLD = 0.01
_BAR_WIDTH = 20
_COLUMN_PADDING = 2


@dataclass(frozen=True)
class BenchmarkResult:
    """Aggregated measurements for one generator."""

    name: str
    total_time: float
    avg_ops_per_sec: float
    avg_chi_square: float
    avg_shannon_entropy: float
    avg_nist_monobit_p_value: float
    passed_nist_monobit: int
    total_iterations: int

    @property
    def pass_rate(self) -> float:
        """Percentage of iterations that passed the monobit test."""
        return self.passed_nist_monobit / self.total_iterations * 100


def format_progress(current: int, total: int, name: str) -> str:
    """Render a one-line progress bar that overwrites the current line."""
    percent = current / total * 100
    filled = int(percent / 5)
    bar = "".join("|" if i < filled else "_" for i in range(_BAR_WIDTH))
    return f"\r{name}: [{bar}] {percent:.1f}% ({current}/{total})"


def run_benchmark(
    generator: Generator,
    iterations: int,
    data_size: int,
    out: TextIO | None = None,
) -> BenchmarkResult:
    """Draw ``data_size`` bytes ``iterations`` times and average the measurements."""
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")
    out = out if out is not None else sys.stdout
    name = generator.name
    print(f"\nTesting: {name}", file=out)

    total_time = 0.0
    total_chi = total_entropy = total_p = 0.0
    passed = 0

    for i in range(iterations):
        if i % 100 == 0 or i == iterations - 1:
            print(format_progress(i + 1, iterations, name), end="", file=out, flush=True)

        start = time.perf_counter()
        try:
            data = generator.generate_bytes(data_size)
        except OSError as exc:
            print(f"\nError generating bytes for {name}: {exc}", file=out)
            continue
        total_time += time.perf_counter() - start

        total_chi += chi_square(data)
        total_entropy += shannon_entropy(data)
        p_value = nist_monobit_p_value(data)
        total_p += p_value
        if p_value >= NIST_THRESHOLD:
            passed += 1

    print(" ✓", file=out)
    ops = iterations / total_time if total_time > 0 else math.inf

    return BenchmarkResult(
        name=name,
        total_time=total_time,
        avg_ops_per_sec=ops,
        avg_chi_square=total_chi / iterations,
        avg_shannon_entropy=total_entropy / iterations,
        avg_nist_monobit_p_value=total_p / iterations,
        passed_nist_monobit=passed,
        total_iterations=iterations,
    )


def _align(rows: Sequence[Sequence[str]]) -> str:
    """Pad every cell but the last in each row to its column's width."""
    widths: list[int] = []
    for row in rows:
        for col, cell in enumerate(row[:-1]):
            if col == len(widths):
                widths.append(0)
            widths[col] = max(widths[col], len(cell))
    lines = []
    for row in rows:
        padded = [cell.ljust(widths[col] + _COLUMN_PADDING) for col, cell in enumerate(row[:-1])]
        lines.append("".join(padded) + row[-1])
    return "\n".join(lines) + "\n"


def format_results(results: Sequence[BenchmarkResult]) -> str:
    """Render the results table followed by a legend of the metrics."""
    rows = [
        ["Generator", "Ops/sec", "Chi-Square", "Shannon", "NIST Pass Rate", "NIST P-Value"],
        ["---------", "-------", "----------", "-------", "--------------", "------------"],
    ]
    for r in results:
        rows.append(
            [
                r.name,
                f"{r.avg_ops_per_sec:.0f}",
                f"{r.avg_chi_square:.2f}",
                f"{r.avg_shannon_entropy:.4f}",
                f"{r.pass_rate:.1f}%",
                f"{r.avg_nist_monobit_p_value:.4f}",
            ]
        )
    legend = (
        "\n=== Quality Metrics ===\n"
        "• Ops/sec: Higher = better performance\n"
        "• Chi-Square: ~255 = good uniformity\n"
        "• Shannon: ~8.0 = maximum entropy\n"
        "• NIST Pass: >95% = good randomness\n"
    )
    return "\n=== Benchmark Results ===\n\n" + _align(rows) + legend


def _format_duration(seconds: float) -> str:
    """Format a duration rounded to milliseconds, e.g. ``1m2.345s`` or ``120ms``."""
    ms = int(math.floor(seconds * 1000 + 0.5))
    if ms == 0:
        return "0s"
    if ms < 1000:
        return f"{ms}ms"
    hours, rem = divmod(ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, frac = divmod(rem, 1000)
    sec_text = str(secs) + (f".{frac:03d}".rstrip("0") if frac else "")
    if hours:
        return f"{hours}h{minutes}m{sec_text}s"
    if minutes:
        return f"{minutes}m{sec_text}s"
    return f"{sec_text}s"


def main(argv: Sequence[str] | None = None) -> int:
    """Benchmark every generator and print a comparison table."""
    parser = argparse.ArgumentParser(prog="prngbench", description="Compare random byte generators.")
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    parser.add_argument("--data-size", type=int, default=DEFAULT_DATA_SIZE)
    args = parser.parse_args(argv)

    print("🎲 PRNG Benchmark Suite")
    print(f"Iterations: {args.iterations} | Data Size: {args.data_size} bytes")

    print("\n📊 Initializing generators...")
    generators: list[Generator] = [
        CryptoCSPRNG(),
        MathPRNG(),
        WeatherCSPRNG(),
        MultiEntropyCSPRNG(),
        HybridCSPRNG(),
    ]

    print("\n🚀 Starting benchmarks...")
    start = time.perf_counter()
    results = [run_benchmark(gen, args.iterations, args.data_size) for gen in generators]
    elapsed = time.perf_counter() - start

    print(format_results(results), end="")
    print(f"\n⏱️  Total benchmark time: {_format_duration(elapsed)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())