#!/usr/bin/env python3
"""
Nectar Performance Benchmarks

Times the hot paths of the reactive-object layer and prints the results as a
rich table:

- instance construction (after the first, wrapping is a registry lookup)
- observed attribute assignment with a growing number of listeners
- guarded dispatch where half of the listeners are filtered out
- once-listeners registered and consumed in bulk

Usage:
    python scripts/benchmark.py              # Run all benchmarks
    python scripts/benchmark.py --config     # Show current benchmark configuration
    python scripts/benchmark.py --quick      # Fewer iterations
"""

import argparse
import statistics
import sys
import time
from dataclasses import dataclass
from typing import Callable, List

# Add the project root to the Python path
sys.path.insert(0, ".")

from rich.console import Console
from rich.panel import Panel
from rich.table import Table, box

from nectar import Observable, prop

# Benchmark configuration
ITERATIONS = 20_000
REPEATS = 5
LISTENER_COUNTS = [0, 1, 10, 100]


@dataclass
class BenchmarkResult:
    """Timing summary for one benchmark."""

    name: str
    workload: str
    per_op_us: List[float]

    @property
    def median_us(self) -> float:
        return statistics.median(self.per_op_us)

    @property
    def best_us(self) -> float:
        return min(self.per_op_us)

    @property
    def ops_per_sec(self) -> float:
        return 1_000_000 / self.median_us if self.median_us else float("inf")


class Point(Observable):
    x = prop(0)
    y = prop(0)


class Viewport(Point):
    z = prop(0)
    visible = prop(True)


def time_per_op(func: Callable[[], None], iterations: int, repeats: int) -> List[float]:
    """Run `func` `iterations` times per repeat, returning microseconds per call."""
    samples = []
    for _ in range(repeats):
        start = time.perf_counter()
        for _ in range(iterations):
            func()
        elapsed = time.perf_counter() - start
        samples.append(elapsed / iterations * 1_000_000)
    return samples


def bench_construction(iterations: int, repeats: int) -> BenchmarkResult:
    return BenchmarkResult(
        "Construction",
        "3-link chain",
        time_per_op(Viewport, iterations, repeats),
    )


def bench_assignment(listeners: int, iterations: int, repeats: int) -> BenchmarkResult:
    point = Point()
    for _ in range(listeners):
        point.listen_to(point, "change:x", lambda value: None)

    counter = iter(range(10**9))

    def assign():
        point.x = next(counter)

    return BenchmarkResult(
        "Assignment",
        f"{listeners} listeners",
        time_per_op(assign, iterations, repeats),
    )


def bench_guarded(listeners: int, iterations: int, repeats: int) -> BenchmarkResult:
    shown, hidden = Viewport(), Viewport()
    hidden.visible = False
    for target in (shown, hidden):
        for _ in range(listeners // 2):
            target.listen_to(target, "change:z&&visible", lambda value: None)

    def assign():
        shown.z += 1
        hidden.z += 1

    return BenchmarkResult(
        "Guarded dispatch",
        f"{listeners} listeners, half gated",
        time_per_op(assign, iterations, repeats),
    )


def bench_once(listeners: int, iterations: int, repeats: int) -> BenchmarkResult:
    point = Point()

    def register_and_fire():
        for _ in range(listeners):
            point.listen_to_once(point, "change:y", lambda value: None)
        point.y += 1

    return BenchmarkResult(
        "Once listeners",
        f"{listeners} registered + fired",
        time_per_op(register_and_fire, max(iterations // listeners, 1), repeats),
    )


def print_config(console: Console, iterations: int, repeats: int) -> None:
    console.print(
        Panel(
            f"Iterations per repeat: [bold]{iterations:,}[/bold]\n"
            f"Repeats: [bold]{repeats}[/bold]\n"
            f"Listener counts: [bold]{', '.join(map(str, LISTENER_COUNTS))}[/bold]",
            title="Nectar Benchmark Configuration",
            border_style="blue",
        )
    )


def render(console: Console, results: List[BenchmarkResult]) -> None:
    table = Table(title="Nectar Benchmark Results", box=box.ROUNDED)
    table.add_column("Benchmark", style="cyan", no_wrap=True)
    table.add_column("Workload", style="magenta")
    table.add_column("Median (µs/op)", style="green", justify="right")
    table.add_column("Best (µs/op)", style="yellow", justify="right")
    table.add_column("Ops/sec", style="white", justify="right")

    for result in results:
        table.add_row(
            result.name,
            result.workload,
            f"{result.median_us:.3f}",
            f"{result.best_us:.3f}",
            f"{result.ops_per_sec:,.0f}",
        )

    console.print(table)


def main():
    """Main entry point for the benchmark script."""
    parser = argparse.ArgumentParser(description="Nectar Performance Benchmarks")
    parser.add_argument(
        "--config", action="store_true", help="Show current benchmark configuration"
    )
    parser.add_argument(
        "--quick", action="store_true", help="Run a tenth of the iterations"
    )
    args = parser.parse_args()

    console = Console()
    iterations = ITERATIONS // 10 if args.quick else ITERATIONS

    print_config(console, iterations, REPEATS)
    if args.config:
        return

    results = [bench_construction(iterations, REPEATS)]
    with console.status("Running assignment benchmarks..."):
        for count in LISTENER_COUNTS:
            results.append(bench_assignment(count, iterations, REPEATS))
        for count in LISTENER_COUNTS[1:]:
            results.append(bench_guarded(count, iterations, REPEATS))
        results.append(bench_once(10, iterations, REPEATS))

    render(console, results)


if __name__ == "__main__":
    main()
