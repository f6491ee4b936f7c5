"""Lightweight per-stage timing for the LODS pipeline.

Provides:
- StepTimer: Collects per-step wall-clock timing via context manager
- NoOpTimer: Drop-in replacement when profiling is off
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class StepTimer:
    """Collects per-step wall-clock timing measurements.

    Usage:
        timer = StepTimer()
        with timer.step("cpap"):
            cpap = detect_cpap_intervals(...)
        print(timer.report(cohort_size=1000))
    """

    results: list[dict] = field(default_factory=list)

    @contextmanager
    def step(self, name: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.results.append({
                'step': name,
                'elapsed_s': time.perf_counter() - start,
            })

    @property
    def total(self) -> float:
        return sum(r['elapsed_s'] for r in self.results)

    def report(self, cohort_size: int | None = None) -> str:
        lines = []
        lines.append(f"{'Step':<35} {'Time (s)':<12} {'% Total':<10}")
        lines.append("-" * 57)
        total = self.total
        for r in self.results:
            pct = r['elapsed_s'] / total * 100 if total > 0 else 0
            lines.append(f"{r['step']:<35} {r['elapsed_s']:<12.3f} {pct:<10.1f}")
        lines.append("-" * 57)
        lines.append(f"{'TOTAL':<35} {total:<12.3f}")
        if cohort_size:
            lines.append(f"{'Time per stay (ms)':<35} {total / cohort_size * 1000:<12.2f}")
        return "\n".join(lines)


class NoOpTimer:
    """No-op timer. Drop-in replacement for StepTimer when profiling is off."""

    def __init__(self):
        self.results: list = []

    @contextmanager
    def step(self, name: str):
        yield

    @property
    def total(self) -> float:
        return 0.0

    def report(self, cohort_size: int | None = None) -> str:
        return ""
