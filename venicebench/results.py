"""Benchmark results, their aggregation and the overall rating."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

_RATINGS = (
    (90.0, "EXCELLENT"),
    (75.0, "VERY GOOD"),
    (60.0, "GOOD"),
    (45.0, "FAIR"),
)
_LOWEST_RATING = "NEEDS IMPROVEMENT"


@dataclass
class BenchmarkResult:
    """One measured test: what was measured, in what unit, and its 0-100 score."""

    name: str
    category: str
    value: float = 0.0
    unit: str = ""
    duration: float = 0.0
    score: float = 0.0


@dataclass
class BenchmarkSession:
    """The results gathered by one benchmark run and their overall score."""

    results: list[BenchmarkResult] = field(default_factory=list)
    total_score: float = 0.0

    def add(self, result: BenchmarkResult) -> None:
        """Record a finished test."""
        self.results.append(result)

    def clear(self) -> None:
        """Forget all results and the overall score."""
        self.results.clear()
        self.total_score = 0.0

    def finalize(self) -> float:
        """Set the overall score to the mean of the results and return it.

        With no results the previous overall score is kept.
        """
        if self.results:
            self.total_score = overall_score(self.results)
        return self.total_score

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)


def rating_for(score: float) -> str:
    """Name the performance band a 0-100 score falls into."""
    for threshold, label in _RATINGS:
        if score >= threshold:
            return label
    return _LOWEST_RATING


def overall_score(results: Iterable[BenchmarkResult]) -> float:
    """Mean score of the results, or 0.0 when there are none."""
    scores = [result.score for result in results]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def group_by_category(
    results: Iterable[BenchmarkResult],
) -> dict[str, list[BenchmarkResult]]:
    """Results grouped by category, categories in sorted order, results in run order."""
    groups: dict[str, list[BenchmarkResult]] = {}
    for result in results:
        groups.setdefault(result.category, []).append(result)
    return {category: groups[category] for category in sorted(groups)}


def category_averages(results: Iterable[BenchmarkResult]) -> dict[str, float]:
    """Mean score of each category, categories in sorted order."""
    return {
        category: overall_score(members)
        for category, members in group_by_category(results).items()
    }


def best_result(results: Iterable[BenchmarkResult]) -> BenchmarkResult | None:
    """The first result with the highest positive score, or None if none scored above zero."""
    best: BenchmarkResult | None = None
    best_score = 0.0
    for result in results:
        if result.score > best_score:
            best_score = result.score
            best = result
    return best