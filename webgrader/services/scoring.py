"""
Score Aggregation
=================
Collects per-criterion CheckResults during a run and reduces them to a
ScoreReport at the end.

Strict mode treats any partial credit as a failed criterion: the shortfall
is flagged (and fails the run) while the remaining checks still execute.
"""

import logging

from ..models import ScoreReport

logger = logging.getLogger(__name__)


def summarize_results(results) -> ScoreReport:
    """Reduce CheckResults to totals. An empty run scores 0.0%."""
    results = list(results)
    total_earned = sum(r.earned for r in results)
    total_possible = sum(r.possible for r in results)
    passed = sum(1 for r in results if r.passed)

    percentage = 0.0
    if total_possible > 0:
        percentage = round(100 * total_earned / total_possible, 2)

    return ScoreReport(
        total_earned=total_earned,
        total_possible=total_possible,
        percentage=percentage,
        passed_count=passed,
        failed_count=len(results) - passed,
    )


class ResultsCollector:
    """Ordered, append-only results list owned by one grading run."""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._results = []
        self.shortfalls = []

    def record(self, result):
        self._results.append(result)
        if self.strict and result.earned < result.possible:
            self.shortfalls.append(result)
            logger.error(
                "Partial grade for \"%s\": %s/%s (%s)",
                result.criterion, result.earned, result.possible, result.details,
            )

    @property
    def results(self):
        return list(self._results)

    def __len__(self):
        return len(self._results)

    def summarize(self) -> ScoreReport:
        return summarize_results(self._results)
