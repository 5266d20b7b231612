"""
Test: Score aggregation and strict mode.
"""
import itertools

from webgrader.models import CheckResult, RunOutcome
from webgrader.services.scoring import ResultsCollector, summarize_results


RESULTS = [
    CheckResult("a", 3, 3, "ok"),
    CheckResult("b", 1, 3, "partial"),
    CheckResult("c", 0, 2, "missing"),
]


class TestSummarizeResults:
    def test_totals(self):
        report = summarize_results(RESULTS)
        assert report.total_earned == 4
        assert report.total_possible == 8
        assert report.percentage == 50.0
        assert report.passed_count == 1
        assert report.failed_count == 2
        assert report.total == 3

    def test_empty_run(self):
        report = summarize_results([])
        assert report.total_earned == 0
        assert report.total_possible == 0
        assert report.percentage == 0.0
        assert report.total == 0

    def test_rounded_percentage(self):
        report = summarize_results([CheckResult("a", 1, 3, "x")])
        assert report.percentage == 33.33

    def test_order_independent(self):
        expected = summarize_results(RESULTS)
        for perm in itertools.permutations(RESULTS):
            assert summarize_results(perm) == expected

    def test_counts_add_up(self):
        report = summarize_results(RESULTS)
        assert report.passed_count + report.failed_count == len(RESULTS)

    def test_to_dict(self):
        data = summarize_results(RESULTS).to_dict()
        assert data == {
            "totalEarned": 4,
            "totalPossible": 8,
            "percentage": 50.0,
            "passedCount": 1,
            "failedCount": 2,
        }


class TestResultsCollector:
    def test_keeps_order(self):
        collector = ResultsCollector()
        for r in RESULTS:
            collector.record(r)
        assert [r.criterion for r in collector.results] == ["a", "b", "c"]
        assert len(collector) == 3

    def test_results_is_a_copy(self):
        collector = ResultsCollector()
        collector.record(RESULTS[0])
        collector.results.clear()
        assert len(collector) == 1

    def test_lenient_has_no_shortfalls(self):
        collector = ResultsCollector(strict=False)
        for r in RESULTS:
            collector.record(r)
        assert collector.shortfalls == []

    def test_strict_flags_partial_credit(self):
        collector = ResultsCollector(strict=True)
        for r in RESULTS:
            collector.record(r)
        assert [r.criterion for r in collector.shortfalls] == ["b", "c"]
        # every result is still recorded
        assert len(collector) == 3

    def test_summarize(self):
        collector = ResultsCollector()
        for r in RESULTS:
            collector.record(r)
        assert collector.summarize() == summarize_results(RESULTS)


class TestRunOutcome:
    def test_lenient_always_succeeds(self):
        assert RunOutcome(results=RESULTS, shortfalls=[RESULTS[1]], strict=False).success

    def test_strict_with_shortfalls_fails(self):
        assert not RunOutcome(results=RESULTS, shortfalls=[RESULTS[1]], strict=True).success

    def test_strict_clean_run_succeeds(self):
        assert RunOutcome(results=[RESULTS[0]], strict=True).success
