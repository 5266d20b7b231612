"""
Suite Runner
============
Executes check suites against a student's deployed site.

Checks run strictly one after another in rubric order on a single browser
page: later checks rely on the session state (share-link cookies, login)
left behind by earlier ones. Each check is isolated, so a failing check
never stops the run, and the summary is always produced.
"""

import logging

from ..models import RunOutcome
from .browser import SeleniumPage, create_driver
from .navigation import GradingSession, NavigationError
from .report import build_report, display_summary, save_report
from .scoring import ResultsCollector
from .suite import load_suite

logger = logging.getLogger(__name__)

INTERACTIVE_PAUSE_MS = 1500


def run_checks(checks, session, collector, pause_ms: int = 0):
    """Run checks sequentially, printing one status line per criterion."""
    for index, check in enumerate(checks, 1):
        result = check(session, collector)
        icon = "✅" if result.passed else "❌"
        print(f"  {icon} [{index}/{len(checks)}] {result.criterion}: "
              f"{result.earned}/{result.possible} - {result.details}")
        if pause_ms:
            session.page.wait(pause_ms)


def grade_suites(suite_paths, config, page=None) -> RunOutcome:
    """
    Grade one or more suites in a single browser session.

    Args:
        suite_paths: Suite files, graded in the given order
        config: Config with the student URL, timeouts and run mode
        page: Optional BrowserPage; a Chrome driver is started when omitted

    Returns:
        RunOutcome with ordered results, the ScoreReport and strict shortfalls

    Raises:
        SuiteError: a suite is missing or malformed (before any browser starts)
    """
    suites = [load_suite(p) for p in suite_paths]
    strict = config.strict or any(s.strict for s in suites)
    collector = ResultsCollector(strict=strict)

    driver = None
    if page is None:
        driver = create_driver(config.mode)
        page = SeleniumPage(driver)

    try:
        session = GradingSession(page, config)
        if config.prime_session:
            try:
                session.prime()
            except NavigationError as e:
                logger.warning("Session priming failed, continuing: %s", e)

        pause_ms = INTERACTIVE_PAUSE_MS if config.mode == "interactive" else 0
        for suite in suites:
            print(f"\n🚀 Assignment {suite.assignment_number}: "
                  f"{len(suite.entries)} checks against {config.student_url}")
            run_checks(suite.build_checks(), session, collector, pause_ms=pause_ms)
    finally:
        if driver:
            driver.quit()

    return RunOutcome(
        results=collector.results,
        summary=collector.summarize(),
        shortfalls=list(collector.shortfalls),
        strict=strict,
        assignment_number=suites[0].assignment_number if len(suites) == 1 else None,
    )


def run_grading(suite_paths, config, assignment_number=None, page=None) -> RunOutcome:
    """Grade, then write the JSON/HTML report and print the summary."""
    outcome = grade_suites(suite_paths, config, page=page)
    if assignment_number is None:
        assignment_number = outcome.assignment_number
    report = build_report(outcome, config.student_url, assignment_number)
    outcome.report_path = save_report(report, config.reports_dir)
    display_summary(report)
    return outcome
