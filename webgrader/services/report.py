"""
Grading Reports
===============
Writes the machine-readable JSON report and a readable HTML summary for a
grading run, plus the console summary printed at the end of every run.

Both files are saved with a timestamp and copied to latest.json /
latest.html so the dashboard can always link to the most recent run.
"""

import os
import json
import logging
from datetime import datetime

from jinja2 import Environment, PackageLoader, select_autoescape

logger = logging.getLogger(__name__)

_env = Environment(
    loader=PackageLoader("webgrader", "templates"),
    autoescape=select_autoescape(["html"]),
)


def build_report(outcome, student_url: str, assignment_number=None) -> dict:
    """JSON-ready report: ordered criteria results plus the score summary."""
    return {
        "studentUrl": student_url,
        "timestamp": datetime.now().isoformat(),
        "assignmentNumber": assignment_number,
        "strict": outcome.strict,
        "criteria": [r.to_dict() for r in outcome.results],
        "summary": outcome.summary.to_dict(),
        "strictShortfalls": [r.criterion for r in outcome.shortfalls],
    }


def render_html(report: dict) -> str:
    summary = report["summary"]
    total = summary["passedCount"] + summary["failedCount"]
    return _env.get_template("report.html").render(report=report, summary=summary, total=total)


def save_report(report: dict, reports_dir) -> str:
    """
    Save report JSON + HTML.

    Returns:
        Path of the timestamped JSON report
    """
    os.makedirs(reports_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")

    json_text = json.dumps(report, indent=2)
    html_text = render_html(report)

    json_path = os.path.join(reports_dir, f"grading-report-{stamp}.json")
    for path, text in (
        (json_path, json_text),
        (os.path.join(reports_dir, "latest.json"), json_text),
        (os.path.join(reports_dir, f"grading-report-{stamp}.html"), html_text),
        (os.path.join(reports_dir, "latest.html"), html_text),
    ):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)

    logger.info("Report saved to %s", json_path)
    return json_path


def display_summary(report: dict):
    """Print the end-of-run summary to the console."""
    summary = report["summary"]
    total = summary["passedCount"] + summary["failedCount"]

    print("\n" + "=" * 60)
    print("  GRADING SUMMARY")
    print("=" * 60)
    print(f"  Student URL: {report['studentUrl']}")
    print(f"  Assignment:  {report['assignmentNumber'] or 'All'}")
    print(f"  Date:        {report['timestamp']}")
    print("=" * 60)
    print(f"  Total Score: {summary['totalEarned']}/{summary['totalPossible']}")
    print(f"  Percentage:  {summary['percentage']:.2f}%")
    print(f"  Passed:      {summary['passedCount']}/{total}")
    print(f"  Failed:      {summary['failedCount']}/{total}")
    print("=" * 60)

    failed = [c for c in report["criteria"] if not c["passed"]]
    if failed:
        print("\n❌ Failed Criteria:")
        for c in failed:
            print(f"\n  • {c['criterion']}")
            print(f"    Points: {c['points']['earned']}/{c['points']['possible']}")
            print(f"    Details: {c['details']}")

    if report.get("strictShortfalls"):
        print(f"\n⚠️  Strict mode: {len(report['strictShortfalls'])} criterion(s) below full credit")

    print("\n" + "=" * 60 + "\n")
