#!/usr/bin/env python3
"""
Web Grader CLI
==============
parse    -> Excel rubric to JSON
generate -> JSON rubric to a check suite
grade    -> run suites against a student's deployed site
full     -> all three in one go

Examples:
    webgrader parse rubrics/A1Rubric.xlsx
    webgrader generate rubrics/A1Rubric.json
    webgrader grade https://student-site.vercel.app 1
    webgrader full rubrics/A1Rubric.xlsx https://student-site.vercel.app
"""

import os
import sys
import logging
import argparse
from urllib.parse import urlsplit

from .config import LOG_LEVEL, RUN_MODES, config, setup_logging
from .models import RubricError
from .services.rubric_parser import load_rubric, parse_excel, save_rubric
from .services.runner import run_grading
from .services.suite import SuiteError, generate_suite, list_suites, save_suite, suite_filename

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """Invalid command-line input."""


def validate_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise CLIError(f"Invalid URL: {url}")
    return url


def parse_command(args):
    output = args.output or os.path.splitext(args.rubric)[0] + ".json"
    print(f"\n📖 Parsing rubric: {args.rubric}")

    rubric = parse_excel(args.rubric)
    save_rubric(rubric, output)

    print("\n✅ Success!")
    print(f"   Assignment: {rubric.assignment_number}")
    print(f"   Criteria: {len(rubric.criteria)}")
    print(f"   Total Points: {rubric.total_points}")
    print(f"   Output: {output}\n")
    return output


def generate_command(args):
    print(f"\n🔧 Generating checks from: {args.rubric}")

    rubric = load_rubric(args.rubric)
    suite = generate_suite(rubric, strict=args.strict)
    path = save_suite(suite, config.suites_dir)

    print("\n✅ Checks generated successfully!")
    print(f"   Output: {path}")
    print(f"   Checks created: {len(suite.entries)}\n")
    return path


def grade_command(args):
    student_url = validate_url(args.student_url)
    config.update({
        "student_url": student_url,
        "backend_url": args.backend_url,
        "mode": args.mode,
    })
    if args.strict:
        config.strict = True

    if args.suite:
        paths = [args.suite]
    elif args.assignment is not None:
        paths = [os.path.join(config.suites_dir, suite_filename(args.assignment))]
    else:
        paths = [os.path.join(config.suites_dir, s["id"]) for s in list_suites(config.suites_dir)]
        if not paths:
            raise SuiteError(f"No suites found in {config.suites_dir}")

    print(f"\n🚀 Running checks for: {student_url}\n")
    outcome = run_grading(paths, config, assignment_number=args.assignment)
    return 0 if outcome.success else 1


def full_command(args):
    print("\n🚀 Starting full grading workflow...\n")

    print("Step 1/3: Parsing rubric...")
    json_path = parse_command(argparse.Namespace(rubric=args.rubric, output=None))

    print("\nStep 2/3: Generating checks...")
    generate_command(argparse.Namespace(rubric=json_path, strict=args.strict))

    print("\nStep 3/3: Running checks...")
    assignment = load_rubric(json_path).assignment_number
    status = grade_command(argparse.Namespace(
        student_url=args.student_url,
        assignment=assignment,
        suite=None,
        backend_url=args.backend_url,
        mode=args.mode,
        strict=args.strict,
    ))

    print("\n✅ Full grading workflow complete!\n")
    return status


def build_parser():
    parser = argparse.ArgumentParser(prog="webgrader", description="Rubric-driven web assignment grader")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("parse", help="Parse an Excel rubric into JSON")
    p.add_argument("rubric", help="Rubric .xlsx file")
    p.add_argument("output", nargs="?", help="Output JSON path (default: next to the rubric)")
    p.set_defaults(func=parse_command)

    p = sub.add_parser("generate", help="Generate a check suite from a JSON rubric")
    p.add_argument("rubric", help="Rubric .json file")
    p.add_argument("--strict", action="store_true", help="Fail the run on any partial credit")
    p.set_defaults(func=generate_command)

    p = sub.add_parser("grade", help="Run check suites against a student submission")
    p.add_argument("student_url", help="Deployed frontend URL (share-link query params are kept)")
    p.add_argument("assignment", nargs="?", type=int, help="Assignment number (default: all suites)")
    p.add_argument("--suite", help="Path to a specific suite file")
    p.add_argument("--backend-url", default=None, help="Backend base URL")
    p.add_argument("--mode", choices=RUN_MODES, default=config.mode)
    p.add_argument("--strict", action="store_true", help="Fail the run on any partial credit")
    p.set_defaults(func=grade_command)

    p = sub.add_parser("full", help="parse -> generate -> grade")
    p.add_argument("rubric", help="Rubric .xlsx file")
    p.add_argument("student_url", help="Deployed frontend URL")
    p.add_argument("--backend-url", default=None)
    p.add_argument("--mode", choices=RUN_MODES, default=config.mode)
    p.add_argument("--strict", action="store_true")
    p.set_defaults(func=full_command)

    return parser


def main(argv=None):
    setup_logging(LOG_LEVEL)
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    try:
        status = args.func(args)
    except (CLIError, RubricError, SuiteError, ValueError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        if os.getenv("DEBUG"):
            logger.exception("Command failed")
        return 1
    return status if isinstance(status, int) else 0


if __name__ == "__main__":
    sys.exit(main())
