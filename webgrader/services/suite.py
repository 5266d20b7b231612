"""
Check Suites
============
A suite is the reviewable, per-assignment output of check generation: the
rubric's criteria in order, each paired with the template chosen for it.

Suites are stored as JSON in the suites folder (assignment<N>.suite.json)
and turned back into executable checks at grading time. A missing or
malformed suite is a configuration error and aborts the run.
"""

import os
import json
import logging
from datetime import datetime
from pathlib import Path

from ..models import Criterion, RubricError
from .selection import TemplateKind, select_template
from .templates import build_check

logger = logging.getLogger(__name__)

SUITE_SUFFIX = ".suite.json"


class SuiteError(Exception):
    """A suite file is missing or cannot be loaded."""


class Suite:
    """Ordered (criterion, template) pairs for one assignment."""

    def __init__(self, assignment_number, entries, strict=False, path=None):
        self.assignment_number = assignment_number
        self.entries = list(entries)
        self.strict = strict
        self.path = path

    def build_checks(self):
        return [build_check(criterion, kind) for criterion, kind in self.entries]

    def to_dict(self) -> dict:
        return {
            "assignmentNumber": self.assignment_number,
            "strict": self.strict,
            "generatedAt": datetime.now().isoformat(),
            "checks": [
                {"template": kind.value, "criterion": criterion.to_dict()}
                for criterion, kind in self.entries
            ],
        }


def suite_filename(assignment_number) -> str:
    return f"assignment{assignment_number}{SUITE_SUFFIX}"


def generate_suite(rubric, strict: bool = False) -> Suite:
    """Select a template for every criterion, preserving rubric order."""
    entries = []
    for index, criterion in enumerate(rubric.criteria, 1):
        kind = select_template(criterion)
        logger.info("Check %d/%d: %s -> %s", index, len(rubric.criteria), criterion.original_text, kind.value)
        entries.append((criterion, kind))
    return Suite(rubric.assignment_number, entries, strict=strict)


def save_suite(suite: Suite, suites_dir) -> str:
    os.makedirs(suites_dir, exist_ok=True)
    path = os.path.join(suites_dir, suite_filename(suite.assignment_number))
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(suite.to_dict(), f, indent=2)
    suite.path = path
    return path


def load_suite(path) -> Suite:
    if not os.path.exists(path):
        raise SuiteError(f"Suite file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SuiteError(f"Suite file is malformed ({path}): {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("checks"), list):
        raise SuiteError(f"Suite file has no 'checks' list: {path}")

    entries = []
    for index, entry in enumerate(data["checks"], 1):
        try:
            criterion = Criterion.from_dict(entry.get("criterion"))
            template = entry.get("template")
            kind = TemplateKind(template) if template else select_template(criterion)
        except (RubricError, ValueError, AttributeError) as e:
            raise SuiteError(f"Check {index} in {path} is invalid: {e}") from e
        entries.append((criterion, kind))

    return Suite(
        data.get("assignmentNumber"),
        entries,
        strict=bool(data.get("strict", False)),
        path=str(path),
    )


def display_name(filename: str) -> str:
    """assignment2-new.suite.json -> "Assignment2 New" """
    stem = filename[:-len(SUITE_SUFFIX)] if filename.endswith(SUITE_SUFFIX) else filename
    return " ".join(word[:1].upper() + word[1:] for word in stem.replace("-", " ").split())


def list_suites(suites_dir) -> list:
    """Suites available for grading, sorted by display name."""
    if not os.path.isdir(suites_dir):
        return []
    suites = [
        {"id": f, "name": display_name(f)}
        for f in os.listdir(suites_dir)
        if f.endswith(SUITE_SUFFIX)
    ]
    return sorted(suites, key=lambda s: s["name"])


def suite_path(suites_dir, suite_id: str):
    """Resolve a listed suite id to its path; None if it is not a known suite."""
    if suite_id not in {s["id"] for s in list_suites(suites_dir)}:
        return None
    return str(Path(suites_dir) / suite_id)
