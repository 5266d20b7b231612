"""
Rubric Parser
=============
Turns an instructor's Excel rubric into structured criteria (and back and
forth to JSON).

EXPECTED SHEET LAYOUT (first worksheet):
- Row 1: "Criteria" / "Points" header
- Row 2: "Best" / "Better" / "Almost" / "Missing" tier header
- Row 3+: one criterion per row; column A is the text, B-E the tier points

CRITERION TEXT FORMATS:
- "Lab - <Category> - <Detail>"                       -> /Labs/Lab<N>
- "Kambaz - <Section> - <Subsection> - <Detail>"      -> route from section
- anything else                                        -> general, route "/"
"""

import os
import re
import json
import logging
from pathlib import Path

from ..models import Criterion, Points, Rubric, RubricError
from ..rubric_config import DEFAULT_POINTS, GENERAL, POINT_TIERS

logger = logging.getLogger(__name__)

HEADER_ROWS = 2


def extract_assignment_number(file_path) -> int:
    """A1Rubric.xlsx -> 1 (defaults to 1 when the name has no A<digits>)."""
    match = re.search(r"A(\d+)", Path(file_path).stem, re.IGNORECASE)
    return int(match.group(1)) if match else 1


def extract_points(row) -> Points:
    """
    Columns B, C, D, E hold best / better / almost / missing.

    A blank cell takes the default for its tier, capped at the tier above it,
    so a one-point row with blank partial tiers parses as 1/1/1/0.
    """
    cells = list(row[1:5]) + [None] * 4
    tiers = {}
    previous = None
    for name, value in zip(POINT_TIERS, cells):
        if value is None or value == "":
            value = DEFAULT_POINTS[name]
            if previous is not None:
                value = min(value, previous)
        tiers[name] = value
        previous = _as_number(value, previous)
    return Points.from_dict(tiers)


def _as_number(value, fallback):
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


# =============================================================================
# TEST TYPE RULES
# =============================================================================

def determine_lab_test_type(category: str, detail: str) -> str:
    lower = detail.lower()

    if "Table" in category or "table" in lower:
        return "table_elements"
    if "Form" in category or "form" in lower:
        if "username" in lower or "password" in lower:
            return "form_input"
        if "radio" in lower:
            return "form_radio"
        if "checkbox" in lower:
            return "form_checkbox"
        if "select" in lower or "dropdown" in lower:
            return "form_select"
        if "textarea" in lower:
            return "form_textarea"
        if "button" in lower and "alert" in lower:
            return "form_button_alert"
        if "file upload" in lower:
            return "form_file"
        return "form_generic"
    if "List" in category or "list" in lower:
        if "ordered" in lower:
            return "ordered_list"
        if "unordered" in lower:
            return "unordered_list"
        return "list_generic"
    if "Image" in category or "image" in lower:
        return "image"
    if "Heading" in category or "heading" in lower:
        return "heading"
    if "Paragraph" in category or "paragraph" in lower:
        return "paragraph"
    if "Anchor" in category or "anchor" in lower or "link" in lower:
        return "anchor"

    return "generic"


def determine_kambaz_test_type(section: str, subsection: str, detail: str) -> str:
    lower = detail.lower()

    if "clicking" in lower and "navigates" in lower:
        return "navigation_click"
    if "link" in lower and "clicking" not in lower:
        return "link_exists"

    if "field of type" in lower:
        return "input_type"
    if "dropdown" in lower or "select" in lower:
        return "dropdown"
    if "checkbox" in lower:
        return "checkbox"

    if "title" in lower or "subtitle" in lower:
        return "text_content"
    if "default value" in lower:
        return "default_value"
    if "sidebar" in lower:
        return "sidebar"
    if "list of" in lower:
        return "list_items"

    return "generic"


_KAMBAZ_ROUTES = {
    "Navigation Sidebar": "/",
    "Dashboard": "/Dashboard",
    "Modules": "/Courses/:id/Modules",
    "Assignments": "/Courses/:id/Assignments",
    "Assignment Editor": "/Courses/:id/Assignments/:assignmentId",
}


def build_kambaz_route(section: str, subsection: str) -> str:
    if section == "Account":
        if subsection == "Navigation":
            return "/Account/Signin"
        return f"/Account/{subsection}"
    if section == "Courses":
        if subsection == "Navigation":
            return "/Courses/:id/Home"
        return f"/Courses/:id/{subsection}"
    return _KAMBAZ_ROUTES.get(section, "/")


# =============================================================================
# CRITERION PARSING
# =============================================================================

def _split(text: str, prefix: str):
    match = re.search(prefix + r" - (.+)", text)
    if not match:
        return None
    return [p.strip() for p in match.group(1).split(" - ")]


def parse_criterion(text: str, points: Points, assignment_number: int) -> Criterion:
    """Parse one rubric line into a Criterion with route and test type."""
    if "Lab -" in text:
        parts = _split(text, "Lab")
        if parts:
            category = parts[0]
            detail = " - ".join(parts[1:])
            return Criterion(
                original_text=text,
                route=f"/Labs/Lab{assignment_number}",
                test_type=determine_lab_test_type(category, detail),
                detail=detail,
                points=points,
                category=category,
                kind="lab",
            )
    elif "Kambaz -" in text:
        parts = _split(text, "Kambaz")
        if parts:
            section = parts[0]
            subsection = parts[1] if len(parts) > 1 else ""
            detail = " - ".join(parts[2:])
            return Criterion(
                original_text=text,
                route=build_kambaz_route(section, subsection),
                test_type=determine_kambaz_test_type(section, subsection, detail),
                detail=detail,
                points=points,
                kind="kambaz",
                section=section,
                subsection=subsection,
            )

    return Criterion(
        original_text=text,
        route="/",
        test_type=GENERAL,
        detail=text,
        points=points,
        kind="general",
    )


def extract_sections(criteria) -> tuple:
    """Distinct report sections in first-seen order."""
    sections = []
    for c in criteria:
        if c.kind == "lab":
            name = "Labs"
        elif c.kind == "kambaz":
            name = f"Kambaz - {c.section}"
        else:
            name = "General"
        if name not in sections:
            sections.append(name)
    return tuple(sections)


def parse_rows(rows, assignment_number: int) -> Rubric:
    """Build a Rubric from raw sheet rows (header rows included)."""
    criteria = []
    for index, row in enumerate(rows):
        if index < HEADER_ROWS or not row or row[0] is None:
            continue
        text = str(row[0]).strip()
        if not text:
            continue
        try:
            points = extract_points(row)
        except RubricError as e:
            raise RubricError(f"Row {index + 1} ({text}): {e}") from e
        criteria.append(parse_criterion(text, points, assignment_number))

    return Rubric(
        assignment_number=assignment_number,
        criteria=tuple(criteria),
        sections=extract_sections(criteria),
    )


def parse_excel(file_path) -> Rubric:
    """Read the first worksheet of an .xlsx rubric."""
    import openpyxl

    if not os.path.exists(file_path):
        raise RubricError(f"Rubric file not found: {file_path}")

    wb = openpyxl.load_workbook(file_path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = [tuple(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    rubric = parse_rows(rows, extract_assignment_number(file_path))
    logger.info("Parsed %d criteria from %s", len(rubric.criteria), file_path)
    return rubric


# =============================================================================
# JSON
# =============================================================================

def load_rubric(file_path) -> Rubric:
    """Load a rubric JSON file. Malformed JSON is a fatal RubricError."""
    if not os.path.exists(file_path):
        raise RubricError(f"Rubric file not found: {file_path}")
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RubricError(f"Rubric JSON is malformed ({file_path}): {e}") from e
    return Rubric.from_dict(data)


def save_rubric(rubric: Rubric, output_path) -> str:
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(rubric.to_dict(), f, indent=2)
    return str(output_path)
