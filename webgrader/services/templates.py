"""
Check Template Catalog
======================
Turns a rubric Criterion into an executable browser check.

Each template is a factory `(criterion) -> evaluate(page)` that returns
`(earned, details)`. The keyword extraction happens once, when the check is
built; `evaluate` only queries the page. `Check` wraps an evaluator with
the shared contract:

1. Navigate to the criterion's route (with retry) and wait for readiness
2. Run the template's decision rule
3. Convert any exception into a zero-credit "Error: ..." result
4. Record exactly one CheckResult, possible = points.best

Earned values are always one of the criterion's declared tiers.
"""

import re
import logging

from ..models import CheckResult
from ..rubric_config import FORM_CHECKBOX
from .browser import DEFAULT_VIEWPORT
from .keywords import (
    extract_button_text,
    extract_colors,
    extract_field_name,
    extract_input_type,
    extract_link_target,
    extract_navigation_target,
    get_element_selector,
)
from .selection import TemplateKind, select_template
from .styles import rule_matches

logger = logging.getLogger(__name__)

CLICKABLE_SELECTOR = (
    'button, a, [role="button"], [role="link"], '
    'input[type="submit"], input[type="button"]'
)
GRID_ITEM_SELECTOR = '[class*="course"], .course-card, [class*="grid"] > *'
SIDEBAR_SELECTOR = 'nav, aside, [class*="sidebar"]'
BOOTSTRAP_SELECTOR = '[class*="list"], ul, ol, .table, form, .btn'

GRID_FULL_CREDIT_ITEMS = 3
NARROW_WIDTH = 480
WIDE_WIDTH = 1280
VIEWPORT_HEIGHT = 720
CLICK_SETTLE_MS = 2000
RESIZE_SETTLE_MS = 500


# =============================================================================
# FORM TEMPLATES
# =============================================================================

def form_input_template(criterion):
    points = criterion.points
    input_type = extract_input_type(criterion.detail)
    field = extract_field_name(criterion.detail)
    selector = (
        f'input[type="{input_type}"], '
        f'input[name*="{field}" i], '
        f'input[placeholder*="{field}" i]'
    )

    def evaluate(page):
        inputs = page.query_all(selector)
        if not inputs:
            return points.zero, f"{field} input not found"

        # An input without a type attribute renders as type="text"
        types = [page.get_attribute(el, "type") or "text" for el in inputs]
        if input_type in types:
            return points.best, f'{field} input found with correct type="{input_type}"'
        return (
            points.tier("almost"),
            f'{field} input found but type="{types[0]}" instead of "{input_type}"',
        )

    return evaluate


def checkbox_radio_template(criterion):
    points = criterion.points
    input_type = "checkbox" if criterion.test_type == FORM_CHECKBOX else "radio"
    value = extract_field_name(criterion.detail)
    selector = f'input[type="{input_type}"][value*="{value}" i]'

    def evaluate(page):
        if page.query_all(selector):
            return points.best, f"{value} {input_type} found"
        return points.zero, f"{value} {input_type} not found"

    return evaluate


def select_template_check(criterion):
    points = criterion.points

    def evaluate(page):
        selects = page.query_all("select")
        if not selects:
            return points.zero, "No dropdown found"
        options = len(page.query_all("option", within=selects[0]))
        return points.best, f"Found {len(selects)} dropdown(s) with {options} options"

    return evaluate


# =============================================================================
# NAVIGATION & LINK TEMPLATES
# =============================================================================

def _accessible_name(page, element) -> str:
    for attr in ("aria-label", "value", "title"):
        value = page.get_attribute(element, attr)
        if value:
            return value
    return " ".join(page.text_content(element).split())


def _dismiss_dialog(page):
    dialog = page.dismiss_dialog()
    if dialog is not None:
        logger.info("Dismissed dialog after click: %s", dialog)


def navigation_template(criterion):
    points = criterion.points
    label = re.compile(extract_button_text(criterion.detail), re.IGNORECASE)
    target = extract_navigation_target(criterion.detail)

    def evaluate(page):
        matches = [
            el for el in page.query_all(CLICKABLE_SELECTOR)
            if label.search(_accessible_name(page, el))
        ]
        if not matches:
            return points.zero, "Navigation button/link not found"

        page.click(matches[0])
        _dismiss_dialog(page)
        # Alerts can also open while the click settles
        page.wait(CLICK_SETTLE_MS)
        _dismiss_dialog(page)

        url = page.url
        if not target or f"/{target}" in url:
            return points.best, f"Navigation successful to {url}"
        return points.tier("almost"), f"Button clicked but navigated to {url}"

    return evaluate


def link_exists_template(criterion):
    points = criterion.points
    target = extract_link_target(criterion.detail)
    name = target or "Expected"

    def evaluate(page):
        if target and page.query_all(f'a[href*="{target}"]'):
            return points.best, f"{name} link found"
        return points.zero, f"{name} link not found"

    return evaluate


# =============================================================================
# STYLE & LAYOUT TEMPLATES
# =============================================================================

def _describe_rule(rule) -> str:
    parts = []
    if rule.color:
        parts.append(rule.color)
    if rule.pattern:
        parts.append(f"/{rule.pattern}/")
    if rule.min is not None:
        parts.append(f">= {rule.min:g}px")
    if rule.max is not None:
        parts.append(f"<= {rule.max:g}px")
    return f"{rule.property} {' '.join(parts)}".strip()


def css_style_template(criterion):
    """
    Presence + reporting by default. With a StyleSpec on the criterion the
    computed values are validated: the first element satisfying every rule
    earns full credit, elements that all miss earn the StyleSpec's partial tier.
    A CSS criterion describing a grid layout is graded by item count.
    """
    points = criterion.points
    style = criterion.style
    if not (style and style.rules) and "grid" in (criterion.detail or "").lower():
        return grid_layout_template(criterion)
    selector = (style.selector if style and style.selector else None) or get_element_selector(criterion.detail)
    colors = extract_colors(criterion.detail)
    expected = ""
    if colors.foreground:
        expected = f" (expected {colors.foreground} on {colors.background})"

    def report_only(page, elements):
        element = elements[0]
        background = page.computed_style(element, "backgroundColor")
        color = page.computed_style(element, "color")
        return points.best, f"Element found with bg: {background}, color: {color}{expected}"

    def validate(page, elements):
        observed = ""
        for element in elements:
            text = " ".join(page.text_content(element).split())
            if style.require_text and not text:
                continue
            values = {rule.property: page.computed_style(element, rule.property) for rule in style.rules}
            if all(rule_matches(rule, values[rule.property]) for rule in style.rules):
                wanted = ", ".join(_describe_rule(r) for r in style.rules)
                return points.best, f'Found "{selector}" element matching {wanted}: "{text[:60]}"'
            if not observed:
                observed = ", ".join(f"{k}: {v}" for k, v in values.items())
        return (
            points.tier(style.partial),
            f'Found "{selector}" but no element matched the expected style ({observed or "no text"})',
        )

    def evaluate(page):
        elements = page.query_all(selector)
        if not elements:
            return points.zero, "Element not found"
        if style and style.rules:
            return validate(page, elements)
        return report_only(page, elements)

    return evaluate


def grid_layout_template(criterion):
    points = criterion.points

    def evaluate(page):
        count = len(page.query_all(GRID_ITEM_SELECTOR))
        if count >= GRID_FULL_CREDIT_ITEMS:
            return points.best, f"Found {count} items in grid layout"
        if count > 0:
            return points.tier("better"), f"Found {count} items (expected {GRID_FULL_CREDIT_ITEMS}+)"
        return points.zero, "No grid items found"

    return evaluate


def responsive_template(criterion):
    points = criterion.points
    lower = (criterion.detail or "").lower()
    narrow = "narrow" in lower or "hide" in lower
    width = NARROW_WIDTH if narrow else WIDE_WIDTH

    def evaluate(page):
        page.set_viewport(width, VIEWPORT_HEIGHT)
        try:
            page.wait(RESIZE_SETTLE_MS)
            sidebars = page.query_all(SIDEBAR_SELECTOR)
            if not sidebars:
                return points.zero, "Sidebar element not found"

            visible = page.is_visible(sidebars[0])
            if narrow:
                if not visible:
                    return points.best, "Sidebar correctly hidden at narrow viewport"
                return points.tier("almost"), "Sidebar still visible at narrow viewport"
            if visible:
                return points.best, "Sidebar correctly shown at wide viewport"
            return points.tier("almost"), "Sidebar hidden at wide viewport"
        finally:
            # Later checks share this page
            page.set_viewport(*DEFAULT_VIEWPORT)

    return evaluate


def bootstrap_template(criterion):
    points = criterion.points

    def evaluate(page):
        count = len(page.query_all(BOOTSTRAP_SELECTOR))
        if count > 0:
            return points.best, f"Found {count} Bootstrap-styled elements"
        return points.zero, "No Bootstrap elements found"

    return evaluate


def generic_template(criterion):
    points = criterion.points

    def evaluate(page):
        if page.query_all("body"):
            return points.best, "Page loaded successfully"
        return points.zero, "Page did not load"

    return evaluate


TEMPLATES = {
    TemplateKind.FORM_INPUT: form_input_template,
    TemplateKind.CHECKBOX_RADIO: checkbox_radio_template,
    TemplateKind.SELECT: select_template_check,
    TemplateKind.NAVIGATION: navigation_template,
    TemplateKind.LINK_EXISTS: link_exists_template,
    TemplateKind.CSS_STYLE: css_style_template,
    TemplateKind.GRID_LAYOUT: grid_layout_template,
    TemplateKind.RESPONSIVE: responsive_template,
    TemplateKind.BOOTSTRAP: bootstrap_template,
    TemplateKind.GENERIC: generic_template,
}


# =============================================================================
# CHECK RUNTIME
# =============================================================================

class Check:
    """One executable, isolated check for a single criterion."""

    def __init__(self, criterion, kind, evaluate):
        self.criterion = criterion
        self.kind = kind
        self.evaluate = evaluate

    @property
    def name(self) -> str:
        return self.criterion.original_text

    def __call__(self, session, collector) -> CheckResult:
        criterion = self.criterion
        points = criterion.points
        try:
            session.open(
                criterion.route,
                use_backend=criterion.use_backend,
                ready_timeout_ms=criterion.timeout_ms,
            )
            earned, details = self.evaluate(session.page)
        except Exception as e:
            logger.warning("Check \"%s\" raised: %s", criterion.original_text, e)
            earned, details = points.zero, f"Error: {str(e).strip() or e.__class__.__name__}"

        result = CheckResult(
            criterion=criterion.original_text,
            earned=earned,
            possible=points.best,
            details=details or "No details recorded",
        )
        collector.record(result)
        return result

    def __repr__(self):
        return f"Check({self.kind.value!r}, {self.name!r})"


def build_check(criterion, kind=None) -> Check:
    """Build the check for a criterion, selecting its template unless `kind` is given."""
    kind = TemplateKind(kind) if kind is not None else select_template(criterion)
    return Check(criterion, kind, TEMPLATES[kind](criterion))
