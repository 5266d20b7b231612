"""
Template Selection
==================
Decides which check template grades a rubric criterion.

SELECTION_RULES is evaluated top to bottom and the first matching rule
wins, so the order is the precedence policy: an explicit test type beats
category/detail keywords, and the always-succeeding generic template is
the last resort.
"""

from enum import Enum

from ..rubric_config import (
    FORM_CHECKBOX,
    FORM_INPUT,
    FORM_RADIO,
    FORM_SELECT,
    LINK_EXISTS,
    NAVIGATION_CLICK,
)


class TemplateKind(str, Enum):
    FORM_INPUT = "form_input"
    CHECKBOX_RADIO = "checkbox_radio"
    SELECT = "select"
    NAVIGATION = "navigation"
    LINK_EXISTS = "link_exists"
    CSS_STYLE = "css_style"
    GRID_LAYOUT = "grid_layout"
    RESPONSIVE = "responsive"
    BOOTSTRAP = "bootstrap"
    GENERIC = "generic"


def _detail_has(keyword):
    return lambda c: keyword in (c.detail or "").lower()


SELECTION_RULES = (
    (lambda c: c.test_type == FORM_INPUT, TemplateKind.FORM_INPUT),
    (lambda c: c.test_type in (FORM_CHECKBOX, FORM_RADIO), TemplateKind.CHECKBOX_RADIO),
    (lambda c: c.test_type == FORM_SELECT, TemplateKind.SELECT),
    (lambda c: c.test_type == NAVIGATION_CLICK, TemplateKind.NAVIGATION),
    (lambda c: c.test_type == LINK_EXISTS, TemplateKind.LINK_EXISTS),
    (lambda c: "CSS" in (c.category or ""), TemplateKind.CSS_STYLE),
    (_detail_has("grid"), TemplateKind.GRID_LAYOUT),
    (_detail_has("responsive"), TemplateKind.RESPONSIVE),
    (_detail_has("bootstrap"), TemplateKind.BOOTSTRAP),
)


def select_template(criterion) -> TemplateKind:
    """Pick the template for a criterion; depends only on test_type, category and detail."""
    for matches, kind in SELECTION_RULES:
        if matches(criterion):
            return kind
    return TemplateKind.GENERIC
