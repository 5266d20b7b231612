"""
Shared Rubric Configuration
============================
Single source of truth for rubric point tiers and criterion test types.
Used by the rubric parser, the check templates and the suite loader.

If you change default point values here, newly parsed rubrics will
automatically use the updated values.
"""

# Default point tiers per rubric row (columns Best / Better / Almost / Missing)
DEFAULT_POINTS = {
    "best": 3,
    "better": 2,
    "almost": 1,
    "zero": 0,
}

# Tier names from highest to lowest
POINT_TIERS = ("best", "better", "almost", "zero")

# Test types with a dedicated check template
FORM_INPUT = "form_input"
FORM_CHECKBOX = "form_checkbox"
FORM_RADIO = "form_radio"
FORM_SELECT = "form_select"
NAVIGATION_CLICK = "navigation_click"
LINK_EXISTS = "link_exists"
GENERIC = "generic"
GENERAL = "general"
