"""
Rubric Keyword Extraction
=========================
Maps the free-text detail of a rubric line to the concrete values a check
template needs: input types, field names, colors, routes and selectors.

Every extractor is a pure function. Matching is a case-insensitive
substring test evaluated in a fixed order (first match wins), and text with
no recognizable keyword resolves to the documented default.
"""

import re
from collections import namedtuple


Colors = namedtuple("Colors", ["foreground", "background"])

COLOR_NAMES = ("black", "white", "red", "blue", "green", "yellow")

_COLOR_PAIR = re.compile(
    r"(%s)\s+on\s+(%s)" % ("|".join(COLOR_NAMES), "|".join(COLOR_NAMES)),
    re.IGNORECASE,
)


def _first_match(detail, table, default):
    """Walk (keywords, value) pairs in order and return the first hit."""
    lower = (detail or "").lower()
    for keywords, value in table:
        if any(k in lower for k in keywords):
            return value
    return default


_INPUT_TYPES = [
    (("password",), "password"),
    (("email",), "email"),
    (("date",), "date"),
    (("number",), "number"),
    (("file",), "file"),
    (("range", "slider"), "range"),
]


def extract_input_type(detail: str) -> str:
    """Input `type` attribute the criterion expects (default "text")."""
    return _first_match(detail, _INPUT_TYPES, "text")


_FIELD_NAMES = [
    (("username",), "username"),
    (("password",), "password"),
    (("email",), "email"),
    (("first name",), "firstname"),
    (("last name",), "lastname"),
    (("salary",), "salary"),
    (("dob", "birth"), "dob"),
    (("rating",), "rating"),
]


def extract_field_name(detail: str) -> str:
    """Field name fragment used to match name/placeholder/value attributes."""
    return _first_match(detail, _FIELD_NAMES, "input")


def extract_colors(detail: str) -> Colors:
    """
    Parse a "<color> on <color>" phrase.

    Returns:
        Colors(foreground, background), lowercased; both None if absent
    """
    match = _COLOR_PAIR.search(detail or "")
    if not match:
        return Colors(None, None)
    return Colors(match.group(1).lower(), match.group(2).lower())


_NAVIGATION_TARGETS = [
    (("profile",), "Profile"),
    (("dashboard",), "Dashboard"),
    (("signin",), "Signin"),
    (("signup",), "Signup"),
    (("modules",), "Modules"),
    (("assignments",), "Assignments"),
    (("home",), "Home"),
]


def extract_navigation_target(detail: str) -> str:
    return _first_match(detail, _NAVIGATION_TARGETS, "")


_BUTTON_TEXT = [
    (("signin",), "sign ?in"),
    (("signup",), "sign ?up"),
    (("signout",), "sign ?out"),
]


def extract_button_text(detail: str) -> str:
    """Regex fragment matched (case-insensitively) against button/link labels."""
    return _first_match(detail, _BUTTON_TEXT, "button")


_LINK_TARGETS = [
    (("github",), "github"),
    (("account",), "Account"),
    (("dashboard",), "Dashboard"),
    (("labs",), "Labs"),
    (("calendar",), "Calendar"),
    (("inbox",), "Inbox"),
    (("neu",), "northeastern"),
]


def extract_link_target(detail: str) -> str:
    """Substring an anchor's href must contain."""
    return _first_match(detail, _LINK_TARGETS, "")


_ELEMENT_SELECTORS = [
    (("heading",), "h1, h2, h3"),
    (("paragraph",), "p"),
    (("div",), "div"),
    (("span",), "span"),
]


def get_element_selector(detail: str) -> str:
    return _first_match(detail, _ELEMENT_SELECTORS, "body > *")
