"""
Shared test fixtures for the web grader.
Pages are served from in-memory HTML through a BeautifulSoup-backed
BrowserPage, so no browser or network is needed.
"""
from urllib.parse import urljoin, urlsplit

import pytest
from bs4 import BeautifulSoup

from webgrader.config import Config
from webgrader.models import Criterion, Points
from webgrader.services.browser import BrowserPage, DEFAULT_VIEWPORT, css_property_name
from webgrader.services.navigation import GradingSession
from webgrader.services.scoring import ResultsCollector

STUDENT_URL = "https://student.example.com/?_vercel_share=abc123"
LOGIN_URL = "https://vercel.com/login?next=student"
LOGIN_HTML = "<html><body><h1>Sign in to Vercel</h1></body></html>"
EMPTY_HTML = "<html><body></body></html>"

DEFAULT_STYLES = {
    "color": "rgb(0, 0, 0)",
    "background-color": "rgba(0, 0, 0, 0)",
}


def _inline_styles(element) -> dict:
    styles = {}
    for declaration in (element.get("style") or "").split(";"):
        if ":" in declaration:
            name, value = declaration.split(":", 1)
            styles[name.strip().lower()] = value.strip()
    return styles


class FakePage(BrowserPage):
    """
    BrowserPage over a dict of path -> HTML.

    - inline `style` attributes act as computed styles
    - `data-hide-below="768"` hides an element when the viewport is narrower
    - clicking an element with `href` / `data-navigate` follows it, `data-alert` opens a dialog
    - `data-alert-later` opens a dialog during the next wait; reading the URL
      while a dialog is open raises, like an unexpected alert in a real browser
    - with `login_wall=True` every route redirects to the Vercel login page
      until the site root has been visited once
    - `fail_first=N` makes the first N loads raise
    """

    def __init__(self, pages, login_wall=False, fail_first=0):
        self.pages = pages
        self.login_wall = login_wall
        self.fail_first = fail_first
        self.primed = False
        self.visits = []
        self.viewports = []
        self.waits = []
        self.clicks = []
        self.viewport = DEFAULT_VIEWPORT
        self._dialog = None
        self._pending_dialog = None
        self._url = "about:blank"
        self.soup = BeautifulSoup(EMPTY_HTML, "html.parser")

    def _load(self, url):
        path = urlsplit(url).path or "/"
        if self.login_wall and not self.primed:
            if path == "/":
                self.primed = True
            else:
                self._url = LOGIN_URL
                self.soup = BeautifulSoup(LOGIN_HTML, "html.parser")
                return
        self._url = url
        self.soup = BeautifulSoup(self.pages.get(path, EMPTY_HTML), "html.parser")

    @property
    def url(self):
        if self._dialog is not None:
            raise RuntimeError(f"unexpected alert open: {self._dialog}")
        return self._url

    def goto(self, url, timeout_ms):
        self.visits.append(url)
        if self.fail_first > 0:
            self.fail_first -= 1
            raise TimeoutError(f"Navigation timeout of {timeout_ms}ms exceeded")
        self._load(url)

    def wait_until_ready(self, timeout_ms):
        return True

    def query_all(self, selector, within=None):
        root = within if within is not None else self.soup
        return root.select(selector)

    def get_attribute(self, element, name):
        return element.get(name)

    def text_content(self, element):
        return element.get_text()

    def computed_style(self, element, prop):
        name = css_property_name(prop)
        return _inline_styles(element).get(name, DEFAULT_STYLES.get(name, ""))

    def is_visible(self, element):
        if _inline_styles(element).get("display") == "none":
            return False
        hide_below = element.get("data-hide-below")
        if hide_below and self.viewport[0] < int(hide_below):
            return False
        return True

    def click(self, element):
        self.clicks.append(element)
        if element.get("data-alert"):
            self._dialog = element["data-alert"]
        if element.get("data-alert-later"):
            self._pending_dialog = element["data-alert-later"]
        target = element.get("href") or element.get("data-navigate")
        if target:
            self._load(urljoin(self._url, target))

    def set_viewport(self, width, height):
        self.viewports.append((width, height))
        self.viewport = (width, height)

    def wait(self, ms):
        self.waits.append(ms)
        if self._pending_dialog is not None:
            self._dialog, self._pending_dialog = self._pending_dialog, None

    def dismiss_dialog(self):
        dialog, self._dialog = self._dialog, None
        return dialog


class ExplodingPage(FakePage):
    """Loads fine, then blows up on the first element query of a check."""

    def query_all(self, selector, within=None):
        if selector == "body":
            return super().query_all(selector, within)
        raise RuntimeError("Execution context was destroyed")


@pytest.fixture
def grader_config(tmp_path):
    cfg = Config()
    cfg.student_url = STUDENT_URL
    cfg.backend_url = ""
    cfg.mode = "headless"
    cfg.strict = False
    cfg.prime_session = True
    cfg.navigation_retries = 3
    cfg.navigation_timeout_ms = 30000
    cfg.ready_timeout_ms = 10000
    cfg.course_id = "1234"
    cfg.assignment_id = "5678"
    cfg.suites_dir = str(tmp_path / "suites")
    cfg.reports_dir = str(tmp_path / "reports")
    return cfg


@pytest.fixture
def make_criterion():
    """Factory for criteria with sensible defaults."""
    def _make(detail="", test_type="generic", category=None, route="/",
              points=None, style=None, text=None, **kwargs):
        return Criterion(
            original_text=text or detail or test_type,
            route=route,
            test_type=test_type,
            detail=detail,
            points=points or Points(best=3, better=2, almost=1),
            category=category,
            style=style,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_page():
    """Factory: make_page(html) serves `html` at the site root; `pages` maps other routes."""
    def _make(html=None, pages=None, **kwargs):
        pages = dict(pages or {})
        if html is not None:
            pages.setdefault("/", html)
        return FakePage(pages, **kwargs)
    return _make


@pytest.fixture
def run_check(grader_config):
    """Build and run one check; returns (result, collector)."""
    from webgrader.services.templates import build_check

    def _run(criterion, page, kind=None, strict=False):
        session = GradingSession(page, grader_config)
        collector = ResultsCollector(strict=strict)
        result = build_check(criterion, kind)(session, collector)
        return result, collector
    return _run


@pytest.fixture
def exploding_page():
    def _make(html=EMPTY_HTML):
        return ExplodingPage({"/": html})
    return _make
