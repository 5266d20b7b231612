"""
Check Navigation
================
URL construction and resilient navigation for grading checks.

Student sites are often deployed behind share links (e.g. Vercel's
?_vercel_share=...). The share query parameters on the base URL are copied
onto every navigation URL, and a redirect to the hosting provider's login
page is treated as a recoverable condition: prime the session at the site
root, then retry the target.
"""

import re
import logging
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

RETRY_WAIT_MS = 2000
PRIME_WAIT_MS = 1000
LOGIN_RETRY_WAIT_MS = 3000

LOGIN_WALL_URL_MARKERS = (
    "vercel.com/login",
    "vercel.com/auth",
    "vercel.com/sso-api",
)
LOGIN_WALL_TEXT = "Sign in to Vercel"


class NavigationError(Exception):
    """Navigation to a check's route failed after all retries."""


def build_url(path: str, base_url: str, propagate_query: bool = True) -> str:
    """
    Resolve `path` against `base_url`.

    Query parameters present on the base URL are added to the target unless
    the target already defines them.
    """
    if not base_url:
        return path

    target = urlsplit(urljoin(base_url, path))
    if not propagate_query:
        return urlunsplit(target)

    base_params = parse_qsl(urlsplit(base_url).query, keep_blank_values=True)
    params = parse_qsl(target.query, keep_blank_values=True)
    existing = {key for key, _ in params}
    params.extend((key, value) for key, value in base_params if key not in existing)

    return urlunsplit(target._replace(query=urlencode(params)))


def resolve_route(route: str, course_id: str, assignment_id: str) -> str:
    """Substitute the :id / :assignmentId placeholders used in Kambaz routes."""
    route = re.sub(r":assignmentId\b", assignment_id, route or "/")
    return re.sub(r":id\b", course_id, route)


def is_login_wall(page) -> bool:
    """True if the page is the hosting provider's login screen instead of the site."""
    current = (page.url or "").lower()
    if any(marker in current for marker in LOGIN_WALL_URL_MARKERS):
        return True
    for body in page.query_all("body"):
        if LOGIN_WALL_TEXT in page.text_content(body):
            return True
    return False


def navigate_with_retry(page, url: str, root_url: str, timeout_ms: int = 30000, max_retries: int = 3):
    """
    Navigate to `url`, retrying failed loads and login-wall redirects.

    Args:
        page: BrowserPage to drive
        url: Fully built target URL
        root_url: Site root (with share params) used to prime the session
        timeout_ms: Per-load navigation timeout
        max_retries: Total attempts before giving up

    Raises:
        NavigationError: when every attempt failed or stayed on the login wall
    """
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            page.goto(url, timeout_ms)
            if not is_login_wall(page):
                return

            logger.warning(
                "Login wall at %s, priming session at %s (attempt %d/%d)",
                page.url, root_url, attempt, max_retries,
            )
            page.goto(root_url, timeout_ms)
            page.wait(PRIME_WAIT_MS)
            page.goto(url, timeout_ms)
            if not is_login_wall(page):
                return

            last_error = f"login page still shown at {page.url}"
            if attempt < max_retries:
                page.wait(LOGIN_RETRY_WAIT_MS)
        except Exception as e:
            last_error = str(e) or e.__class__.__name__
            logger.info("Navigation attempt %d/%d to %s failed: %s", attempt, max_retries, url, last_error)
            if attempt < max_retries:
                page.wait(RETRY_WAIT_MS)

    raise NavigationError(f"Could not load {url} after {max_retries} attempts ({last_error})")


class GradingSession:
    """
    The single browser page of a grading run plus the settings needed to
    reach a route on the student's site.
    """

    def __init__(self, page, config):
        self.page = page
        self.config = config

    def url_for(self, route: str, use_backend: bool = False) -> str:
        path = resolve_route(route, self.config.course_id, self.config.assignment_id)
        if use_backend:
            return build_url(path, self.config.effective_backend_url, propagate_query=False)
        return build_url(path, self.config.student_url)

    def open(self, route: str, use_backend: bool = False, ready_timeout_ms=None) -> str:
        """Navigate to a route and wait for it to settle. A readiness timeout is not an error."""
        url = self.url_for(route, use_backend)
        navigate_with_retry(
            self.page,
            url,
            self.url_for("/"),
            timeout_ms=self.config.navigation_timeout_ms,
            max_retries=self.config.navigation_retries,
        )
        self.page.wait_until_ready(ready_timeout_ms or self.config.ready_timeout_ms)
        return url

    def prime(self):
        """Visit the site root once so share-link cookies are set before the first check."""
        self.open("/")
