"""
Configuration management for the web grader.
"""
import os
import sys
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base path
BASE_DIR = Path(__file__).parent.parent

# Generated suites and reports (can be overridden by env)
SUITES_DIR = os.getenv("GRADER_SUITES_DIR", str(BASE_DIR / "suites"))
REPORTS_DIR = os.getenv("GRADER_REPORTS_DIR", str(BASE_DIR / "reports"))

# Student submission
STUDENT_URL = os.getenv("STUDENT_URL", "")
BACKEND_URL = os.getenv("BACKEND_URL", "")

# Browser run modes
RUN_MODES = ("headless", "headed", "interactive")

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Placeholder ids substituted into Kambaz routes (/Courses/:id/...)
TEST_COURSE_ID = os.getenv("TEST_COURSE_ID", "1234")
TEST_ASSIGNMENT_ID = os.getenv("TEST_ASSIGNMENT_ID", "5678")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


class Config:
    """Grading run configuration class."""

    def __init__(self):
        self.student_url = STUDENT_URL
        self.backend_url = BACKEND_URL
        self.mode = os.getenv("GRADER_MODE", "headless")
        self.ready_timeout_ms = _env_int("GRADER_READY_TIMEOUT_MS", 10000)
        self.navigation_timeout_ms = _env_int("GRADER_NAVIGATION_TIMEOUT_MS", 30000)
        self.navigation_retries = _env_int("GRADER_NAVIGATION_RETRIES", 3)
        self.strict = _env_bool("GRADER_STRICT", False)
        self.prime_session = _env_bool("GRADER_PRIME_SESSION", True)
        self.run_timeout = _env_int("GRADER_RUN_TIMEOUT", 600)
        self.suites_dir = SUITES_DIR
        self.reports_dir = REPORTS_DIR
        self.course_id = TEST_COURSE_ID
        self.assignment_id = TEST_ASSIGNMENT_ID

    @property
    def effective_backend_url(self) -> str:
        """Backend base URL, falling back to the student URL when not set."""
        return self.backend_url or self.student_url

    def to_dict(self):
        return {
            "student_url": self.student_url,
            "backend_url": self.backend_url,
            "mode": self.mode,
            "ready_timeout_ms": self.ready_timeout_ms,
            "navigation_timeout_ms": self.navigation_timeout_ms,
            "navigation_retries": self.navigation_retries,
            "strict": self.strict,
            "prime_session": self.prime_session,
            "run_timeout": self.run_timeout,
            "suites_dir": self.suites_dir,
            "reports_dir": self.reports_dir,
            "course_id": self.course_id,
            "assignment_id": self.assignment_id,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if value is not None and hasattr(self, key):
                setattr(self, key, value)
        if self.mode not in RUN_MODES:
            raise ValueError(f"Unknown run mode: {self.mode} (expected one of {', '.join(RUN_MODES)})")
        return self


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for the CLI and the dashboard server."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()
    root.addHandler(handler)

    # Selenium and urllib3 are chatty at INFO
    for name in ("selenium", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


# Global config instance
config = Config()
