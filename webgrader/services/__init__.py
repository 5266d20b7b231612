"""
Grader Services
===============

Business logic for rubric-driven browser grading.

Services:
- keywords / selection / templates: criterion -> executable check
- navigation / browser: reaching a student's page through Selenium
- scoring / report: results aggregation and JSON/HTML reports
- rubric_parser / suite / runner: rubric -> suite -> graded run
"""

# Services are imported directly when needed to avoid circular imports
# Example: from webgrader.services.templates import build_check

__all__ = [
    'keywords',
    'selection',
    'templates',
    'styles',
    'navigation',
    'browser',
    'scoring',
    'report',
    'rubric_parser',
    'suite',
    'runner',
]
