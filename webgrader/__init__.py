"""
Web Grader Package
==================

Rubric-driven grading of student web applications.

Structure:
- routes/: Dashboard API route blueprints
- services/: Check templates, navigation, scoring and reporting
- templates/: HTML report template
- config.py: Configuration management
- models.py: Rubric and result data models
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
