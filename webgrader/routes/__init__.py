"""
Web Grader API Routes
=====================

Route blueprints for the grading dashboard.

Usage:
    from webgrader.routes import register_routes
    register_routes(app, grader_config)
"""
from .grading_routes import grading_bp, init_grading_routes


def register_routes(app, grader_config=None):
    """Register all route blueprints with the Flask app."""

    # Initialize grading routes with the configuration if provided
    if grader_config is not None:
        init_grading_routes(grader_config)

    app.register_blueprint(grading_bp)


__all__ = [
    'register_routes',
    'grading_bp',
    'init_grading_routes'
]
