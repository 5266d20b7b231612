#!/usr/bin/env python3
"""
Web Grader - Rubric-Driven Web Assignment Grading
=================================================
Run: python3 -m webgrader.app
Then open: http://localhost:3000/api/assignments
"""

import logging

from flask import Flask
from flask_cors import CORS

from .config import HOST, PORT, LOG_LEVEL, config, setup_logging
from .routes import register_routes

logger = logging.getLogger(__name__)


def create_app(grader_config=None):
    """Build the dashboard API app around a grader Config."""
    app = Flask(__name__)
    CORS(app)
    register_routes(app, grader_config or config)
    return app


def main():
    setup_logging(LOG_LEVEL)
    app = create_app()
    logger.info("Grading dashboard API on http://%s:%s", HOST, PORT)
    app.run(host=HOST, port=PORT, debug=False)


if __name__ == "__main__":
    main()
