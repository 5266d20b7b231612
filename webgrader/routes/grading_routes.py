"""
Grading API routes for the dashboard.
Handles listing generated suites, starting a grading run and serving reports.

Grading runs in a child process (the `webgrader grade` CLI) so a hung
browser can be bounded by the run timeout without taking the server down.
"""
import os
import sys
import logging
import subprocess
from flask import Blueprint, request, jsonify, send_from_directory

from ..config import BASE_DIR, RUN_MODES
from ..services.suite import list_suites, suite_path

logger = logging.getLogger(__name__)

grading_bp = Blueprint('grading', __name__)

# Set by the app factory during initialization
grader_config = None


def init_grading_routes(config_ref):
    """Initialize grading routes with the app's grader configuration."""
    global grader_config
    grader_config = config_ref


def _decode(stream) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode('utf-8', errors='replace')
    return stream


@grading_bp.route('/assignments')
@grading_bp.route('/api/assignments')
def get_assignments():
    """List generated suites that can be graded."""
    if grader_config is None:
        return jsonify({"error": "Grading not initialized"}), 500
    try:
        return jsonify(list_suites(grader_config.suites_dir))
    except OSError as e:
        logger.error("Error reading suites from %s: %s", grader_config.suites_dir, e)
        return jsonify({"error": "Failed to list assignments"}), 500


@grading_bp.route('/grade', methods=['POST'])
@grading_bp.route('/api/grade', methods=['POST'])
def grade():
    """Grade a student URL against one suite and return the runner output."""
    if grader_config is None:
        return jsonify({"error": "Grading not initialized"}), 500

    data = request.get_json(silent=True) or {}
    assignment = data.get('assignment')
    student_url = data.get('studentUrl')
    backend_url = data.get('backendUrl') or ""
    mode = data.get('mode') or grader_config.mode

    if not assignment or not student_url:
        return jsonify({"error": "Assignment and Student URL are required"}), 400
    if mode not in RUN_MODES:
        return jsonify({"error": f"Unknown mode: {mode}"}), 400

    path = suite_path(grader_config.suites_dir, assignment)
    if path is None:
        return jsonify({"error": f"Unknown assignment: {assignment}"}), 400

    cmd = [sys.executable, "-m", "webgrader.cli", "grade", student_url, "--suite", path, "--mode", mode]
    if backend_url:
        cmd += ["--backend-url", backend_url]

    env = {
        **os.environ,
        "STUDENT_URL": student_url,
        "BACKEND_URL": backend_url,
        "GRADER_REPORTS_DIR": grader_config.reports_dir,
    }

    logger.info("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            env=env,
            cwd=str(BASE_DIR),
            timeout=grader_config.run_timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.error("Grading %s timed out after %ss", assignment, grader_config.run_timeout)
        return jsonify({
            "success": False,
            "message": "Grading timed out.",
            "reportUrl": None,
            "output": _decode(e.stdout),
            "error": f"Grading timed out after {grader_config.run_timeout}s",
        }), 504

    passed = proc.returncode == 0
    logger.info("Grading process exited with code %s", proc.returncode)

    return jsonify({
        "success": passed,
        "message": "Grading completed successfully." if passed else "Grading finished with failures.",
        "reportUrl": "/reports/latest.html",
        "output": proc.stdout,
        "error": proc.stderr,
    })


@grading_bp.route('/reports/<path:filename>')
@grading_bp.route('/api/reports/<path:filename>')
def get_report(filename):
    """Serve generated JSON/HTML reports."""
    if grader_config is None:
        return jsonify({"error": "Grading not initialized"}), 500
    return send_from_directory(os.path.abspath(grader_config.reports_dir), filename)
