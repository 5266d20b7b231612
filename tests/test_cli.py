"""
Test: Command-line entry points.
"""
import os
import json

import pytest
from webgrader import cli
from webgrader.models import RunOutcome


@pytest.fixture
def cli_config(monkeypatch, grader_config):
    """Point the CLI's global config at temp dirs."""
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    for key, value in grader_config.to_dict().items():
        monkeypatch.setattr(cli.config, key, value)
    return cli.config


@pytest.fixture
def rubric_xlsx(tmp_path):
    openpyxl = pytest.importorskip("openpyxl")
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["Criteria", "Points"])
    ws.append([None, "Best", "Better", "Almost", "Missing"])
    ws.append(["Lab - Forms - password field", 3, 2, 1, 0])
    ws.append(["Lab - CSS - grid layout", 3, 2, 0, 0])
    path = tmp_path / "A2Rubric.xlsx"
    wb.save(path)
    return str(path)


@pytest.fixture
def fake_grading(monkeypatch):
    calls = []

    def _install(success=True):
        def _run(paths, config, assignment_number=None, page=None):
            calls.append((paths, config.student_url, assignment_number))
            return RunOutcome(strict=not success, shortfalls=[] if success else ["x"])
        monkeypatch.setattr(cli, "run_grading", _run)
        return calls
    return _install


class TestParseAndGenerate:
    def test_parse_writes_json(self, rubric_xlsx, cli_config, tmp_path):
        out = str(tmp_path / "out.json")
        assert cli.main(["parse", rubric_xlsx, out]) == 0
        data = json.loads(open(out).read())
        assert data["assignmentNumber"] == 2
        assert len(data["criteria"]) == 2

    def test_generate_writes_suite(self, rubric_xlsx, cli_config):
        cli.main(["parse", rubric_xlsx])
        json_path = os.path.splitext(rubric_xlsx)[0] + ".json"
        assert cli.main(["generate", json_path, "--strict"]) == 0

        suite = json.loads(open(os.path.join(cli_config.suites_dir, "assignment2.suite.json")).read())
        assert suite["strict"] is True
        assert [c["template"] for c in suite["checks"]] == ["form_input", "css_style"]

    def test_missing_rubric(self, cli_config, tmp_path, capsys):
        assert cli.main(["generate", str(tmp_path / "nope.json")]) == 1
        assert "Error" in capsys.readouterr().err


class TestGrade:
    def test_invalid_url(self, cli_config, capsys):
        assert cli.main(["grade", "not-a-url"]) == 1
        assert "Invalid URL" in capsys.readouterr().err

    def test_grade_assignment(self, cli_config, fake_grading):
        calls = fake_grading()
        assert cli.main(["grade", "https://s.dev/?_vercel_share=x", "3"]) == 0
        paths, student_url, number = calls[0]
        assert paths == [os.path.join(cli_config.suites_dir, "assignment3.suite.json")]
        assert student_url == "https://s.dev/?_vercel_share=x"
        assert number == 3

    def test_strict_failure_exit_code(self, cli_config, fake_grading):
        fake_grading(success=False)
        assert cli.main(["grade", "https://s.dev", "--suite", "x.suite.json"]) == 1

    def test_no_suites(self, cli_config, fake_grading, capsys):
        fake_grading()
        assert cli.main(["grade", "https://s.dev"]) == 1
        assert "No suites found" in capsys.readouterr().err

    def test_all_suites(self, cli_config, fake_grading):
        calls = fake_grading()
        os.makedirs(cli_config.suites_dir)
        for n in (1, 2):
            open(os.path.join(cli_config.suites_dir, f"assignment{n}.suite.json"), "w").close()
        assert cli.main(["grade", "https://s.dev"]) == 0
        assert [os.path.basename(p) for p in calls[0][0]] == ["assignment1.suite.json", "assignment2.suite.json"]


class TestFull:
    def test_full_workflow(self, rubric_xlsx, cli_config, fake_grading):
        calls = fake_grading()
        assert cli.main(["full", rubric_xlsx, "https://s.dev"]) == 0
        assert os.path.exists(os.path.join(cli_config.suites_dir, "assignment2.suite.json"))
        assert calls[0][2] == 2


def test_no_command_prints_help(cli_config, capsys):
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out
