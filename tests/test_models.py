"""
Test: Rubric data models and config.
"""
import pytest
from webgrader.config import Config
from webgrader.models import CheckResult, Criterion, Points, RubricError, StyleRule, StyleSpec


class TestPoints:
    def test_defaults_when_missing(self):
        assert Points.from_dict(None) == Points(best=3, better=2, almost=1, zero=0)

    def test_missing_alias_for_zero(self):
        assert Points.from_dict({"best": 3, "missing": 0}).zero == 0

    def test_partial_tiers_optional(self):
        points = Points.from_dict({"best": 3, "almost": 1})
        assert points.better is None
        assert points.tier("better") == 0
        assert points.tiers() == [3, 1, 0]

    def test_increasing_tiers_rejected(self):
        with pytest.raises(RubricError):
            Points(best=2, better=3)

    def test_negative_zero_rejected(self):
        with pytest.raises(RubricError):
            Points(best=2, zero=-1)

    def test_float_strings(self):
        assert Points.from_dict({"best": "2.5", "zero": "0"}) == Points(best=2.5, zero=0)

    def test_missing_best(self):
        with pytest.raises(RubricError):
            Points.from_dict({"better": 2})

    def test_to_dict_skips_absent_tiers(self):
        assert Points(best=3, almost=1).to_dict() == {"best": 3, "almost": 1, "zero": 0}


class TestCriterion:
    def test_from_dict_defaults(self):
        c = Criterion.from_dict({"originalText": "Site loads"})
        assert c.route == "/"
        assert c.test_type == "generic"
        assert c.points == Points(best=3, better=2, almost=1)

    def test_style_round_trip(self):
        data = {
            "originalText": "Inverted text",
            "testType": "generic",
            "category": "CSS",
            "style": {
                "selector": ".inverted",
                "rules": [{"property": "color", "color": "white"}],
                "requireText": True,
                "partial": "better",
            },
            "timeoutMs": 5000,
            "useBackend": True,
        }
        c = Criterion.from_dict(data)
        assert c.style.require_text
        assert c.timeout_ms == 5000
        assert c.use_backend
        assert Criterion.from_dict(c.to_dict()) == c

    def test_bad_partial_tier(self):
        with pytest.raises(RubricError):
            StyleSpec.from_dict({"rules": [], "partial": "best"})

    def test_missing_text(self):
        with pytest.raises(RubricError):
            Criterion.from_dict({"route": "/"})


class TestStyleRule:
    def test_numeric_strings(self):
        assert StyleRule.from_dict({"property": "fontSize", "min": "16"}).min == 16

    def test_bad_bound(self):
        with pytest.raises(RubricError, match="min"):
            StyleRule.from_dict({"property": "fontSize", "min": "big"})

    def test_bad_pattern(self):
        with pytest.raises(RubricError, match="pattern"):
            StyleRule.from_dict({"property": "color", "pattern": "("})

    def test_bad_rule_rejects_criterion(self):
        data = {"originalText": "Red text", "style": {"rules": [{"property": "color", "pattern": "[red"}]}}
        with pytest.raises(RubricError):
            Criterion.from_dict(data)


class TestCheckResult:
    def test_passed(self):
        assert CheckResult("a", 3, 3, "ok").passed
        assert not CheckResult("a", 2, 3, "meh").passed

    def test_zero_point_criterion_passes(self):
        assert CheckResult("a", 0, 0, "nothing to earn").passed


class TestConfig:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GRADER_MODE", "headed")
        monkeypatch.setenv("GRADER_STRICT", "true")
        monkeypatch.setenv("GRADER_NAVIGATION_RETRIES", "5")
        cfg = Config()
        assert cfg.mode == "headed"
        assert cfg.strict is True
        assert cfg.navigation_retries == 5

    def test_bad_int(self, monkeypatch):
        monkeypatch.setenv("GRADER_RUN_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            Config()

    def test_update_skips_none(self, grader_config):
        grader_config.update({"student_url": None, "mode": "interactive"})
        assert grader_config.student_url.startswith("https://student.example.com")
        assert grader_config.mode == "interactive"

    def test_update_rejects_unknown_mode(self, grader_config):
        with pytest.raises(ValueError):
            grader_config.update({"mode": "turbo"})
