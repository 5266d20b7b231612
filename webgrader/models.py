"""
Grading Data Models
===================

Data structures shared by the rubric parser, the check templates and the
score aggregator. All models are implemented as dataclasses.

- Points / Criterion / Rubric: loaded once from a rubric, immutable afterwards
- CheckResult: one per executed check
- ScoreReport: reduced from the ordered list of CheckResults
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .rubric_config import DEFAULT_POINTS, GENERIC, POINT_TIERS


class RubricError(ValueError):
    """Raised when a rubric (Excel or JSON) cannot be turned into criteria."""


# =============================================================================
# RUBRIC MODEL
# =============================================================================

@dataclass(frozen=True)
class Points:
    """Ordered point tiers for one rubric line. Partial tiers are optional."""
    best: float
    better: Optional[float] = None
    almost: Optional[float] = None
    zero: float = 0

    def __post_init__(self):
        if self.zero < 0:
            raise RubricError(f"Point tiers must be >= 0 (zero={self.zero})")
        previous = self.best
        for name in POINT_TIERS[1:]:
            value = getattr(self, name)
            if value is None:
                continue
            if value > previous:
                raise RubricError(
                    f"Point tiers must not increase: {name}={value} > {previous}"
                )
            previous = value

    def tier(self, name: str) -> float:
        """Return the value of a named tier; a missing partial tier means zero."""
        value = getattr(self, name)
        return self.zero if value is None else value

    def tiers(self) -> List[float]:
        return [v for v in (getattr(self, name) for name in POINT_TIERS) if v is not None]

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Points":
        if data is None:
            return cls(**DEFAULT_POINTS)
        if not isinstance(data, dict) or "best" not in data:
            raise RubricError(f"Invalid points block: {data!r}")
        zero = data.get("zero", data.get("missing", 0))
        try:
            return cls(
                best=_number(data["best"]),
                better=_number(data["better"]) if data.get("better") is not None else None,
                almost=_number(data["almost"]) if data.get("almost") is not None else None,
                zero=_number(zero if zero is not None else 0),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, RubricError):
                raise
            raise RubricError(f"Invalid points block {data!r}: {e}") from e

    def to_dict(self) -> dict:
        data = {"best": self.best}
        if self.better is not None:
            data["better"] = self.better
        if self.almost is not None:
            data["almost"] = self.almost
        data["zero"] = self.zero
        return data


def _number(value):
    """Keep whole numbers as int so reports print 3/3 instead of 3.0/3.0."""
    number = float(value)
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class StyleRule:
    """One computed-style assertion: a named color, a regex, or a px range."""
    property: str
    color: Optional[str] = None
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "StyleRule":
        if not isinstance(data, dict) or not data.get("property"):
            raise RubricError(f"Style rule needs a property: {data!r}")
        pattern = data.get("pattern")
        if pattern is not None:
            try:
                re.compile(pattern)
            except (re.error, TypeError) as e:
                raise RubricError(f"Invalid pattern in style rule {data!r}: {e}") from e
        bounds = {}
        for key in ("min", "max"):
            value = data.get(key)
            try:
                bounds[key] = _number(value) if value is not None else None
            except (TypeError, ValueError) as e:
                raise RubricError(f"Style rule {key} must be a number: {value!r}") from e
        return cls(
            property=data["property"],
            color=data.get("color"),
            pattern=pattern,
            min=bounds["min"],
            max=bounds["max"],
        )

    def to_dict(self) -> dict:
        data = {"property": self.property}
        for key in ("color", "pattern", "min", "max"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class StyleSpec:
    """Parameters for the CSS-Style template (selector, rules, partial tier)."""
    selector: Optional[str] = None
    rules: Tuple[StyleRule, ...] = ()
    require_text: bool = False
    partial: str = "almost"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["StyleSpec"]:
        if data is None:
            return None
        if not isinstance(data, dict):
            raise RubricError(f"Invalid style block: {data!r}")
        partial = data.get("partial", "almost")
        if partial not in ("better", "almost", "zero"):
            raise RubricError(f"Unknown partial tier: {partial}")
        return cls(
            selector=data.get("selector"),
            rules=tuple(StyleRule.from_dict(r) for r in data.get("rules", [])),
            require_text=bool(data.get("requireText", False)),
            partial=partial,
        )

    def to_dict(self) -> dict:
        data = {
            "rules": [r.to_dict() for r in self.rules],
            "requireText": self.require_text,
            "partial": self.partial,
        }
        if self.selector:
            data["selector"] = self.selector
        return data


@dataclass(frozen=True)
class Criterion:
    """One gradable rubric line."""
    original_text: str
    route: str
    test_type: str
    detail: str
    points: Points
    category: Optional[str] = None
    kind: Optional[str] = None
    section: Optional[str] = None
    subsection: Optional[str] = None
    style: Optional[StyleSpec] = None
    timeout_ms: Optional[int] = None
    use_backend: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Criterion":
        if not isinstance(data, dict):
            raise RubricError(f"Criterion must be an object, got {type(data).__name__}")
        text = data.get("originalText")
        if not text:
            raise RubricError(f"Criterion is missing originalText: {data!r}")
        timeout = data.get("timeoutMs")
        return cls(
            original_text=text,
            route=data.get("route") or "/",
            test_type=data.get("testType") or GENERIC,
            detail=data.get("detail") or "",
            points=Points.from_dict(data.get("points")),
            category=data.get("category"),
            kind=data.get("type"),
            section=data.get("section"),
            subsection=data.get("subsection"),
            style=StyleSpec.from_dict(data.get("style")),
            timeout_ms=int(timeout) if timeout is not None else None,
            use_backend=bool(data.get("useBackend", False)),
        )

    def to_dict(self) -> dict:
        data = {
            "originalText": self.original_text,
            "route": self.route,
            "testType": self.test_type,
            "detail": self.detail,
            "points": self.points.to_dict(),
        }
        optional = {
            "category": self.category,
            "type": self.kind,
            "section": self.section,
            "subsection": self.subsection,
            "timeoutMs": self.timeout_ms,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.style is not None:
            data["style"] = self.style.to_dict()
        if self.use_backend:
            data["useBackend"] = True
        return data


@dataclass(frozen=True)
class Rubric:
    assignment_number: int
    criteria: Tuple[Criterion, ...] = ()
    sections: Tuple[str, ...] = ()

    @property
    def total_points(self) -> float:
        return sum(c.points.best for c in self.criteria)

    @classmethod
    def from_dict(cls, data: dict) -> "Rubric":
        if not isinstance(data, dict):
            raise RubricError("Rubric JSON must be an object")
        criteria = data.get("criteria")
        if not isinstance(criteria, list):
            raise RubricError("Rubric JSON must contain a 'criteria' list")
        try:
            number = int(data.get("assignmentNumber", 1))
        except (TypeError, ValueError) as e:
            raise RubricError(f"Invalid assignmentNumber: {data.get('assignmentNumber')!r}") from e
        metadata = data.get("metadata") or {}
        return cls(
            assignment_number=number,
            criteria=tuple(Criterion.from_dict(c) for c in criteria),
            sections=tuple(metadata.get("sections", [])),
        )

    def to_dict(self) -> dict:
        return {
            "assignmentNumber": self.assignment_number,
            "metadata": {
                "totalPoints": self.total_points,
                "sections": list(self.sections),
            },
            "criteria": [c.to_dict() for c in self.criteria],
        }


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class CheckResult:
    criterion: str
    earned: float
    possible: float
    details: str

    @property
    def passed(self) -> bool:
        return self.earned == self.possible

    def to_dict(self) -> dict:
        return {
            "criterion": self.criterion,
            "points": {"earned": self.earned, "possible": self.possible},
            "passed": self.passed,
            "details": self.details,
        }


@dataclass(frozen=True)
class ScoreReport:
    total_earned: float = 0
    total_possible: float = 0
    percentage: float = 0.0
    passed_count: int = 0
    failed_count: int = 0

    @property
    def total(self) -> int:
        return self.passed_count + self.failed_count

    def to_dict(self) -> dict:
        return {
            "totalEarned": self.total_earned,
            "totalPossible": self.total_possible,
            "percentage": self.percentage,
            "passedCount": self.passed_count,
            "failedCount": self.failed_count,
        }


@dataclass
class RunOutcome:
    """What a grading run hands back to the CLI and the HTTP route."""
    results: List[CheckResult] = field(default_factory=list)
    summary: ScoreReport = field(default_factory=ScoreReport)
    shortfalls: List[CheckResult] = field(default_factory=list)
    strict: bool = False
    report_path: Optional[str] = None
    assignment_number: Optional[int] = None

    @property
    def success(self) -> bool:
        return not (self.strict and self.shortfalls)
