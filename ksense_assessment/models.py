# models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PatientRecord:
    """
    One patient as returned by the record source.

    age, blood_pressure and temperature are kept exactly as received:
    they may be numbers, numeric strings, junk strings or None. Nothing
    downstream rewrites them; scores are always derived from these raw
    values.
    """
    patient_id: Optional[str]
    name: Optional[str] = None
    age: Any = None
    gender: Optional[str] = None
    blood_pressure: Any = None
    temperature: Any = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PatientRecord":
        return cls(
            patient_id=data.get("patient_id"),
            name=data.get("name"),
            age=data.get("age"),
            gender=data.get("gender"),
            blood_pressure=data.get("blood_pressure"),
            temperature=data.get("temperature"),
        )


@dataclass(frozen=True)
class Page:
    """has_next is None when the response carried no pagination block."""
    records: Tuple[PatientRecord, ...]
    page: int
    total: int
    total_pages: int
    has_next: Optional[bool]
    has_previous: bool


@dataclass
class CategoryBreakdown:
    matches: int = 0
    correct: int = 0
    submitted: int = 0


@dataclass
class SubmissionResult:
    """
    Grading response for one submission.

    status:
        "PASS" or "FAIL" as reported by the grader.

    breakdown:
        Keyed by "high_risk", "fever" and "data_quality".

    raw:
        The full response body, for anything not modelled here.
    """
    status: Optional[str]
    percentage: Optional[float]
    score: Optional[float]
    breakdown: Dict[str, CategoryBreakdown] = field(default_factory=dict)
    strengths: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    attempt_number: Optional[int] = None
    remaining_attempts: Optional[int] = None
    can_resubmit: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status == "PASS"

    @classmethod
    def from_json(cls, body: Dict[str, Any]) -> "SubmissionResult":
        results = body.get("results") or {}
        feedback = results.get("feedback") or {}
        breakdown = {
            category: CategoryBreakdown(
                matches=counts.get("matches", 0),
                correct=counts.get("correct", 0),
                submitted=counts.get("submitted", 0),
            )
            for category, counts in (results.get("breakdown") or {}).items()
            if isinstance(counts, dict)
        }
        return cls(
            status=results.get("status"),
            percentage=results.get("percentage"),
            score=results.get("score"),
            breakdown=breakdown,
            strengths=list(feedback.get("strengths") or []),
            issues=list(feedback.get("issues") or []),
            attempt_number=results.get("attempt_number"),
            remaining_attempts=results.get("remaining_attempts"),
            can_resubmit=bool(results.get("can_resubmit", False)),
            raw=body,
        )
