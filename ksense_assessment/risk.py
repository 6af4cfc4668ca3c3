"""
Rule-based risk scoring for one patient.

Composite score = blood pressure (0-4) + temperature (0-2) + age (0-2).
A value that is missing or cannot be read scores 0 and is reported as a
data-quality alert instead of raising. Every function here is pure: the
same raw values always give the same scores and alerts.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .models import PatientRecord

HIGH_RISK_THRESHOLD = 4
FEVER_THRESHOLD = 99.6

BP_SENTINELS = {"INVALID", "N/A"}
TEMP_SENTINELS = {"TEMP_ERROR", "invalid"}
AGE_SENTINELS = ("fifty", "unknown")

# leading number only; trailing text such as ".5" or "F" is ignored
LEADING_INT = re.compile(r"[+-]?[0-9]+")
LEADING_FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class AlertKind(Enum):
    HIGH_RISK = "high_risk"
    FEVER = "fever"
    DATA_QUALITY = "data_quality"


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    message: str
    patient_id: Optional[str]


@dataclass(frozen=True)
class RiskAssessment:
    patient_id: Optional[str]
    score: int
    components: Tuple[int, int, int]  # blood pressure, temperature, age
    alerts: Tuple[Alert, ...]

    def has_alert(self, kind: AlertKind) -> bool:
        return any(a.kind is kind for a in self.alerts)

    @property
    def level(self) -> str:
        return risk_level(self.score)


def _is_missing(value):
    return value is None or value == ""


def _to_int(text):
    m = LEADING_INT.match(text.strip())
    return int(m.group()) if m else None


def _to_float(value):
    if isinstance(value, str):
        m = LEADING_FLOAT.match(value.strip())
        number = float(m.group()) if m else None
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    else:
        return None
    if number is None or not math.isfinite(number):
        return None
    return number


def parse_bp(bp):
    """Return (systolic, diastolic) as ints, with None for any part that is not a number."""
    if not isinstance(bp, str) or "/" not in bp:
        return None, None
    systolic, diastolic = (part.strip() for part in bp.split("/")[:2])
    if systolic in BP_SENTINELS or diastolic in BP_SENTINELS:
        return None, None
    return _to_int(systolic), _to_int(diastolic)


def parse_temperature(temp):
    if _is_missing(temp):
        return None
    if isinstance(temp, str) and temp.strip() in TEMP_SENTINELS:
        return None
    return _to_float(temp)


def parse_age(age):
    if _is_missing(age) or isinstance(age, bool):
        return None
    if isinstance(age, str):
        lowered = age.lower()
        if any(word in lowered for word in AGE_SENTINELS):
            return None
        return _to_int(age)
    if isinstance(age, (int, float)) and math.isfinite(age):
        return int(age)
    return None


def score_blood_pressure(bp):
    s, d = parse_bp(bp)
    if s is None or d is None:
        return 0
    # checked from the most severe band down
    if s >= 140 or d >= 90:
        return 4  # Stage 2
    if (130 <= s <= 139) or (80 <= d <= 89):
        return 3  # Stage 1
    if (120 <= s <= 129) and d < 80:
        return 2  # Elevated
    if s < 120 and d < 80:
        return 1  # Normal
    return 1


def score_temperature(temp):
    t = parse_temperature(temp)
    if t is None:
        return 0
    if t >= 101.0:
        return 2  # High fever
    if 99.6 <= t <= 100.9:
        return 1  # Low fever
    return 0


def score_age(age):
    a = parse_age(age)
    if a is None:
        return 0
    if a > 65:
        return 2
    if 40 <= a <= 65:
        return 1
    return 0


def risk_score(record: PatientRecord) -> int:
    return (
        score_blood_pressure(record.blood_pressure)
        + score_temperature(record.temperature)
        + score_age(record.age)
    )


def risk_level(score: int) -> str:
    if score >= HIGH_RISK_THRESHOLD:
        return "High"
    if score >= 2:
        return "Moderate"
    return "Low"


def fever_temperature(temp):
    """
    The temperature to report a fever for, or None.

    Looser than score_temperature: any value with a leading number that
    reaches the threshold counts, and the sentinel strings are not consulted.
    """
    t = _to_float(temp)
    if t is not None and t >= FEVER_THRESHOLD:
        return t
    return None


def data_quality_issues(record: PatientRecord) -> List[str]:
    issues = []

    bp = record.blood_pressure
    if _is_missing(bp):
        issues.append("missing blood pressure")
    elif isinstance(bp, str) and "/" in bp:
        s, d = parse_bp(bp)
        if s is None or d is None:
            issues.append("invalid blood pressure")
    else:
        issues.append("malformed blood pressure")

    if _is_missing(record.age):
        issues.append("missing age")
    elif parse_age(record.age) is None:
        issues.append("invalid age")

    if _is_missing(record.temperature):
        issues.append("missing temperature")
    elif parse_temperature(record.temperature) is None:
        issues.append("invalid temperature")

    return issues


def assess(record: PatientRecord) -> RiskAssessment:
    """Score one record and work out its alerts. Nothing is cached; call it as often as needed."""
    pid = record.patient_id
    components = (
        score_blood_pressure(record.blood_pressure),
        score_temperature(record.temperature),
        score_age(record.age),
    )
    score = sum(components)

    alerts = []
    if score >= HIGH_RISK_THRESHOLD:
        alerts.append(Alert(AlertKind.HIGH_RISK, f"High risk patient (score: {score})", pid))

    fever = fever_temperature(record.temperature)
    if fever is not None:
        alerts.append(Alert(AlertKind.FEVER, f"Fever detected ({fever:g}°F)", pid))

    issues = data_quality_issues(record)
    if issues:
        alerts.append(Alert(AlertKind.DATA_QUALITY, f"Data quality issues: {', '.join(issues)}", pid))

    return RiskAssessment(patient_id=pid, score=score, components=components, alerts=tuple(alerts))


def check_alerts(record: PatientRecord) -> List[Alert]:
    return list(assess(record).alerts)
