import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .risk import AlertKind, assess, fever_temperature, parse_age, parse_bp

logger = logging.getLogger(__name__)


@dataclass
class SubmissionPayload:
    high_risk: List[str] = field(default_factory=list)
    fever: List[str] = field(default_factory=list)
    data_quality: List[str] = field(default_factory=list)

    def to_json(self):
        return {
            "high_risk_patients": list(self.high_risk),
            "fever_patients": list(self.fever),
            "data_quality_issues": list(self.data_quality),
        }

    def counts(self):
        return {
            "high_risk": len(self.high_risk),
            "fever": len(self.fever),
            "data_quality": len(self.data_quality),
        }


@dataclass
class PageSummary:
    patients: int
    total: Optional[int]
    breakdown: Dict[str, int]
    # percentages of `patients`, one decimal place
    high_blood_pressure: float
    advanced_age: float
    fever: float


def aggregate(records) -> SubmissionPayload:
    """
    Sort patient ids into the three submission lists.

    Each record is judged on its own; one id may land in several lists.
    List order follows the order of `records`.
    """
    payload = SubmissionPayload()
    seen = 0
    for record in records:
        seen += 1
        result = assess(record)
        pid = record.patient_id

        if result.has_alert(AlertKind.HIGH_RISK):
            bp, temp, age = result.components
            logger.debug(
                "High risk %s: BP(%d) + Temp(%d) + Age(%d) = %d",
                pid, bp, temp, age, result.score,
            )
            payload.high_risk.append(pid)
        if result.has_alert(AlertKind.FEVER):
            payload.fever.append(pid)
        if result.has_alert(AlertKind.DATA_QUALITY):
            payload.data_quality.append(pid)

    logger.info("Assessed %d patients: %s", seen, payload.counts())
    return payload


def risk_rows(records):
    rows = []
    for record in records:
        result = assess(record)
        rows.append({
            "patient_id": record.patient_id,
            "name": record.name,
            "risk_score": result.score,
            "risk_level": result.level,
        })
    return rows


def alert_rows(records):
    rows = []
    for record in records:
        for alert in assess(record).alerts:
            rows.append({
                "patient_id": record.patient_id,
                "name": record.name,
                "alert_type": alert.kind.value,
                "alert_reason": alert.message,
            })
    return rows


def _percent(count, n):
    return round(count / n * 100, 1) if n else 0.0


def summarize(records, total=None) -> PageSummary:
    """Risk-level breakdown and common risk factors for a set of records (usually one page)."""
    records = list(records)
    breakdown = {"High": 0, "Moderate": 0, "Low": 0}
    high_bp = advanced_age = feverish = 0

    for record in records:
        breakdown[assess(record).level] += 1

        s, d = parse_bp(record.blood_pressure)
        if s is not None and d is not None and (s >= 140 or d >= 90):
            high_bp += 1
        age = parse_age(record.age)
        if age is not None and age >= 65:
            advanced_age += 1
        if fever_temperature(record.temperature) is not None:
            feverish += 1

    n = len(records)
    return PageSummary(
        patients=n,
        total=total,
        breakdown=breakdown,
        high_blood_pressure=_percent(high_bp, n),
        advanced_age=_percent(advanced_age, n),
        fever=_percent(feverish, n),
    )
