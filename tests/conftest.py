from unittest.mock import Mock

import pytest

from ksense_assessment.models import PatientRecord


def make_response(status_code=200, body=None, reason="OK"):
    """A stand-in for requests.Response carrying only what the client reads."""
    response = Mock(status_code=status_code, ok=200 <= status_code < 400, reason=reason)
    if isinstance(body, Exception):
        response.json = Mock(side_effect=body)
    else:
        response.json = Mock(return_value=body)
    return response


def page_body(patients, page=1, total=None, total_pages=1, has_next=False):
    return {
        "data": patients,
        "pagination": {
            "page": page,
            "limit": len(patients),
            "total": len(patients) if total is None else total,
            "totalPages": total_pages,
            "hasNext": has_next,
            "hasPrevious": page > 1,
        },
    }


def patient(pid, age=45, blood_pressure="120/80", temperature=98.6, name=None):
    return {
        "patient_id": pid,
        "name": name or f"Patient {pid}",
        "age": age,
        "gender": "F",
        "blood_pressure": blood_pressure,
        "temperature": temperature,
    }


@pytest.fixture
def record():
    """Factory for PatientRecord with sensible defaults."""

    def _make(pid="DEMO001", **fields):
        return PatientRecord.from_json(patient(pid, **fields))

    return _make


class SleepRecorder:
    """Stands in for time.sleep; remembers every requested wait."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return SleepRecorder()
