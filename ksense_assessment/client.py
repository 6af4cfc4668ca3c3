import logging
import time

import requests

from . import config
from .backoff import retry_with_backoff
from .errors import (
    ErrorClass,
    InvalidResponseShape,
    SubmissionError,
    TransientUpstreamError,
    TransportError,
    UpstreamStatusError,
)
from .models import Page, PatientRecord, SubmissionResult

logger = logging.getLogger(__name__)

TRANSIENT_STATUSES = {
    429: ErrorClass.RATE_LIMITED,
    503: ErrorClass.SERVICE_UNAVAILABLE,
}


def get_json(path, params=None):
    """One GET against the API, with the status mapped onto our error types. No retries here."""
    url = f"{config.BASE_URL}{path}"
    try:
        r = requests.get(url, headers=config.headers(), params=params, timeout=config.TIMEOUT)
    except requests.RequestException as e:
        raise TransportError(f"GET {path}: {e}") from e

    if r.status_code in TRANSIENT_STATUSES:
        raise TransientUpstreamError(r.status_code, TRANSIENT_STATUSES[r.status_code])
    if not r.ok:
        raise UpstreamStatusError(r.status_code, r.reason)

    try:
        return r.json()
    except ValueError as e:
        raise InvalidResponseShape(f"GET {path}: response is not JSON") from e


def parse_page(body, requested_page):
    if not isinstance(body, dict) or body.get("data") is None:
        raise InvalidResponseShape("response has no 'data' field")
    if not isinstance(body["data"], list) or not all(isinstance(p, dict) for p in body["data"]):
        raise InvalidResponseShape("'data' is not a list of patient objects")

    pagination = body.get("pagination") or {}
    has_next = bool(pagination.get("hasNext", False)) if pagination else None
    return Page(
        records=tuple(PatientRecord.from_json(p) for p in body["data"]),
        page=pagination.get("page") or requested_page,
        total=pagination.get("total") or 0,
        total_pages=pagination.get("totalPages") or 1,
        has_next=has_next,
        has_previous=bool(pagination.get("hasPrevious", False)),
    )


def fetch_page(page=1, limit=config.PAGE_SIZE, max_retries=config.PAGE_RETRIES, *, sleep=time.sleep, jitter=True):
    """
    Fetch one page of patients.

    429/503 responses and network failures are retried with backoff up to
    `max_retries` attempts in total; FetchExhausted is raised once they
    run out. Other error statuses and malformed bodies raise at once.
    """
    logger.info("Fetching page %d (limit %d)", page, limit)

    def attempt():
        return parse_page(get_json("/patients", params={"page": page, "limit": limit}), page)

    return retry_with_backoff(
        attempt,
        max_retries,
        label=f"page {page}",
        sleep=sleep,
        jitter=jitter,
    )


def submit_assessment(payload):
    """POST the three patient lists to the grader. Sent once; errors are not retried."""
    body = payload.to_json()
    logger.info(
        "Submitting %d high-risk, %d fever, %d data-quality ids",
        len(body["high_risk_patients"]),
        len(body["fever_patients"]),
        len(body["data_quality_issues"]),
    )
    url = f"{config.BASE_URL}/submit-assessment"
    try:
        r = requests.post(url, headers=config.headers(), json=body, timeout=config.TIMEOUT)
    except requests.RequestException as e:
        raise SubmissionError(None, f"POST /submit-assessment: no response ({e})") from e

    if not r.ok:
        raise SubmissionError(r.status_code, _error_message(r))

    try:
        data = r.json()
    except ValueError as e:
        raise SubmissionError(r.status_code, "grader returned a non-JSON body") from e
    if not isinstance(data, dict):
        raise SubmissionError(r.status_code, "grader returned an unexpected body")
    return SubmissionResult.from_json(data)


def _error_message(r):
    try:
        data = r.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return data["message"]
    return f"HTTP {r.status_code}: {r.reason}"
