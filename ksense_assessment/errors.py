"""Exceptions raised while talking to the assessment API."""

from enum import Enum


class ErrorClass(Enum):
    RATE_LIMITED = "rate_limited"
    SERVICE_UNAVAILABLE = "service_unavailable"
    GENERIC_FAILURE = "generic_failure"


class AssessmentError(RuntimeError):
    """Base class for every failure this package raises."""


class UpstreamError(AssessmentError):
    """Any failure while fetching records."""


class TransientUpstreamError(UpstreamError):
    """429 or 503 from the record source; worth retrying."""

    def __init__(self, status, error_class):
        super().__init__(f"HTTP {status}: {error_class.value.replace('_', ' ')}")
        self.status = status
        self.error_class = error_class


class TransportError(UpstreamError):
    """No response at all (connection refused, timeout, ...)."""

    error_class = ErrorClass.GENERIC_FAILURE


class UpstreamStatusError(UpstreamError):
    def __init__(self, status, reason=""):
        super().__init__(f"HTTP {status}: {reason}" if reason else f"HTTP {status}")
        self.status = status
        self.reason = reason


class StructuralError(UpstreamError):
    pass


class InvalidResponseShape(StructuralError):
    pass


class FetchExhausted(UpstreamError):
    def __init__(self, label, attempts, last_error=None):
        detail = f": {last_error}" if last_error is not None else ""
        super().__init__(f"{label} failed after {attempts} attempts{detail}")
        self.label = label
        self.attempts = attempts
        self.last_error = last_error


class CollectionExhausted(AssessmentError):
    """Bulk collection finished without a single record."""


class SubmissionError(AssessmentError):
    """The grader rejected the submission or never answered (status is None then)."""

    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message
