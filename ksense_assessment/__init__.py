"""Fetch patient records from the KSense assessment API, score them, and submit the results."""

from .aggregate import SubmissionPayload, aggregate, summarize
from .collector import CollectionResult, collect
from .client import fetch_page, submit_assessment
from .errors import AssessmentError, CollectionExhausted, FetchExhausted, SubmissionError
from .models import Page, PatientRecord, SubmissionResult
from .risk import Alert, AlertKind, RiskAssessment, assess, check_alerts, risk_score

__version__ = "0.2.0"
