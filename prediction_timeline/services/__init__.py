"""Services module for the prediction controller and session persistence."""

from .controller import (
    PredictionController,
    SubmissionResult,
    SubmissionStatus,
)
from .session_store import (
    load_session,
    save_session,
    load_or_create_session,
    clear_session,
)

__all__ = [
    'PredictionController',
    'SubmissionResult',
    'SubmissionStatus',
    'load_session',
    'save_session',
    'load_or_create_session',
    'clear_session',
]
