"""
Prediction controller for Prediction Timeline.

Owns the session state and coordinates the database service:
- start a session and load existing predictions
- submit this session's single prediction
- lay predictions out on the timeline

Service failures never escape submit()/refresh(); they are logged and
reported through the return value.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional

from prediction_timeline.config import MAX_NAME_LENGTH
from prediction_timeline.model.timeline import Timeline, TimelineMarker
from prediction_timeline.state.cells import SessionState
from prediction_timeline.storage.db import (
    PredictionStore,
    Prediction,
    NewPrediction,
    StorageError,
    AlreadySubmittedError,
    TransientStorageError,
)


logger = logging.getLogger(__name__)


class SubmissionStatus(Enum):
    SUBMITTED = "submitted"
    ALREADY_SUBMITTED = "already_submitted"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a submit() call."""
    status: SubmissionStatus
    prediction: Optional[Prediction] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTED


def _sort_key(p: Prediction):
    return (p.prediction_date, p.id)


class PredictionController:
    """
    Top-level controller for one client session.

    Args:
        store: Database service client
        state: Session state to drive (a fresh one if omitted)
        timeline: Timeline used for markers (the configured default if omitted)
    """

    def __init__(
        self,
        store: PredictionStore,
        state: Optional[SessionState] = None,
        timeline: Optional[Timeline] = None,
    ):
        self.store = store
        self.state = state or SessionState()
        self.timeline = timeline or Timeline()

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def start(self, user_session: str) -> bool:
        """
        Start the session and load predictions.

        Returns:
            True if predictions were loaded
        """
        self.state.user_session.set(user_session)
        self.state.has_submitted.set(False)
        loaded = self.refresh()
        if loaded and self.own_prediction() is None:
            self._lookup_own(user_session)
        if self.own_prediction() is not None:
            self.state.has_submitted.set(True)
        return loaded

    def _lookup_own(self, user_session: str) -> None:
        """
        Ask the service for this session's row directly.

        The full listing may be capped by the service's row limit, so a
        missing row there does not mean the session never submitted.
        """
        try:
            own = self.store.find_by_session(user_session)
        except StorageError as e:
            logger.warning("Could not look up session %s: %s", user_session, e)
            return
        if own is not None:
            self.state.predictions.update(
                lambda current: sorted([*current, own], key=_sort_key)
            )

    def refresh(self) -> bool:
        """
        Re-fetch predictions into state.

        On failure the previous list is kept.

        Returns:
            True on success
        """
        try:
            predictions = self.store.fetch_predictions()
        except StorageError as e:
            logger.error("Could not load predictions: %s", e)
            return False

        self.state.predictions.set(sorted(predictions, key=_sort_key))
        return True

    def own_prediction(self) -> Optional[Prediction]:
        """This session's prediction, if it is among the fetched rows."""
        session_id = self.state.user_session.get()
        if session_id is None:
            return None
        for p in self.state.predictions.get():
            if p.user_session == session_id:
                return p
        return None

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _validate(self, name: str, prediction_date: Optional[date]) -> Optional[str]:
        if self.state.user_session.get() is None:
            return "Session has not been started"
        if not name or not name.strip():
            return "Name is required"
        if len(name.strip()) > MAX_NAME_LENGTH:
            return f"Name must be at most {MAX_NAME_LENGTH} characters"
        if prediction_date is None:
            return "Prediction date is required"
        return None

    def submit(self, name: str, prediction_date: date) -> SubmissionResult:
        """
        Submit this session's prediction.

        Args:
            name: Display name
            prediction_date: Predicted date

        Returns:
            SubmissionResult
        """
        if self.state.has_submitted.get():
            return SubmissionResult(
                SubmissionStatus.ALREADY_SUBMITTED,
                self.own_prediction(),
                "You have already submitted a prediction",
            )

        problem = self._validate(name, prediction_date)
        if problem:
            return SubmissionResult(SubmissionStatus.INVALID, message=problem)

        new = NewPrediction(
            name=name.strip(),
            prediction_date=prediction_date,
            user_session=self.state.user_session.get(),
        )

        try:
            stored = self.store.insert_prediction(new)
        except AlreadySubmittedError as e:
            logger.info("Duplicate submission for session %s", new.user_session)
            self.state.has_submitted.set(True)
            return SubmissionResult(SubmissionStatus.ALREADY_SUBMITTED, message=str(e))
        except TransientStorageError as e:
            logger.warning("Submission failed, try again: %s", e)
            return SubmissionResult(SubmissionStatus.FAILED, message=str(e))
        except StorageError as e:
            logger.error("Submission rejected: %s", e)
            return SubmissionResult(SubmissionStatus.FAILED, message=str(e))

        self.state.predictions.update(
            lambda current: sorted([*current, stored], key=_sort_key)
        )
        self.state.has_submitted.set(True)
        return SubmissionResult(SubmissionStatus.SUBMITTED, stored, "Prediction saved")

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------

    def markers(self) -> List[TimelineMarker]:
        """Current predictions placed on the timeline."""
        return self.timeline.layout(self.state.predictions.get())
