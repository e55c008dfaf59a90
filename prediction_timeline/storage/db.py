"""
Hosted database client for Prediction Timeline.

Predictions live in a single table on a hosted Postgres service, exposed
over HTTPS through its REST (PostgREST) interface:

    predictions(id, name, prediction_date, created_at, user_session UNIQUE)

Access policy on the service allows anonymous select and insert, so the
anon key is enough. Uniqueness of user_session is enforced by the service;
a duplicate insert comes back as HTTP 409 (Postgres error 23505).

Failures are raised as:
- AlreadySubmittedError: this session already has a row
- TransientStorageError: network error, timeout, 429 or 5xx
- StorageError: anything else (bad key, malformed response, ...)

No retries are performed here.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Optional, List, Dict, Any

import requests

from prediction_timeline.config import ServiceConfig
from prediction_timeline.utils.dates import parse_date, parse_timestamp


logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


# ============================================================================
# ERRORS
# ============================================================================

class StorageError(Exception):
    """Base class for database service failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AlreadySubmittedError(StorageError):
    """The session already has a stored prediction."""


class TransientStorageError(StorageError):
    """The request failed for a reason that may not recur."""


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True)
class Prediction:
    """A stored prediction row."""
    id: int
    name: str
    prediction_date: date
    created_at: Optional[datetime]
    user_session: Optional[str]

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Prediction":
        """
        Build a Prediction from a JSON row.

        Raises:
            StorageError: If required fields are missing or malformed
        """
        try:
            created_at = row.get("created_at")
            return cls(
                id=int(row["id"]),
                name=str(row["name"]),
                prediction_date=parse_date(str(row["prediction_date"])),
                created_at=parse_timestamp(created_at) if created_at else None,
                user_session=row.get("user_session"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Malformed prediction row {row!r}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["prediction_date"] = self.prediction_date.isoformat()
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data


@dataclass(frozen=True)
class NewPrediction:
    """Insert payload for a prediction."""
    name: str
    prediction_date: date
    user_session: str

    def to_row(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "prediction_date": self.prediction_date.isoformat(),
            "user_session": self.user_session,
        }


# ============================================================================
# CLIENT
# ============================================================================

class PredictionStore:
    """
    Client for the hosted predictions table.

    Args:
        config: Service endpoint and key
        session: requests.Session to use (one is created if omitted)
    """

    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": config.key,
            "Authorization": f"Bearer {config.key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def _request(self, method: str, **kwargs) -> Any:
        """Send a request to the table endpoint and return the decoded JSON body."""
        url = self.config.table_url
        try:
            response = self.session.request(
                method, url, timeout=self.config.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransientStorageError(f"Request to database service failed: {e}") from e

        if not response.ok:
            raise self._error_for(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StorageError(
                "Database service returned invalid JSON", response.status_code
            ) from e

    @staticmethod
    def _error_for(response: requests.Response) -> StorageError:
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or response.text or response.reason or ""
        code = body.get("code")

        if status == 409 or code == UNIQUE_VIOLATION:
            return AlreadySubmittedError(
                f"A prediction already exists for this session: {message}", status
            )
        if status == 429 or status >= 500:
            return TransientStorageError(
                f"Database service unavailable ({status}): {message}", status
            )
        return StorageError(f"Database service rejected request ({status}): {message}", status)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def fetch_predictions(self) -> List[Prediction]:
        """
        Fetch all predictions, earliest prediction_date first.

        Returns:
            List of Prediction objects
        """
        rows = self._request(
            "GET",
            params={"select": "*", "order": "prediction_date.asc,created_at.asc"},
        )
        predictions = [Prediction.from_row(row) for row in rows or []]
        logger.info("Fetched %d predictions", len(predictions))
        return predictions

    def find_by_session(self, user_session: str) -> Optional[Prediction]:
        """Get the prediction stored for a session, or None."""
        rows = self._request(
            "GET",
            params={"select": "*", "user_session": f"eq.{user_session}", "limit": "1"},
        )
        if not rows:
            return None
        return Prediction.from_row(rows[0])

    def insert_prediction(self, new: NewPrediction) -> Prediction:
        """
        Insert a prediction and return the stored row.

        Raises:
            AlreadySubmittedError: If the session already has a row
            TransientStorageError: On network/service failure
            StorageError: On any other rejection
        """
        rows = self._request(
            "POST",
            json=new.to_row(),
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise StorageError("Insert returned no row")

        row = rows[0] if isinstance(rows, list) else rows
        prediction = Prediction.from_row(row)
        logger.info(
            "Stored prediction %s for %s on %s",
            prediction.id, prediction.name, prediction.prediction_date,
        )
        return prediction
