"""
Session persistence for Prediction Timeline.

Keeps this client's session id in a small JSON file so the same visitor is
recognised across runs:

    {"user_session": "...", "created_at": "2025-07-02T12:00:00+00:00"}
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from prediction_timeline.paths import SESSION_FILE_PATH
from prediction_timeline.utils.dates import utc_now
from prediction_timeline.utils.session import new_session_id


logger = logging.getLogger(__name__)


def load_session(path: Path = SESSION_FILE_PATH) -> Optional[str]:
    """
    Load the stored session id.

    Returns:
        The session id, or None if there is no usable session file
    """
    if not path.exists():
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable session file %s: %s", path, e)
        return None

    session_id = data.get("user_session") if isinstance(data, dict) else None
    if not isinstance(session_id, str) or not session_id:
        logger.warning("Ignoring session file without a session id: %s", path)
        return None
    return session_id


def save_session(session_id: str, path: Path = SESSION_FILE_PATH) -> None:
    """
    Write the session id to the session file.

    The file is written to a temporary sibling and moved into place, so an
    interrupted write leaves the previous session intact.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "user_session": session_id,
        "created_at": utc_now().isoformat(),
    }
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".session-", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def load_or_create_session(path: Path = SESSION_FILE_PATH, scheme: str = None) -> str:
    """
    Get the stored session id, creating and saving a new one if needed.

    Args:
        path: Session file
        scheme: Session id scheme for new ids (see utils.session)
    """
    session_id = load_session(path)
    if session_id:
        return session_id

    session_id = new_session_id(scheme)
    save_session(session_id, path)
    logger.info("Started new session %s", session_id)
    return session_id


def clear_session(path: Path = SESSION_FILE_PATH) -> bool:
    """
    Remove the session file.

    Returns:
        True if a file was removed
    """
    if not path.exists():
        return False
    path.unlink()
    logger.info("Cleared session file %s", path)
    return True
