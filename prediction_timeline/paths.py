"""
Persistent Path Management for Prediction Timeline.

Provides stable, user-accessible paths for the files the client keeps
between runs.

Path Layout:
  Windows:  %APPDATA%\\Prediction_Timeline\\
  macOS:    ~/Library/Application Support/Prediction_Timeline/
  Linux:    ~/.local/share/Prediction_Timeline/

Subdirectories:
  - session/  -> session.json (this client's session id)
  - logs/     -> run.log

PREDICTION_TIMELINE_HOME overrides the data root.
"""

import os
import sys
import logging
from pathlib import Path
from datetime import datetime


APP_DIR_NAME = 'Prediction_Timeline'


# ==============================================================================
# PERSISTENT DATA ROOT
# ==============================================================================

def get_data_root() -> Path:
    """
    Get the persistent data root directory for the application.

    Returns:
        Path to the app data directory
    """
    override = os.getenv('PREDICTION_TIMELINE_HOME')
    if override:
        return Path(override)

    if os.name == 'nt':  # Windows
        appdata = os.getenv('APPDATA')
        if appdata:
            data_root = Path(appdata) / APP_DIR_NAME
        else:
            data_root = Path.home() / 'Documents' / APP_DIR_NAME
    elif sys.platform == 'darwin':  # macOS
        data_root = Path.home() / 'Library' / 'Application Support' / APP_DIR_NAME
    else:  # Linux and others
        # Follow XDG Base Directory Specification
        xdg_data = os.getenv('XDG_DATA_HOME')
        if xdg_data:
            data_root = Path(xdg_data) / APP_DIR_NAME
        else:
            data_root = Path.home() / '.local' / 'share' / APP_DIR_NAME

    return data_root


# ==============================================================================
# DIRECTORY PATHS
# ==============================================================================

DATA_ROOT = get_data_root()

SESSION_DIR = DATA_ROOT / 'session'
LOG_DIR = DATA_ROOT / 'logs'

SESSION_FILE_PATH = SESSION_DIR / 'session.json'
RUN_LOG_PATH = LOG_DIR / 'run.log'


def ensure_directories() -> None:
    """Create the data directories if they don't exist."""
    for _dir in [DATA_ROOT, SESSION_DIR, LOG_DIR]:
        _dir.mkdir(parents=True, exist_ok=True)


# ==============================================================================
# LOGGING SETUP
# ==============================================================================

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_file_logging(log_path: Path = None, level: int = logging.INFO) -> logging.Handler:
    """
    Configure logging to write to the persistent log file.

    Args:
        log_path: Log file (defaults to RUN_LOG_PATH)
        level: Handler level

    Returns:
        The handler added to the root logger
    """
    if log_path is None:
        ensure_directories()
        log_path = RUN_LOG_PATH

    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))

    root_logger = logging.getLogger()
    if root_logger.level > level or root_logger.level == logging.NOTSET:
        root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    return file_handler


def log_startup_diagnostics() -> str:
    """
    Log diagnostic information about paths and environment.

    Returns:
        The diagnostic text
    """
    lines = [
        "=" * 60,
        f"Prediction Timeline Startup - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "=" * 60,
        f"Python executable: {sys.executable}",
        f"Current working dir: {os.getcwd()}",
        "Persistent Paths:",
        f"  Data root:     {DATA_ROOT}",
        f"  Session file:  {SESSION_FILE_PATH}",
        f"  Run log:       {RUN_LOG_PATH}",
        f"Session file exists: {SESSION_FILE_PATH.exists()}",
    ]

    log_text = "\n".join(lines)
    logging.getLogger(__name__).info(log_text)
    return log_text


__all__ = [
    'APP_DIR_NAME',
    'DATA_ROOT',
    'SESSION_DIR',
    'LOG_DIR',
    'SESSION_FILE_PATH',
    'RUN_LOG_PATH',
    'get_data_root',
    'ensure_directories',
    'setup_file_logging',
    'log_startup_diagnostics',
]
