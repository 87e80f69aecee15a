"""
storage.py - Saving and resuming game sessions

Sessions are stored as JSON. Writes go to a temporary file that is moved into
place, and both reads and writes hold a lock file so that two processes
sharing a state file never see a half-written session.
"""

import os
import json
import shutil
from typing import Any, Optional

import filelock

from connectfour.debug import debug
from connectfour.game.session import GameSession

# Define paths to data files
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
DATA_DIR = os.path.join(BASE_DIR, 'data')
DEFAULT_STATE_FILE = os.path.join(DATA_DIR, 'session.json')

STATE_ENV_VAR = "CONNECTFOUR_STATE"


def state_file_path(path: Optional[str] = None) -> str:
    """
    Resolve which state file to use.

    An explicit path wins, then the CONNECTFOUR_STATE environment variable,
    then the default under the project's data directory.
    """
    return path or os.environ.get(STATE_ENV_VAR) or DEFAULT_STATE_FILE


def safe_read_json(file_path: str) -> Optional[Any]:
    """
    Safely read a JSON file with file locking.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON data, or None if the file is missing or unreadable
    """
    if not os.path.exists(file_path):
        return None

    lock_path = f"{file_path}.lock"
    with filelock.FileLock(lock_path):
        try:
            with open(file_path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError:
            debug.error(f"Error decoding JSON from {file_path}", "storage")
            return None
        except OSError as e:
            debug.error(f"Error reading {file_path}: {e}", "storage")
            return None


def safe_write_json(file_path: str, data: Any) -> bool:
    """
    Safely write data to a JSON file with atomic updates.

    Args:
        file_path: Path to JSON file
        data: Data to write

    Returns:
        True if successful, False otherwise
    """
    directory = os.path.dirname(os.path.abspath(file_path))
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        debug.error(f"Cannot create directory {directory}: {e}", "storage")
        return False

    lock_path = f"{file_path}.lock"
    with filelock.FileLock(lock_path):
        try:
            # Write to a temporary file first
            temp_file = f"{file_path}.tmp"
            with open(temp_file, 'w') as f:
                json.dump(data, f, indent=2)

            # Replace the original file (atomic operation)
            shutil.move(temp_file, file_path)
            return True
        except (OSError, TypeError) as e:
            debug.error(f"Error writing to {file_path}: {e}", "storage")
            return False


def save_session(session: GameSession, path: Optional[str] = None) -> bool:
    """
    Save a session so it can be resumed later.

    Returns:
        True if the session was written
    """
    file_path = state_file_path(path)
    if safe_write_json(file_path, session.to_dict()):
        debug.debug(f"Saved session to {file_path}", "storage")
        return True
    return False


def load_session(path: Optional[str] = None) -> GameSession:
    """
    Load a saved session.

    A missing or damaged state file is not an error: a fresh session is
    returned instead.
    """
    file_path = state_file_path(path)
    data = safe_read_json(file_path)
    if data is None:
        debug.debug(f"No saved session at {file_path}, starting fresh", "storage")
        return GameSession()

    try:
        session = GameSession.from_dict(data)
    except ValueError as e:
        debug.warning(f"Ignoring saved session in {file_path}: {e}", "storage")
        return GameSession()

    debug.debug(f"Loaded session from {file_path}", "storage")
    return session


def clear_session(path: Optional[str] = None) -> bool:
    """
    Delete a saved session.

    Returns:
        True if a state file was removed
    """
    file_path = state_file_path(path)
    if not os.path.exists(file_path):
        return False

    lock_path = f"{file_path}.lock"
    with filelock.FileLock(lock_path):
        try:
            os.remove(file_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            debug.error(f"Error removing {file_path}: {e}", "storage")
            return False
    debug.info(f"Removed saved session {file_path}", "storage")
    return True
