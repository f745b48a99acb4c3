"""
Session persistence for Polysweeper.

Sessions are stored as JSON. A missing or unreadable save never stops
the game: loading falls back to a fresh session and write failures are
logged.
"""
import json
import logging
from pathlib import Path
from typing import Union

from .session import Session

logger = logging.getLogger(__name__)

DEFAULT_SAVE_PATH = "save.json"


class SessionStore:
    """
    JSON file holding the current session.

    The bound save method fits GameEngine's on_change hook.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_SAVE_PATH) -> None:
        """
        Initialize the store.

        Args:
            path: Location of the save file.
        """
        self.path = Path(path)

    def load(self) -> Session:
        """
        Load the saved session.

        Returns:
            Saved session, or a default one if the file is missing or
            corrupt.
        """
        if not self.path.exists():
            logger.debug("No save file at %s, starting fresh", self.path)
            return Session()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Session.from_dict(data)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable save file %s: %s", self.path, exc)
            return Session()

    def save(self, session: Session) -> bool:
        """
        Write the session to disk.

        Returns:
            True if the session was written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(session.to_dict(), f, indent=2)
        except OSError as exc:
            logger.warning("Could not save session to %s: %s", self.path, exc)
            return False
        return True

    def clear(self) -> None:
        """Delete the save file if present."""
        self.path.unlink(missing_ok=True)
