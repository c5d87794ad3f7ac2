"""On-disk session storage for the terminal client."""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SESSION_FILE = Path.home() / ".okobo" / "session.json"


class SessionStore:
    """Keeps ``{"token": ..., "user": {...}}`` in a file readable only by its owner."""

    def __init__(self, path: Path | str = DEFAULT_SESSION_FILE):
        self.path = Path(path)

    def load(self) -> dict | None:
        """Return the stored session, or None if there is none or it is unreadable."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file", extra={"path": str(self.path), "error": str(e)})
            return None

        if not isinstance(data, dict) or not isinstance(data.get("token"), str):
            logger.warning("Ignoring malformed session file", extra={"path": str(self.path)})
            return None
        if not isinstance(data.get("user"), dict):
            data["user"] = None
        return data

    def save(self, token: str, user: dict | None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump({"token": token, "user": user}, f)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
