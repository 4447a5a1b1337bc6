"""Client-side session storage.

Holds the bearer ``token`` and the session ``user`` projection, optionally
mirrored to a JSON file so a session survives process restarts.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class ClientStorage:
    """A small key/value store for the client session."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the storage.

        Args:
            path: Optional JSON file the items are loaded from and saved to.
        """
        self.path = Path(path) if path else None
        self._items: Dict[str, Any] = {}
        if self.path and self.path.exists():
            self._items = json.loads(self.path.read_text(encoding="utf-8"))

    def get(self, key: str, default: Any = None) -> Any:
        return self._items.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._save()

    def clear(self) -> None:
        self._items.clear()
        self._save()

    @property
    def token(self) -> Optional[str]:
        return self._items.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._items.get(USER_KEY)

    def save_session(self, token: Optional[str], user: Optional[Dict[str, Any]]) -> None:
        """Store the token and user returned by a login or registration."""
        if token:
            self._items[TOKEN_KEY] = token
        if user:
            self._items[USER_KEY] = user
        self._save()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items), encoding="utf-8")
        logger.debug("Saved client storage to %s", self.path)
