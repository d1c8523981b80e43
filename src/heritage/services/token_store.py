"""Bearer token storage for the cookie-less fallback.

The backend authenticates with an HTTP-only session cookie. Some
deployments also hand back a bearer token on login; it is kept here and
attached to requests that carry no Authorization header of their own.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class TokenStore(ABC):
    """Persistent storage for the fallback bearer token."""

    @abstractmethod
    def get_token(self) -> str | None:
        """Return the stored token, if any."""

    @abstractmethod
    def set_token(self, token: str) -> None:
        """Store a token, replacing any previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored token."""


class InMemoryTokenStore(TokenStore):
    """Token store that lives as long as the process."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Token store persisted as a small JSON file.

    Usage:
        store = FileTokenStore(Path.home() / ".heritage" / "session.json")
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def get_token(self) -> str | None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self._path, e)
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
