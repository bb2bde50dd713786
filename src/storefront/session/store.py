"""Durable slot for the demo identity.

Demo sign-ins never reach the auth service, so the identity they produce is
kept here instead, under a single ``demoUser`` key, until sign-out.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from storefront.session.identity import Identity

logger = structlog.get_logger(__name__)

DEMO_USER_KEY = "demoUser"


def default_session_file() -> Path:
    return Path(os.getenv("STOREFRONT_SESSION_FILE", Path.home() / ".storefront" / "session.json"))


class IdentityStore(ABC):
    @abstractmethod
    def load(self) -> Identity | None: ...

    @abstractmethod
    def save(self, identity: Identity) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class MemoryIdentityStore(IdentityStore):
    def __init__(self) -> None:
        self._data: dict[str, dict] = {}

    def load(self) -> Identity | None:
        data = self._data.get(DEMO_USER_KEY)
        return Identity.from_dict(data) if data else None

    def save(self, identity: Identity) -> None:
        self._data[DEMO_USER_KEY] = identity.to_dict()

    def clear(self) -> None:
        self._data.pop(DEMO_USER_KEY, None)


class FileIdentityStore(IdentityStore):
    """JSON file holding ``{"demoUser": {...}}``; survives restarts."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else default_session_file()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file", path=str(self.path), error=str(exc))
            return {}

    def load(self) -> Identity | None:
        data = self._read().get(DEMO_USER_KEY)
        return Identity.from_dict(data) if data else None

    def save(self, identity: Identity) -> None:
        contents = self._read()
        contents[DEMO_USER_KEY] = identity.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(contents, indent=2), encoding="utf-8")

    def clear(self) -> None:
        contents = self._read()
        if contents.pop(DEMO_USER_KEY, None) is None:
            return
        self.path.write_text(json.dumps(contents, indent=2), encoding="utf-8")
