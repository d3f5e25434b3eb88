import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyStore(Protocol):
    """Read/write access to the single persisted API key."""

    def load(self) -> str:
        ...

    def save(self, key: str) -> None:
        ...


class MemoryKeyStore:
    def __init__(self, key: str = ""):
        self._key = key

    def load(self) -> str:
        return self._key

    def save(self, key: str) -> None:
        self._key = key


class FileKeyStore:
    """Keeps the key as plain text in a file. No encryption, no expiry."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> str:
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8").strip()

    def save(self, key: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(key, encoding="utf-8")
        logger.info(f"API key saved to {self.path}")
