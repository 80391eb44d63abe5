"""Interfaces for keeping token cache data in external storage.

The data moved through these interfaces represents the entire cache and is
opaque to implementers: no guarantees are made about its format.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "ExportHints",
    "ReplaceHints",
    "Marshaler",
    "Unmarshaler",
    "Serializer",
    "ExportReplace",
    "FileCacheAccessor",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportHints:
    """Suggestions for storing cache data."""

    partition_key: str = ""


@dataclass(frozen=True)
class ReplaceHints:
    """Suggestions for loading cache data."""

    partition_key: str = ""


class Marshaler(ABC):
    """Turns an in-memory cache into bytes that can be stored."""

    @abstractmethod
    def marshal(self) -> bytes:
        """Return the serialized cache."""


class Unmarshaler(ABC):
    """Loads bytes from storage into an in-memory cache, overwriting it."""

    @abstractmethod
    def unmarshal(self, data: bytes) -> None:
        """Replace the cache contents with ``data``."""


class Serializer(Marshaler, Unmarshaler):
    """A cache that can be written to and read from bytes."""


class ExportReplace(ABC):
    """Exports and replaces in-memory cache data.

    Implementations are responsible for their own timeouts and retries.
    """

    @abstractmethod
    def replace(self, cache: Unmarshaler, hints: ReplaceHints) -> None:
        """Replace ``cache`` with what is in external storage."""

    @abstractmethod
    def export(self, cache: Marshaler, hints: ExportHints) -> None:
        """Write the serialized form of ``cache`` to external storage."""


class FileCacheAccessor(ExportReplace):
    """Keeps the serialized cache in a single file readable only by its owner."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def replace(self, cache: Unmarshaler, hints: ReplaceHints | None = None) -> None:
        """Load the file into ``cache``; a missing or unreadable file loads empty data."""
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            _log.warning("could not read cache file %s: %s", self.path, exc)
            data = b""
        cache.unmarshal(data)

    def export(self, cache: Marshaler, hints: ExportHints | None = None) -> None:
        """Write the serialized cache to the file, created with mode 0600."""
        data = cache.marshal()
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)