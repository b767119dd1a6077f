from __future__ import annotations

import json
import logging
from typing import Any, Iterator, MutableMapping

from frontend.layout.grid import Layout, LayoutFormatError

logger = logging.getLogger(__name__)

# Browsers typically grant 5 MiB of localStorage per origin.
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class StorageQuotaExceeded(Exception):
    pass


class BrowserStorage(MutableMapping[str, str]):
    """localStorage-like mapping: string values and a per-origin byte quota.

    ``backing`` is the dict actually persisted; in the Dash client that is the
    payload of a ``dcc.Store(storage_type="local")``.
    """

    def __init__(self, backing: dict[str, Any] | None = None, quota_bytes: int = DEFAULT_QUOTA_BYTES):
        self.backing: dict[str, Any] = backing if backing is not None else {}
        self.quota_bytes = quota_bytes

    def __getitem__(self, key: str) -> str:
        return self.backing[key]

    def __setitem__(self, key: str, value: str) -> None:
        value = str(value)
        projected = self.used_bytes() - self._entry_bytes(key, self.backing.get(key)) + self._entry_bytes(key, value)
        if projected > self.quota_bytes:
            raise StorageQuotaExceeded(f"writing {key!r} would use {projected} of {self.quota_bytes} bytes")
        self.backing[key] = value

    def __delitem__(self, key: str) -> None:
        del self.backing[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.backing)

    def __len__(self) -> int:
        return len(self.backing)

    def used_bytes(self) -> int:
        return sum(self._entry_bytes(key, value) for key, value in self.backing.items())

    @staticmethod
    def _entry_bytes(key: str, value: Any) -> int:
        if value is None:
            return 0
        # localStorage accounts strings as UTF-16 code units.
        return 2 * (len(str(key)) + len(str(value)))


class LayoutStore:
    def __init__(self, storage: MutableMapping[str, Any]):
        self.storage = storage

    def load(self, key: str) -> Layout | None:
        try:
            raw = self.storage.get(key)
        except Exception as exc:  # storage backends may fail arbitrarily on read
            logger.warning("Could not read layout %r, using defaults: %s", key, exc)
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
            return Layout.from_dict(data)
        except (ValueError, TypeError, LayoutFormatError) as exc:
            logger.warning("Could not restore layout %r, using defaults: %s", key, exc)
            return None

    def save(self, key: str, layout: Layout) -> None:
        try:
            self.storage[key] = json.dumps(layout.to_dict())
        except (StorageQuotaExceeded, OSError, TypeError, ValueError) as exc:
            # The in-memory grid stays authoritative for the session.
            logger.debug("Layout %r not persisted: %s", key, exc)

    def clear(self, key: str) -> None:
        try:
            self.storage.pop(key, None)
        except (KeyError, OSError) as exc:
            logger.debug("Layout %r not cleared: %s", key, exc)
