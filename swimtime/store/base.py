"""Boundary to the document store that owns swimmers and club settings.

The public coroutine methods here are the only way the rest of the package
talks to storage. They never raise: backend errors are logged and reported as
an empty list, ``None`` or ``False`` so callers must check the result before
touching local state. Concrete backends implement the underscored hooks.
"""

from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional

from loguru import logger
from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from ..records.dates import utcnow
from ..records.schema import ClubSettings, Swimmer

StoreListener = Callable[[List[Swimmer]], None]
Unsubscribe = Callable[[], None]

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.]")


class StoreError(RuntimeError):
    """Raised by backends when an operation cannot be completed."""


def sanitize_filename(filename: str, timestamp_ms: Optional[int] = None) -> str:
    stamp = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms
    return f"{stamp}_{_UNSAFE_CHARS.sub('_', filename)}"


class SwimmerStore(ABC):
    def __init__(self):
        self._listeners: List[StoreListener] = []

    # -- backend hooks -------------------------------------------------

    @abstractmethod
    async def _fetch_all(self) -> Dict[str, Dict[str, Any]]:
        """Return every swimmer document keyed by id."""

    @abstractmethod
    async def _insert(self, doc: Dict[str, Any]) -> str:
        """Store a new document and return its id."""

    @abstractmethod
    async def _update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def _delete(self, doc_id: str) -> None:
        ...

    @abstractmethod
    async def _fetch_settings(self) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def _write_settings(self, doc: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def _put_blob(self, path: str, data: bytes) -> str:
        """Store bytes under ``path`` and return a download URL."""

    # -- swimmers ------------------------------------------------------

    async def list_swimmers(self) -> List[Swimmer]:
        try:
            docs = await self._fetch_all()
        except Exception:
            logger.exception("Error getting swimmers")
            return []
        return self._parse_all(docs)

    async def add_swimmer(
        self,
        name: str,
        times: Optional[List[Any]] = None,
        best_lap_times: Optional[Mapping[int, int]] = None,
    ) -> Optional[Swimmer]:
        doc = {
            "name": name or "",
            "times": to_jsonable_python(list(times or []), by_alias=True),
            "bestLapTimes": to_jsonable_python(dict(best_lap_times or {})),
            "createdAt": utcnow().isoformat(),
        }
        try:
            doc_id = await self._insert(doc)
        except Exception:
            logger.exception("Error adding swimmer {!r}", name)
            return None
        logger.info("Added swimmer {} ({})", doc_id, name)
        await self._notify()
        return Swimmer.from_document(doc_id, doc)

    async def update_swimmer(self, swimmer_id: str, fields: Mapping[str, Any]) -> bool:
        """Overwrite the given top-level fields. Last write wins."""

        payload = to_jsonable_python(dict(fields), by_alias=True)
        try:
            await self._update(swimmer_id, payload)
        except Exception:
            logger.exception("Error updating swimmer {}", swimmer_id)
            return False
        logger.debug("Updated swimmer {} fields {}", swimmer_id, sorted(payload))
        await self._notify()
        return True

    async def delete_swimmer(self, swimmer_id: str) -> bool:
        try:
            await self._delete(swimmer_id)
        except Exception:
            logger.exception("Error deleting swimmer {}", swimmer_id)
            return False
        logger.info("Deleted swimmer {}", swimmer_id)
        await self._notify()
        return True

    # -- subscriptions -------------------------------------------------

    async def subscribe(self, callback: StoreListener) -> Unsubscribe:
        """Register ``callback`` for full roster snapshots, delivering the current one now."""

        self._listeners.append(callback)
        self._deliver(callback, await self.list_swimmers())

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = await self.list_swimmers()
        for callback in list(self._listeners):
            self._deliver(callback, snapshot)

    @staticmethod
    def _deliver(callback: StoreListener, snapshot: List[Swimmer]) -> None:
        try:
            callback(list(snapshot))
        except Exception:
            logger.exception("Swimmer subscription callback failed")

    # -- club settings and files ---------------------------------------

    async def get_club_settings(self) -> ClubSettings:
        try:
            doc = await self._fetch_settings()
        except Exception:
            logger.exception("Error getting club settings")
            return ClubSettings()
        if doc is None:
            defaults = ClubSettings()
            try:
                await self._write_settings(defaults.model_dump(by_alias=True))
            except Exception:
                logger.warning("Could not create default club settings")
            return defaults
        try:
            return ClubSettings.model_validate(doc)
        except ValidationError:
            logger.warning("Malformed club settings document, using defaults")
            return ClubSettings()

    async def update_club_settings(self, settings: ClubSettings) -> bool:
        try:
            await self._write_settings(settings.model_dump(by_alias=True))
        except Exception:
            logger.exception("Error updating club settings")
            return False
        return True

    async def upload_file(self, filename: str, data: bytes, folder: str = "logos") -> Optional[str]:
        path = f"{folder}/{sanitize_filename(filename)}"
        try:
            url = await self._put_blob(path, data)
        except Exception:
            logger.exception("Error uploading {}", filename)
            return None
        logger.info("Uploaded {} ({} bytes)", path, len(data))
        return url

    # -- helpers -------------------------------------------------------

    @staticmethod
    def _parse_all(docs: Mapping[str, Mapping[str, Any]]) -> List[Swimmer]:
        swimmers: List[Swimmer] = []
        for doc_id, doc in docs.items():
            try:
                swimmers.append(Swimmer.from_document(doc_id, doc))
            except (ValidationError, AttributeError, TypeError):
                logger.warning("Skipping unreadable swimmer document {}", doc_id)
        return swimmers


__all__ = ["SwimmerStore", "StoreError", "StoreListener", "Unsubscribe", "sanitize_filename"]
