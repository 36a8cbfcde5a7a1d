"""In-process store backend, used for local runs, seeding and tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Set

from loguru import logger

from ..records.schema import generate_id
from ..utils.fileio import read_yaml
from .base import StoreError, SwimmerStore


class InMemorySwimmerStore(SwimmerStore):
    """Dict-backed documents. Updates overwrite whole top-level fields."""

    def __init__(self, swimmers: Optional[Dict[str, Dict[str, Any]]] = None, settings: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.documents: Dict[str, Dict[str, Any]] = copy.deepcopy(swimmers or {})
        self.settings: Optional[Dict[str, Any]] = copy.deepcopy(settings)
        self.blobs: Dict[str, bytes] = {}
        self._failures: Set[str] = set()

    @classmethod
    def from_yaml(cls, path: Path) -> "InMemorySwimmerStore":
        """Seed from a YAML file with ``swimmers`` (list of documents) and ``settings`` keys."""

        data = read_yaml(Path(path)) or {}
        swimmers: Dict[str, Dict[str, Any]] = {}
        for entry in data.get("swimmers") or []:
            doc = dict(entry)
            doc_id = str(doc.pop("id", None) or generate_id())
            doc.setdefault("times", [])
            doc.setdefault("bestLapTimes", {})
            swimmers[doc_id] = doc
        logger.info("Seeded in-memory store with {} swimmers from {}", len(swimmers), path)
        return cls(swimmers=swimmers, settings=data.get("settings"))

    def fail_next(self, operation: str) -> None:
        """Make the next call of a backend hook (e.g. ``"update"``) raise :class:`StoreError`."""

        self._failures.add(operation)

    def _check(self, operation: str) -> None:
        if operation in self._failures:
            self._failures.discard(operation)
            raise StoreError(f"simulated {operation} failure")

    async def _fetch_all(self) -> Dict[str, Dict[str, Any]]:
        self._check("fetch")
        return copy.deepcopy(self.documents)

    async def _insert(self, doc: Dict[str, Any]) -> str:
        self._check("insert")
        doc_id = generate_id()
        self.documents[doc_id] = copy.deepcopy(doc)
        return doc_id

    async def _update(self, doc_id: str, fields: Dict[str, Any]) -> None:
        self._check("update")
        if doc_id not in self.documents:
            raise StoreError(f"no swimmer document {doc_id}")
        self.documents[doc_id].update(copy.deepcopy(fields))

    async def _delete(self, doc_id: str) -> None:
        self._check("delete")
        if self.documents.pop(doc_id, None) is None:
            raise StoreError(f"no swimmer document {doc_id}")

    async def _fetch_settings(self) -> Optional[Dict[str, Any]]:
        self._check("settings")
        return copy.deepcopy(self.settings)

    async def _write_settings(self, doc: Dict[str, Any]) -> None:
        self._check("write_settings")
        merged = dict(self.settings or {})
        merged.update(doc)
        self.settings = merged

    async def _put_blob(self, path: str, data: bytes) -> str:
        self._check("upload")
        self.blobs[path] = bytes(data)
        return f"memory://{path}"


__all__ = ["InMemorySwimmerStore"]
