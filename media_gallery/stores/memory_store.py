# media_gallery/stores/memory_store.py
"""
In-process document and object stores.

Used by the test suite and by deployments configured with the ``memory``
backends. Every call yields to the event loop once so concurrent pipeline
tasks interleave the way they do against a networked store.
"""

import asyncio
import copy
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..enums import LoggerName, LogSource
from ..exceptions import (
    DocumentNotFoundError,
    ObjectNotFoundError,
    StoreFailureError,
    ValidationFailureError,
)
from ..services.logger import get_service_logger
from ..utils.time_utils import utc_now
from .protocols import (
    QUERY_OPERATORS,
    DocumentSnapshot,
    ObjectMetadata,
    apply_field_transforms,
)

doc_logger = get_service_logger(LoggerName.DOCUMENT_STORE, LogSource.STORE)
obj_logger = get_service_logger(LoggerName.OBJECT_STORE, LogSource.STORE)


class InMemoryWriteBatch:
    def __init__(self, store: "InMemoryDocumentStore"):
        self._store = store
        self._updates: List[Tuple[str, str, Dict[str, Any]]] = []
        self._committed = False

    def update(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> "InMemoryWriteBatch":
        if self._committed:
            raise StoreFailureError("Batch already committed", operation="batch.update")
        self._updates.append((collection, doc_id, data))
        return self

    def __len__(self) -> int:
        return len(self._updates)

    async def commit(self) -> None:
        if self._committed:
            raise StoreFailureError("Batch already committed", operation="batch.commit")
        await asyncio.sleep(0)
        self._store._apply_batch(self._updates)
        self._committed = True


class InMemoryDocumentStore:
    """Dict-backed document store with the same semantics as the Postgres one."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._clock = clock

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        await asyncio.sleep(0)
        data = self._collection(collection).get(doc_id)
        if data is None:
            return DocumentSnapshot(id=doc_id, exists=False)
        return DocumentSnapshot(id=doc_id, exists=True, data=copy.deepcopy(data))

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False,
    ) -> None:
        await asyncio.sleep(0)
        docs = self._collection(collection)
        base = docs.get(doc_id, {}) if merge else {}
        docs[doc_id] = apply_field_transforms(base, data, self._clock())
        doc_logger.debug(
            f"set {collection}/{doc_id}",
            extra_context={"merge": merge, "fields": sorted(data)},
        )

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        await asyncio.sleep(0)
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFoundError(
                f"Document {collection}/{doc_id} does not exist", operation="update"
            )
        docs[doc_id] = apply_field_transforms(docs[doc_id], data, self._clock())

    async def delete(self, collection: str, doc_id: str) -> None:
        await asyncio.sleep(0)
        self._collection(collection).pop(doc_id, None)

    async def query(
        self, collection: str, field_name: str, value: Any, op: str = "=="
    ) -> List[DocumentSnapshot]:
        if op not in QUERY_OPERATORS:
            raise ValidationFailureError(f"Unsupported query operator '{op}'")
        await asyncio.sleep(0)
        matches = []
        for doc_id, data in sorted(self._collection(collection).items()):
            if field_name not in data:
                continue
            current = data[field_name]
            if op == "==":
                hit = current == value
            else:
                hit = isinstance(current, list) and value in current
            if hit:
                matches.append(
                    DocumentSnapshot(id=doc_id, exists=True, data=copy.deepcopy(data))
                )
        return matches

    async def list(self, collection: str) -> List[DocumentSnapshot]:
        await asyncio.sleep(0)
        return [
            DocumentSnapshot(id=doc_id, exists=True, data=copy.deepcopy(data))
            for doc_id, data in sorted(self._collection(collection).items())
        ]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        await self.set(collection, doc_id, data)
        return doc_id

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    def _apply_batch(self, updates: List[Tuple[str, str, Dict[str, Any]]]) -> None:
        # Validate every target before touching anything
        now = self._clock()
        staged: Dict[Tuple[str, str], Dict[str, Any]] = {}
        for collection, doc_id, data in updates:
            key = (collection, doc_id)
            current = staged.get(key, self._collection(collection).get(doc_id))
            if current is None:
                raise DocumentNotFoundError(
                    f"Document {collection}/{doc_id} does not exist",
                    operation="batch.commit",
                )
            staged[key] = apply_field_transforms(current, data, now)
        for (collection, doc_id), data in staged.items():
            self._collection(collection)[doc_id] = data
        doc_logger.debug(f"Committed batch of {len(updates)} updates")

    def dump(self, collection: str) -> Dict[str, Dict[str, Any]]:
        """Copy of a whole collection, for inspection."""
        return copy.deepcopy(self._collection(collection))


class InMemoryObjectStore:
    def __init__(
        self,
        base_url: str = "memory://objects",
        clock: Callable[[], datetime] = utc_now,
    ):
        self._objects: Dict[str, Tuple[bytes, str, datetime]] = {}
        self._base_url = base_url.rstrip("/")
        self._clock = clock

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        await asyncio.sleep(0)
        self._objects[key] = (bytes(data), content_type, self._clock())
        obj_logger.debug(f"Stored {key} ({len(data)} bytes, {content_type})")

    async def delete(self, key: str) -> None:
        await asyncio.sleep(0)
        if self._objects.pop(key, None) is None:
            raise ObjectNotFoundError(f"Object {key} does not exist", operation="delete")

    async def resolve_url(self, key: str) -> str:
        await asyncio.sleep(0)
        if key not in self._objects:
            raise ObjectNotFoundError(
                f"Object {key} does not exist", operation="resolve_url"
            )
        return f"{self._base_url}/{key}"

    async def read_metadata(self, key: str) -> ObjectMetadata:
        await asyncio.sleep(0)
        stored = self._objects.get(key)
        if stored is None:
            raise ObjectNotFoundError(
                f"Object {key} does not exist", operation="read_metadata"
            )
        data, content_type, updated_at = stored
        return ObjectMetadata(
            key=key, size=len(data), content_type=content_type, updated_at=updated_at
        )

    def get_bytes(self, key: str) -> Optional[bytes]:
        stored = self._objects.get(key)
        return stored[0] if stored else None

    def get_content_type(self, key: str) -> Optional[str]:
        stored = self._objects.get(key)
        return stored[1] if stored else None

    def keys(self) -> List[str]:
        return sorted(self._objects)
