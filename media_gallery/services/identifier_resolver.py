# media_gallery/services/identifier_resolver.py
"""
Identifier Resolver

Finds a collision-free media id for an upload. ``beach.jpg`` stays
``beach.jpg`` when free, otherwise ``beach-1.jpg``, ``beach-2.jpg`` ... are
probed one at a time; the first free candidate wins.

A candidate is taken when its metadata document exists, when its full or
thumbnail object exists, or when another upload in this process reserved
it and has not written its document yet. Probe-and-reserve runs under a
lock so two concurrent files with the same name never get the same id.
"""

import asyncio
from typing import Set, Tuple

from ..enums import LogEmoji, LoggerName, LogSource, MediaType
from ..exceptions import ObjectNotFoundError, StoreFailureError
from ..stores.protocols import DocumentStore, ObjectStore
from ..utils.filename_utils import storage_keys_for, suffixed_filename
from .logger import get_service_logger

logger = get_service_logger(
    LoggerName.IDENTIFIER_RESOLVER, LogSource.PIPELINE, LogEmoji.SEARCH
)

MAX_PROBES = 10_000


class IdentifierResolver:
    def __init__(
        self,
        document_store: DocumentStore,
        object_store: ObjectStore,
        max_probes: int = MAX_PROBES,
    ):
        self.document_store = document_store
        self.object_store = object_store
        self.max_probes = max_probes
        self._lock = asyncio.Lock()
        self._reserved: Set[Tuple[str, str]] = set()

    async def _object_exists(self, key: str) -> bool:
        try:
            await self.object_store.read_metadata(key)
        except ObjectNotFoundError:
            return False
        return True

    async def is_taken(self, candidate: str, media_type: MediaType) -> bool:
        """Store errors propagate so the caller aborts the upload."""
        if (media_type.collection, candidate) in self._reserved:
            return True
        snapshot = await self.document_store.get(media_type.collection, candidate)
        if snapshot.exists:
            return True
        for key in storage_keys_for(media_type, candidate):
            if await self._object_exists(key):
                return True
        return False

    async def resolve(self, base_name: str, media_type: MediaType) -> str:
        """
        Reserve and return a free id derived from ``base_name``.

        The caller must ``release`` the id once its document is written or
        the upload failed.
        """
        async with self._lock:
            candidate = base_name
            counter = 0
            while await self.is_taken(candidate, media_type):
                counter += 1
                if counter > self.max_probes:
                    raise StoreFailureError(
                        f"No free identifier for {base_name} after {self.max_probes} probes",
                        operation="resolve",
                    )
                candidate = suffixed_filename(base_name, counter)
            self._reserved.add((media_type.collection, candidate))

        if candidate != base_name:
            logger.debug(f"{base_name} is taken, using {candidate}")
        return candidate

    def release(self, media_id: str, media_type: MediaType) -> None:
        self._reserved.discard((media_type.collection, media_id))

    @property
    def reserved_count(self) -> int:
        return len(self._reserved)
