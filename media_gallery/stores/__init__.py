# media_gallery/stores/__init__.py
"""
Backing stores.

``protocols`` defines the contracts; the other modules implement them.
"""

from .filesystem_object_store import FileSystemObjectStore
from .memory_store import InMemoryDocumentStore, InMemoryObjectStore
from .postgres_document_store import PostgresDocumentStore
from .protocols import (
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    AuthService,
    DocumentSnapshot,
    DocumentStore,
    NotificationSink,
    ObjectMetadata,
    ObjectStore,
    WriteBatch,
)

__all__ = [
    "SERVER_TIMESTAMP",
    "ArrayRemove",
    "ArrayUnion",
    "AuthService",
    "DocumentSnapshot",
    "DocumentStore",
    "NotificationSink",
    "ObjectMetadata",
    "ObjectStore",
    "WriteBatch",
    "FileSystemObjectStore",
    "InMemoryDocumentStore",
    "InMemoryObjectStore",
    "PostgresDocumentStore",
]
