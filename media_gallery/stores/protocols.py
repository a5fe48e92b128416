# media_gallery/stores/protocols.py
"""
Contracts of the external collaborators the pipelines talk to.

Implementations live next to this module. Every implementation raises only
the gallery exception taxonomy (``exceptions.py``), never a backend error.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from ..enums import NotificationSeverity

# =============================================================================
# FIELD SENTINELS
# =============================================================================


class _ServerTimestamp:
    """Replaced by the store's clock when the write is applied."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class _ArrayTransform:
    __slots__ = ("values",)

    def __init__(self, *values: Any):
        self.values: Tuple[Any, ...] = tuple(values)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.values == other.values  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.values))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.values!r}"


class ArrayUnion(_ArrayTransform):
    """Add values to an array field, skipping ones already present."""


class ArrayRemove(_ArrayTransform):
    """Remove every occurrence of the values from an array field."""


def has_field_transforms(data: Dict[str, Any]) -> bool:
    return any(
        value is SERVER_TIMESTAMP or isinstance(value, _ArrayTransform)
        for value in data.values()
    )


def apply_field_transforms(
    current: Dict[str, Any], changes: Dict[str, Any], now: datetime
) -> Dict[str, Any]:
    """
    Merge ``changes`` into a copy of ``current``, resolving sentinels.

    Fields absent from ``changes`` are kept. A union or removal against a
    missing or non-array field starts from an empty array.
    """
    result = copy.deepcopy(current)
    for name, value in changes.items():
        if value is SERVER_TIMESTAMP:
            result[name] = now
        elif isinstance(value, (ArrayUnion, ArrayRemove)):
            existing = result.get(name)
            items = list(existing) if isinstance(existing, list) else []
            if isinstance(value, ArrayUnion):
                for item in value.values:
                    if item not in items:
                        items.append(item)
            else:
                items = [item for item in items if item not in value.values]
            result[name] = items
        else:
            result[name] = copy.deepcopy(value)
    return result


# =============================================================================
# VALUE TYPES
# =============================================================================


@dataclass
class DocumentSnapshot:
    """Result of a document read. ``data`` is empty when ``exists`` is False."""

    id: str
    exists: bool
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.data.get(name, default)


@dataclass
class ObjectMetadata:
    key: str
    size: int
    content_type: Optional[str] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# STORES
# =============================================================================


@runtime_checkable
class ObjectStore(Protocol):
    """Binary storage keyed by slash-separated paths."""

    async def upload(self, key: str, data: bytes, content_type: str) -> None: ...

    async def delete(self, key: str) -> None:
        """Raises ObjectNotFoundError when ``key`` does not exist."""
        ...

    async def resolve_url(self, key: str) -> str: ...

    async def read_metadata(self, key: str) -> ObjectMetadata:
        """Raises ObjectNotFoundError when ``key`` does not exist."""
        ...


@runtime_checkable
class WriteBatch(Protocol):
    """Updates applied all-or-nothing on ``commit``."""

    def update(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> "WriteBatch": ...

    async def commit(self) -> None:
        """Raises DocumentNotFoundError (and applies nothing) if any target is gone."""
        ...

    def __len__(self) -> int: ...


@runtime_checkable
class DocumentStore(Protocol):
    """Schemaless documents grouped in collections."""

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot: ...

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False,
    ) -> None: ...

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Raises DocumentNotFoundError when the document does not exist."""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """Deleting a missing document is a no-op."""
        ...

    async def query(
        self, collection: str, field_name: str, value: Any, op: str = "=="
    ) -> List[DocumentSnapshot]:
        """``op`` is ``==`` or ``array_contains``."""
        ...

    async def list(self, collection: str) -> List[DocumentSnapshot]: ...

    async def add(self, collection: str, data: Dict[str, Any]) -> str: ...

    def batch(self) -> WriteBatch: ...


# =============================================================================
# COLLABORATORS
# =============================================================================

AuthListener = Callable[[bool], Awaitable[None]]


@runtime_checkable
class AuthService(Protocol):
    """Session provider. Listeners receive ``True`` on sign-in, ``False`` on sign-out."""

    def subscribe(self, on_change: AuthListener) -> Callable[[], None]: ...

    async def sign_in(self, password: str) -> bool: ...

    async def sign_out(self) -> None: ...


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, message: str, severity: NotificationSeverity) -> None: ...


QUERY_OPERATORS = ("==", "array_contains")
