# media_gallery/stores/postgres_document_store.py
"""
PostgreSQL document store.

All collections share one JSONB table keyed by ``(collection, id)``.
Equality and array-contains queries use JSONB containment (``@>``) so they
can be served by the GIN index. Writes that need the current document
(merge, field sentinels, batches) lock the rows with ``SELECT ... FOR UPDATE``
inside a single transaction.
"""

import json
import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from ..enums import LoggerName, LogSource
from ..exceptions import (
    DocumentNotFoundError,
    StoreFailureError,
    ValidationFailureError,
)
from ..services.logger import get_service_logger
from ..utils.time_utils import utc_now
from .protocols import (
    QUERY_OPERATORS,
    DocumentSnapshot,
    apply_field_transforms,
    has_field_transforms,
)

logger = get_service_logger(LoggerName.DATABASE, LogSource.STORE)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data JSONB NOT NULL DEFAULT '{}'::jsonb,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_data ON documents USING GIN (data jsonb_path_ops);
"""

UPSERT_SQL = """
INSERT INTO documents (collection, id, data, updated_at)
VALUES (%s, %s, %s::jsonb, NOW())
ON CONFLICT (collection, id)
DO UPDATE SET data = EXCLUDED.data, updated_at = NOW()
"""

SELECT_FOR_UPDATE_SQL = """
SELECT data FROM documents WHERE collection = %s AND id = %s FOR UPDATE
"""


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _dumps(data: Dict[str, Any]) -> str:
    return json.dumps(data, default=_json_default)


class PostgresWriteBatch:
    def __init__(self, store: "PostgresDocumentStore"):
        self._store = store
        self._updates: List[Tuple[str, str, Dict[str, Any]]] = []

    def update(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> "PostgresWriteBatch":
        self._updates.append((collection, doc_id, data))
        return self

    def __len__(self) -> int:
        return len(self._updates)

    async def commit(self) -> None:
        if not self._updates:
            return
        now = utc_now()
        async with self._store._transaction("batch.commit") as conn:
            async with conn.cursor() as cur:
                for collection, doc_id, changes in self._updates:
                    await cur.execute(SELECT_FOR_UPDATE_SQL, (collection, doc_id))
                    row = await cur.fetchone()
                    if row is None:
                        # Raising inside the transaction rolls back earlier updates
                        raise DocumentNotFoundError(
                            f"Document {collection}/{doc_id} does not exist",
                            operation="batch.commit",
                        )
                    merged = apply_field_transforms(row["data"], changes, now)
                    await cur.execute(UPSERT_SQL, (collection, doc_id, _dumps(merged)))
        logger.debug(f"Committed batch of {len(self._updates)} updates")


class PostgresDocumentStore:
    """
    Document store on a psycopg 3 async connection pool.

    ``initialize()`` must be awaited before use (done in the FastAPI lifespan).
    """

    def __init__(
        self,
        database_url: str,
        min_size: int = 2,
        max_size: int = 10,
        timeout: int = 30,
    ):
        self._database_url = database_url
        self._min_size = min_size
        self._max_size = max_size
        self._timeout = timeout
        self._pool: Optional[AsyncConnectionPool] = None

    async def initialize(self) -> None:
        """Open the connection pool and create the documents table."""
        try:
            self._pool = AsyncConnectionPool(
                self._database_url,
                min_size=self._min_size,
                max_size=self._max_size,
                timeout=self._timeout,
                kwargs={"row_factory": dict_row},
                open=False,
            )
            await self._pool.open()
            async with self._pool.connection() as conn:
                await conn.execute(SCHEMA_SQL)
        except (psycopg.Error, OSError) as e:
            logger.error("Failed to initialize document store pool", exception=e)
            raise StoreFailureError(
                f"Could not connect to document database: {e}", operation="initialize"
            ) from e
        logger.info("Document store pool initialized")

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncGenerator[Any, None]:
        if not self._pool:
            raise StoreFailureError("Document store not initialized", operation=operation)
        try:
            async with self._pool.connection() as conn:
                async with conn.transaction():
                    yield conn
        except psycopg.Error as e:
            logger.error(f"Document store {operation} failed", exception=e)
            raise StoreFailureError(
                f"Document store {operation} failed: {e}", operation=operation
            ) from e

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        async with self._transaction("get") as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT data FROM documents WHERE collection = %s AND id = %s",
                    (collection, doc_id),
                )
                row = await cur.fetchone()
        if row is None:
            return DocumentSnapshot(id=doc_id, exists=False)
        return DocumentSnapshot(id=doc_id, exists=True, data=row["data"])

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        merge: bool = False,
    ) -> None:
        async with self._transaction("set") as conn:
            async with conn.cursor() as cur:
                current: Dict[str, Any] = {}
                if merge:
                    await cur.execute(SELECT_FOR_UPDATE_SQL, (collection, doc_id))
                    row = await cur.fetchone()
                    if row is not None:
                        current = row["data"]
                payload = (
                    apply_field_transforms(current, data, utc_now())
                    if merge or has_field_transforms(data)
                    else data
                )
                await cur.execute(UPSERT_SQL, (collection, doc_id, _dumps(payload)))

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        async with self._transaction("update") as conn:
            async with conn.cursor() as cur:
                await cur.execute(SELECT_FOR_UPDATE_SQL, (collection, doc_id))
                row = await cur.fetchone()
                if row is None:
                    raise DocumentNotFoundError(
                        f"Document {collection}/{doc_id} does not exist",
                        operation="update",
                    )
                merged = apply_field_transforms(row["data"], data, utc_now())
                await cur.execute(UPSERT_SQL, (collection, doc_id, _dumps(merged)))

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._transaction("delete") as conn:
            await conn.execute(
                "DELETE FROM documents WHERE collection = %s AND id = %s",
                (collection, doc_id),
            )

    async def query(
        self, collection: str, field_name: str, value: Any, op: str = "=="
    ) -> List[DocumentSnapshot]:
        if op not in QUERY_OPERATORS:
            raise ValidationFailureError(f"Unsupported query operator '{op}'")
        probe = {field_name: value} if op == "==" else {field_name: [value]}
        async with self._transaction("query") as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    SELECT id, data FROM documents
                    WHERE collection = %s AND data @> %s::jsonb
                    ORDER BY id
                    """,
                    (collection, _dumps(probe)),
                )
                rows = await cur.fetchall()
        return [DocumentSnapshot(id=row["id"], exists=True, data=row["data"]) for row in rows]

    async def list(self, collection: str) -> List[DocumentSnapshot]:
        async with self._transaction("list") as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT id, data FROM documents WHERE collection = %s ORDER BY id",
                    (collection,),
                )
                rows = await cur.fetchall()
        return [DocumentSnapshot(id=row["id"], exists=True, data=row["data"]) for row in rows]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        await self.set(collection, doc_id, data)
        return doc_id

    def batch(self) -> PostgresWriteBatch:
        return PostgresWriteBatch(self)

    async def check_health(self) -> bool:
        try:
            async with self._transaction("health") as conn:
                await conn.execute("SELECT 1")
            return True
        except StoreFailureError:
            return False
