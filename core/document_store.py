"""
Document Store

JSON documents grouped into collections, with atomic multi-document
read-modify-write transactions. Services depend on DocumentStoreProtocol
only; PostgresDocumentStore is the production implementation.

Transactions that lose a race raise TransactionConflict internally and are
re-run by run_with_retry (bounded, jittered backoff). Business errors
raised by a transaction body abort it and are never retried.
"""

import json
import logging
from datetime import datetime, timezone
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
    runtime_checkable,
)

import asyncpg
from pydantic_core import to_jsonable_python
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from core.errors import ConflictError, ErrorCode, NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (field, op, value); op is "==" or "!="
Filter = Tuple[str, str, Any]

SUPPORTED_OPERATORS = ("==", "!=")

# Fixed-width UTC text: lexicographic order equals chronological order
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class _DeleteField:
    def __repr__(self) -> str:
        return "DELETE_FIELD"


# Sentinel for update(): removes the field from the stored document
DELETE_FIELD = _DeleteField()


class TransactionConflict(Exception):
    """A concurrent writer invalidated this transaction's reads"""


@runtime_checkable
class TransactionProtocol(Protocol):
    """Reads and writes scoped to one atomic transaction"""

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Insert a new document; fails if it already exists"""
        ...

    async def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> None:
        """Merge top-level fields; DELETE_FIELD values remove the field"""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        ...


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Interface for the document database"""

    async def initialize(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def health_check(self) -> bool:
        ...

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    async def run_transaction(
        self, callback: Callable[[TransactionProtocol], Awaitable[T]]
    ) -> T:
        ...


def split_changes(changes: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Separate merged fields from fields marked with DELETE_FIELD"""
    merged = {k: v for k, v in changes.items() if v is not DELETE_FIELD}
    removed = [k for k, v in changes.items() if v is DELETE_FIELD]
    return merged, removed


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 3,
    max_wait: float = 0.5,
) -> T:
    """
    Run a transaction attempt, re-running it on TransactionConflict.

    Raises:
        ConflictError: all attempts lost to concurrent writers
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_random_exponential(multiplier=0.02, max=max_wait),
            retry=retry_if_exception_type(TransactionConflict),
            reraise=True,
        ):
            with attempt:
                return await operation()
    except TransactionConflict:
        logger.warning(f"Transaction aborted after {attempts} conflicting attempts")
        raise ConflictError(
            "Request conflicted with a concurrent update, please retry",
            code=ErrorCode.TRANSACTION_CONFLICT,
        )


# ==================== PostgreSQL implementation ====================

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data JSONB NOT NULL,
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_data ON documents USING GIN (data);
"""

RETRYABLE_PG_ERRORS = (
    asyncpg.exceptions.SerializationError,
    asyncpg.exceptions.DeadlockDetectedError,
)


def _build_select(
    collection: str,
    filters: Sequence[Filter],
    order_by: Optional[str],
    descending: bool,
    limit: Optional[int],
    for_update: bool,
) -> Tuple[str, List[Any]]:
    params: List[Any] = [collection]
    clauses = ["collection = $1"]

    for field, op, value in filters:
        if op not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {op}")
        params.append(field)
        params.append(json.dumps(value))
        sql_op = "=" if op == "==" else "<>"
        clauses.append(f"(data -> ${len(params) - 1}::text) {sql_op} ${len(params)}::jsonb")

    sql = f"SELECT data FROM documents WHERE {' AND '.join(clauses)}"

    if order_by:
        params.append(order_by)
        direction = "DESC" if descending else "ASC"
        sql += f" ORDER BY data -> ${len(params)}::text {direction}"

    if limit is not None:
        params.append(int(limit))
        sql += f" LIMIT ${len(params)}"

    if for_update:
        sql += " FOR UPDATE"

    return sql, params


class PostgresTransaction:
    """Transaction bound to one asyncpg connection in SERIALIZABLE mode"""

    def __init__(self, conn: asyncpg.Connection):
        self._conn = conn

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        row = await self._conn.fetchrow(
            "SELECT data FROM documents WHERE collection = $1 AND id = $2 FOR UPDATE",
            collection, doc_id,
        )
        return json.loads(row["data"]) if row else None

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        sql, params = _build_select(collection, filters, order_by, descending, limit, for_update=True)
        rows = await self._conn.fetch(sql, *params)
        return [json.loads(row["data"]) for row in rows]

    async def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            await self._conn.execute(
                "INSERT INTO documents (collection, id, data) VALUES ($1, $2, $3::jsonb)",
                collection, doc_id, json.dumps(data),
            )
        except asyncpg.exceptions.UniqueViolationError:
            raise ConflictError(f"Document {collection}/{doc_id} already exists")

    async def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> None:
        merged, removed = split_changes(changes)
        result = await self._conn.execute(
            """
            UPDATE documents SET data = (data || $3::jsonb) - $4::text[]
            WHERE collection = $1 AND id = $2
            """,
            collection, doc_id, json.dumps(merged), removed,
        )
        if result.endswith(" 0"):
            raise NotFoundError(f"Document {collection}/{doc_id} not found")

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._conn.execute(
            "DELETE FROM documents WHERE collection = $1 AND id = $2",
            collection, doc_id,
        )


class PostgresDocumentStore:
    """
    Document store on PostgreSQL using one JSONB table.

    Transactions run SERIALIZABLE and lock what they read, so two requests
    that read the same campaign cannot both commit stale counters.
    """

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        transaction_attempts: int = 3,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.transaction_attempts = transaction_attempts
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(self) -> None:
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            self.dsn, min_size=self.min_size, max_size=self.max_size
        )
        async with self._pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
        logger.info("PostgreSQL document store initialized")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL document store closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Document store not initialized")
        return self._pool

    async def health_check(self) -> bool:
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception as e:
            logger.error(f"Document store health check failed: {e}")
            return False

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT data FROM documents WHERE collection = $1 AND id = $2",
                collection, doc_id,
            )
        return json.loads(row["data"]) if row else None

    async def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        sql, params = _build_select(collection, filters, order_by, descending, limit, for_update=False)
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(sql, *params)
        return [json.loads(row["data"]) for row in rows]

    async def run_transaction(
        self, callback: Callable[[TransactionProtocol], Awaitable[T]]
    ) -> T:
        async def attempt() -> T:
            async with self.pool.acquire() as conn:
                try:
                    async with conn.transaction(isolation="serializable"):
                        return await callback(PostgresTransaction(conn))
                except RETRYABLE_PG_ERRORS as e:
                    logger.debug(f"Serialization conflict, retrying: {e}")
                    raise TransactionConflict(str(e)) from e

        return await run_with_retry(attempt, self.transaction_attempts)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, dict):
        return {k: _encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v) for v in value]
    return to_jsonable_python(value)


def encode_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-encode a full document for create()"""
    return {k: _encode_value(v) for k, v in data.items()}


def encode_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-encode field values for update(), passing DELETE_FIELD through"""
    return {
        k: v if v is DELETE_FIELD else _encode_value(v)
        for k, v in changes.items()
    }
