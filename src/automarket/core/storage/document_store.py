"""Document store gateway.

Records are flat JSON field maps grouped into named collections. Every
stored record carries its own ``id`` so callers never need to track keys
separately from documents.
"""

import copy
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, select

from src.automarket.core.errors import StoreError
from src.automarket.core.services.database.db_session import DbSessionService

Record = dict[str, Any]


def new_document_id() -> str:
    return uuid.uuid4().hex


class DocumentStore(ABC):
    """Abstract interface for document store backends."""

    @abstractmethod
    def save(self, collection: str, doc_id: str | None, record: Record) -> str:
        """Create or overwrite a record.

        Args:
            collection: Collection name
            doc_id: Record key; a new one is generated when ``None``
            record: Field map to store

        Returns:
            The key the record was stored under
        """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Record | None:
        """Fetch one record, or ``None`` if absent."""

    @abstractmethod
    def get_all(self, collection: str) -> list[Record]:
        """Fetch every record in a collection."""

    @abstractmethod
    def query_equal(self, collection: str, field: str, value: Any) -> list[Record]:
        """Fetch records whose ``field`` equals ``value``."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a record. Deleting an absent key is not an error."""

    @abstractmethod
    def exists(self, collection: str, doc_id: str) -> bool:
        """Check whether a record is stored under ``doc_id``."""

    def health_check(self) -> bool:
        return True


class InMemoryDocumentStore(DocumentStore):
    """Process-local store for tests and throwaway development runs."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Record]] = {}

    def _collection(self, name: str) -> dict[str, Record]:
        return self._collections.setdefault(name, {})

    def save(self, collection: str, doc_id: str | None, record: Record) -> str:
        doc_id = doc_id or new_document_id()
        self._collection(collection)[doc_id] = {**copy.deepcopy(record), "id": doc_id}
        return doc_id

    def get(self, collection: str, doc_id: str) -> Record | None:
        record = self._collection(collection).get(doc_id)
        return copy.deepcopy(record) if record is not None else None

    def get_all(self, collection: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self._collection(collection).values()]

    def query_equal(self, collection: str, field: str, value: Any) -> list[Record]:
        return [
            copy.deepcopy(r)
            for r in self._collection(collection).values()
            if r.get(field) == value
        ]

    def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    def exists(self, collection: str, doc_id: str) -> bool:
        return doc_id in self._collection(collection)

    def clear(self) -> None:
        self._collections.clear()


class DocumentTable(SQLModel, table=True):
    """One stored record, keyed by (collection, id)."""

    __tablename__ = "documents"

    collection: str = Field(primary_key=True, max_length=64)
    id: str = Field(primary_key=True, max_length=128)
    data: dict = Field(default_factory=dict, sa_column=sa.Column(sa.JSON, nullable=False))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SqlDocumentStore(DocumentStore):
    """Document store persisted as JSON rows in a single SQL table."""

    def __init__(self, db: DbSessionService) -> None:
        self._db = db

    @contextmanager
    def _session(self, operation: str, collection: str) -> Iterator[Session]:
        try:
            with self._db.session_scope() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error(f"Document store {operation} on '{collection}' failed: {exc}")
            raise StoreError(f"Failed to {operation} documents in {collection}") from exc

    def save(self, collection: str, doc_id: str | None, record: Record) -> str:
        doc_id = doc_id or new_document_id()
        data = {**record, "id": doc_id}

        with self._session("save", collection) as session:
            row = session.get(DocumentTable, (collection, doc_id))
            if row is None:
                row = DocumentTable(collection=collection, id=doc_id, data=data)
            else:
                row.data = data
                row.updated_at = datetime.now(UTC)
            session.add(row)

        logger.debug(f"Saved document {collection}/{doc_id}")
        return doc_id

    def get(self, collection: str, doc_id: str) -> Record | None:
        with self._session("get", collection) as session:
            row = session.get(DocumentTable, (collection, doc_id))
            return dict(row.data) if row else None

    def get_all(self, collection: str) -> list[Record]:
        with self._session("list", collection) as session:
            rows = session.exec(
                select(DocumentTable).where(DocumentTable.collection == collection)
            )
            return [dict(row.data) for row in rows]

    def query_equal(self, collection: str, field: str, value: Any) -> list[Record]:
        # JSON path comparisons differ between backends; compare after loading
        return [r for r in self.get_all(collection) if r.get(field) == value]

    def delete(self, collection: str, doc_id: str) -> None:
        with self._session("delete", collection) as session:
            row = session.get(DocumentTable, (collection, doc_id))
            if row is not None:
                session.delete(row)

    def exists(self, collection: str, doc_id: str) -> bool:
        with self._session("get", collection) as session:
            return session.get(DocumentTable, (collection, doc_id)) is not None

    def health_check(self) -> bool:
        return self._db.health_check()
