"""Document store abstractions."""

from .document_store import (
    DocumentStore,
    DocumentTable,
    InMemoryDocumentStore,
    SqlDocumentStore,
)

__all__ = ["DocumentStore", "DocumentTable", "InMemoryDocumentStore", "SqlDocumentStore"]
