"""Shared utilities for CLI commands."""

import typer
from rich.console import Console

from src.automarket.core.services.database.db_session import DbSessionService
from src.automarket.core.storage.document_store import DocumentStore, SqlDocumentStore
from src.automarket.entities.car import CarRepository
from src.automarket.entities.user import UserRepository
from src.automarket.runtime.context import get_config

console = Console()


def open_store() -> DocumentStore:
    """Open the configured SQL document store; the in-memory backend has nothing to inspect."""
    config = get_config()
    if config.store.backend != "sql":
        console.print(
            f"[red]❌ Store backend '{config.store.backend}' is process-local; "
            "CLI commands need the 'sql' backend[/red]"
        )
        raise typer.Exit(code=1)

    db = DbSessionService()
    db.create_all()
    return SqlDocumentStore(db)


def user_repository(store: DocumentStore) -> UserRepository:
    return UserRepository(store, get_config().store.users_collection)


def car_repository(store: DocumentStore) -> CarRepository:
    return CarRepository(store, get_config().store.cars_collection)
