"""Server and listing commands."""

import typer
from rich.table import Table

from src.automarket.core.errors import StoreError
from src.automarket.core.services.car import CarService
from src.automarket.core.services.database.db_session import DbSessionService
from src.automarket.runtime.context import get_config

from .utils import car_repository, console, open_store, user_repository

market_app = typer.Typer(help="Run the API and manage the document store")


@market_app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (defaults to config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Start the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "src.automarket.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,
    )


@market_app.command("init-db")
def init_db() -> None:
    """Create the document table if it does not exist."""
    db = DbSessionService()
    db.create_all()
    if not db.health_check():
        console.print("[red]❌ Database is not reachable[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✅ Document store ready at {get_config().database.url}[/green]")


@market_app.command("stats")
def stats(
    seller: str | None = typer.Option(None, "--seller", "-s", help="Also count this seller's active listings"),
) -> None:
    """Show listing counts by status."""
    store = open_store()
    service = CarService(car_repository(store), user_repository(store))

    try:
        listing_stats = service.listing_stats()
        seller_active = service.count_seller_active(seller) if seller else None
    except StoreError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Listings")
    table.add_column("Status", style="cyan")
    table.add_column("Count", style="green", justify="right")
    for status, count in listing_stats.by_status.items():
        table.add_row(status.value, str(count))
    table.add_row("[bold]TOTAL[/bold]", f"[bold]{listing_stats.total}[/bold]")
    console.print(table)

    if seller_active is not None:
        console.print(f"\nSeller [cyan]{seller}[/cyan] has [green]{seller_active}[/green] active listings")
