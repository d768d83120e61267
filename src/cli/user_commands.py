"""User lookup CLI commands."""

import typer
from rich.table import Table

from src.automarket.core.services.user import UserService
from src.automarket.entities.user import User

from .utils import console, open_store, user_repository

users_app = typer.Typer(help="Look up marketplace accounts")


def _user_table(title: str, users: list[User]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Email", style="blue")
    table.add_column("Name", style="magenta")
    table.add_column("Role", style="green")
    table.add_column("Status", style="yellow")
    for user in users:
        table.add_row(user.id, user.email or "", user.full_name, user.role.value, user.status.value)
    return table


@users_app.command("find")
def find_users(
    email: str | None = typer.Option(None, "--email", "-e", help="Exact email address"),
    name: str | None = typer.Option(None, "--name", "-n", help="First or last name fragment"),
) -> None:
    """Find accounts by email or by name."""
    if not email and not name:
        console.print("[red]❌ Pass --email or --name[/red]")
        raise typer.Exit(code=1)

    service = UserService(user_repository(open_store()))

    if email:
        user = service.find_by_email(email)
        users = [user] if user else []
    else:
        users = service.search_users_by_name(name)

    if not users:
        console.print("[yellow]No matching users[/yellow]")
        return
    console.print(_user_table("Users", users))


@users_app.command("list")
def list_users(
    role: str = typer.Option("seller", "--role", "-r", help="seller or customer"),
) -> None:
    """List active sellers or customers."""
    service = UserService(user_repository(open_store()))

    if role.lower() == "seller":
        users = service.list_active_sellers()
    elif role.lower() == "customer":
        users = service.list_active_customers()
    else:
        console.print(f"[red]❌ Unknown role '{role}'[/red]")
        raise typer.Exit(code=1)

    console.print(_user_table(f"Active {role.lower()}s", users))
    console.print(f"\n[green]Found {len(users)} users[/green]")
