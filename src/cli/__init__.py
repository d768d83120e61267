"""Main CLI application module."""

import typer
from dotenv import load_dotenv

# config.yaml is resolved when the runtime context is first imported
load_dotenv()

from .market_commands import market_app  # noqa: E402
from .user_commands import users_app  # noqa: E402

app = typer.Typer(
    help="🚗 Auto Marketplace CLI - run the API and inspect marketplace data",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(market_app, name="market")
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
