"""Command-line interface for circulation.

Built with Typer for commands and Rich for output. Commands work on the
SQLite catalog store; loans are held in memory by a running process and
are therefore not exposed here.
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .catalog.sqlite import SqlCatalogRepository, get_db
from .config import configure_logging, get_config
from .errors import CirculationError, ValidationError
from .lending.manager import LendingManager
from .lending.models import LoanPolicy
from .notify.notifier import ChangeNotifier
from .notify.subscribers import EmailNotificationSubscriber, InventoryLogSubscriber
from .validation.service import CatalogValidationService

app = typer.Typer(
    name="circulation",
    help="Validate catalog items and track their availability.",
    no_args_is_help=True,
)

console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def _repository() -> SqlCatalogRepository:
    config = get_config()
    return SqlCatalogRepository(get_db(str(config.db_path)))


def _manager() -> LendingManager:
    """Lending manager wired with the configured subscribers."""
    config = get_config()
    notifier = ChangeNotifier()
    notifier.subscribe(InventoryLogSubscriber())
    if config.notify_email:
        notifier.subscribe(EmailNotificationSubscriber(config.notify_email))
    return LendingManager(
        repository=_repository(),
        notifier=notifier,
        policy=LoanPolicy.from_config(config),
    )


@app.callback()
def main() -> None:
    """Check the configuration and set up logging before any command runs."""
    config = get_config()
    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)
    configure_logging(config.log_level)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def version() -> None:
    """Show the version."""
    console.print(f"circulation {__version__}")


@app.command()
def validate(
    title: str = typer.Argument(..., help="Title to check"),
    author: str = typer.Argument(..., help="Author to check"),
) -> None:
    """Check a title and author without saving anything."""
    service = CatalogValidationService(_repository())
    result = service.validate_basic_fields(title, author)
    if not result.is_valid:
        print_error(result.message)
        raise typer.Exit(1)
    print_success(result.message)


@app.command()
def add(
    title: str = typer.Option(..., "--title", "-t", help="Item title"),
    author: str = typer.Option(..., "--author", "-a", help="Item author"),
    category: str = typer.Option("Fiction", "--category", "-c", help="Fiction or NonFiction"),
    medium: str = typer.Option("Physical", "--medium", "-m", help="Physical or Digital"),
) -> None:
    """Validate and add a catalog item."""
    service = CatalogValidationService(_repository())
    try:
        item = service.validate_and_create(title, author, category, medium)
    except ValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Added #{item.id}: {item.title} by {item.author}")


@app.command("list")
def list_items() -> None:
    """List catalog items."""
    items = _repository().find_all()
    if not items:
        console.print("[dim]No catalog items.[/dim]")
        return

    table = Table(title="Catalog", show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Category")
    table.add_column("Medium")
    table.add_column("Availability", style="yellow")
    for item in items:
        table.add_row(
            str(item.id),
            item.title,
            item.author,
            item.category.value,
            item.medium.value,
            item.availability.value,
        )
    console.print(table)


@app.command()
def show(item_id: int = typer.Argument(..., help="Catalog item ID")) -> None:
    """Show an item's description."""
    try:
        description = _manager().describe(item_id)
    except CirculationError as e:
        print_error(str(e))
        raise typer.Exit(1)
    body = description.description
    if description.additional_info:
        body += f"\n{description.additional_info}"
    console.print(Panel(escape(body), title=f"#{item_id} {description.availability.value}"))


@app.command("set-availability")
def set_availability(
    item_id: int = typer.Argument(..., help="Catalog item ID"),
    availability: str = typer.Argument(..., help="Available or Loaned"),
) -> None:
    """Change an item's availability and notify subscribers."""
    try:
        item = _manager().update_availability(item_id, availability)
    except CirculationError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"#{item.id} is now {item.availability.value}")


@app.command()
def delete(
    item_id: int = typer.Argument(..., help="Catalog item ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a catalog item."""
    repository = _repository()
    item = repository.find_by_id(item_id)
    if item is None:
        print_error(f"Catalog item not found with ID: {item_id}")
        raise typer.Exit(1)
    if not yes and not typer.confirm(f"Delete '{item.title}'?", default=False):
        console.print("[dim]Cancelled.[/dim]")
        raise typer.Exit(0)
    repository.delete_by_id(item_id)
    print_success(f"Deleted #{item_id}")


@app.command()
def validators() -> None:
    """Describe the validators and validation chains."""
    info = CatalogValidationService(_repository()).validator_info()
    table = Table(title="Validators", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Validates")
    table.add_column("Rules")
    for entry in info["validators"]:
        table.add_row(entry["name"], entry["validates"], entry["rules"])
    console.print(table)
    for name, chain in info["chains"].items():
        console.print(f"[bold]{name}[/bold]: {chain}")


if __name__ == "__main__":
    app()
