"""CLI for creating and inspecting configuration files.

Only the base configuration is interpreted; the service section is carried
as plain data.
"""

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from service_config.errors import ConfigError
from service_config.manager import ConfigManager
from service_config.writer import config_to_dict

app = typer.Typer(help="Create, validate and inspect service configuration files")
console = Console()


def _load(path: Path, env_prefix: Optional[str]) -> ConfigManager:
    manager = ConfigManager(apply_logging=False)
    if env_prefix:
        manager.set_env_prefix(env_prefix)
    manager.init_service_config({}, path)
    return manager


def _flatten(data: dict[str, Any], parent: str = "") -> list[tuple[str, Any]]:
    rows: list[tuple[str, Any]] = []
    for key, value in data.items():
        name = f"{parent}.{key}" if parent else key
        if isinstance(value, dict) and value:
            rows.extend(_flatten(value, name))
        else:
            rows.append((name, value))
    return rows


@app.command(name="init")
def init_command(
    path: Path = typer.Argument(..., help="File to create, or a directory for config.yaml"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a default configuration file with generated identifiers."""
    if path.is_file() and not force:
        console.print(
            f"[red]Error:[/red] {escape(str(path))} already exists (use --force to overwrite)"
        )
        raise typer.Exit(code=1)

    try:
        written = ConfigManager(apply_logging=False).default_config({}, path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    console.print(f"[green]Wrote[/green] {escape(str(written))}")


@app.command(name="validate")
def validate_command(
    path: Path = typer.Argument(..., help="Configuration file"),
    env_prefix: Optional[str] = typer.Option(None, "--env-prefix", help="Environment prefix"),
) -> None:
    """Load a configuration file and report whether it is valid."""
    if not path.exists():
        console.print(f"[red]Error:[/red] {escape(str(path))} does not exist")
        raise typer.Exit(code=1)

    try:
        _load(path, env_prefix)
    except ConfigError as e:
        console.print(f"[red]Invalid:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    console.print(f"[green]Valid:[/green] {escape(str(path))}")


@app.command(name="show")
def show_command(
    path: Path = typer.Argument(..., help="Configuration file"),
    env_prefix: Optional[str] = typer.Option(None, "--env-prefix", help="Environment prefix"),
) -> None:
    """Show the effective configuration with secrets masked."""
    if not path.exists():
        console.print(f"[red]Error:[/red] {escape(str(path))} does not exist")
        raise typer.Exit(code=1)

    try:
        manager = _load(path, env_prefix)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    table = Table(title=str(path))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in _flatten(config_to_dict(manager.get_secure_copy())):
        table.add_row(key, "" if value is None else str(value))
    console.print(table)


if __name__ == "__main__":
    app()
