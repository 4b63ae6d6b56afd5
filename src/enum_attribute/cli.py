"""
enum-attribute command line.

Commands:
    show TARGET   List the enums declared on ``module.path:ClassName``
    config        Print the effective configuration
"""

from __future__ import annotations

import importlib
import json
import platform
import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from enum_attribute._version import get_version
from enum_attribute.builder import declarations_for
from enum_attribute.config import FIELD_PREFIX_ENV_VAR, configuration
from enum_attribute.document import Document

console = Console()

app = typer.Typer(
    help="Inspect enum attributes declared on record types.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"enum-attribute version {get_version()}")
        typer.echo(f"  Python:   {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """enum-attribute CLI main callback for global options."""
    pass


def _load_record_type(target: str) -> type[Document]:
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        typer.echo(f"Error: expected module.path:ClassName, got {target!r}", err=True)
        raise typer.Exit(code=1)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        typer.echo(f"Error: cannot import {module_name}: {e}", err=True)
        raise typer.Exit(code=1) from e

    record_type = getattr(module, class_name, None)
    if not isinstance(record_type, type) or not issubclass(record_type, Document):
        typer.echo(f"Error: {target} is not a Document subclass", err=True)
        raise typer.Exit(code=1)
    return record_type


@app.command("show")
def show_command(
    target: Annotated[str, typer.Argument(help="Record type as module.path:ClassName")],
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the enums declared on a record type."""
    record_type = _load_record_type(target)
    declarations = declarations_for(record_type)

    if as_json:
        payload = {name: decl.model_dump(mode="json") for name, decl in declarations.items()}
        typer.echo(json.dumps(payload, indent=2))
        return

    if not declarations:
        console.print(f"[yellow]{record_type.__name__} declares no enums[/yellow]")
        return

    table = Table(title=f"{record_type.__name__} enums")
    table.add_column("Enum", style="cyan")
    table.add_column("Field")
    table.add_column("Values")
    table.add_column("Multiple")
    table.add_column("Required")
    table.add_column("Default")

    for decl in declarations.values():
        default = list(decl.default) if decl.multiple else decl.default
        table.add_row(
            decl.name,
            decl.storage_field_name,
            ", ".join(decl.values),
            "yes" if decl.multiple else "no",
            "yes" if decl.required else "no",
            repr(default),
        )
    console.print(table)


@app.command("config")
def config_command() -> None:
    """Print the effective configuration."""
    config = configuration()
    typer.echo(f"field_name_prefix: {config.field_name_prefix!r}")
    typer.echo(f"  (override with {FIELD_PREFIX_ENV_VAR})")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
