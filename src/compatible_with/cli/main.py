"""CLI entry point for compatible-with.

Invoked as::

    compatible-with [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m compatible_with.cli.main

Commands
--------
- version  — Show detailed version information
- probe    — Show which shape a stored document matches
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Target resolution
# ---------------------------------------------------------------------------


def _resolve_target(target: str) -> object:
    """Import the object named by a ``module:attribute`` reference.

    Parameters
    ----------
    target:
        Reference such as ``"myapp.models:Compatible_Settings"``.  The
        attribute part may be dotted.

    Returns
    -------
    object
        The resolved attribute.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        console.print(f"[red]Target must look like 'module:attribute', got {target!r}[/red]")
        sys.exit(1)
    try:
        obj: object = importlib.import_module(module_name)
        for part in attr.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        console.print(f"[red]Cannot resolve {target!r}:[/red] {escape(str(exc))}")
        sys.exit(1)
    return obj


def _guess_format(path: Path) -> str:
    return "yaml" if path.suffix.lower() in (".yaml", ".yml") else "json"


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option()
def cli() -> None:
    """Read old data shapes without version tags."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    import pydantic

    from compatible_with import __version__

    console.print(f"[bold]compatible-with[/bold] v{__version__}")
    console.print(f"pydantic v{pydantic.VERSION}")


# ---------------------------------------------------------------------------
# probe
# ---------------------------------------------------------------------------


@cli.command(name="probe")
@click.argument("target")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "fmt",
    default=None,
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    help="Document format. Guessed from the file extension when omitted.",
)
@click.option("--json-output", is_flag=True, help="Output the normalized document only.")
def probe_command(
    target: str,
    input_file: str,
    fmt: str | None,
    json_output: bool,
) -> None:
    """Decode INPUT_FILE through TARGET and report the shape it matched.

    TARGET is a ``module:attribute`` reference to a parametrized
    ``Compatible`` class or to a type decorated with ``@upgrades_from``.
    """
    from compatible_with.adapter.alt import StructuralMismatch
    from compatible_with.conversion import MissingConversionError
    from compatible_with.conversion.registry import type_name
    from compatible_with.serialization import CompatibleSerializer

    resolved = _resolve_target(target)
    try:
        serializer = CompatibleSerializer(resolved)
    except TypeError as exc:
        console.print(f"[red]Invalid target:[/red] {escape(str(exc))}")
        sys.exit(1)

    path = Path(input_file)
    fmt = (fmt or _guess_format(path)).lower()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Failed to read input:[/red] {escape(str(exc))}")
        sys.exit(1)

    try:
        alt = serializer.probe(raw, fmt)  # type: ignore[arg-type]
        current = serializer.adapter(alt).into_current()
    except StructuralMismatch as exc:
        console.print(f"[red]Decode failed:[/red] {escape(str(exc))}")
        sys.exit(1)
    except MissingConversionError as exc:
        console.print(f"[red]Conversion failed:[/red] {escape(str(exc))}")
        sys.exit(1)
    except yaml.YAMLError as exc:
        console.print(f"[red]Failed to parse input:[/red] {escape(str(exc))}")
        sys.exit(1)

    if json_output:
        click.echo(serializer.to_json(current))
        return

    document = serializer.serialize(current, fmt)  # type: ignore[arg-type]

    table = Table(title=f"Probe: {path.name}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Target", escape(type_name(resolved)))
    table.add_row("Old type", escape(type_name(serializer.old_type)))
    table.add_row("Current type", escape(type_name(serializer.current_type)))
    table.add_row("Matched", alt.variant.value)
    table.add_row("Upgraded", "yes" if alt.is_old else "no")
    console.print(table)
    console.print(Syntax(document, fmt, word_wrap=True))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    cli()
