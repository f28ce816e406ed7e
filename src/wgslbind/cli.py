"""
wgslbind command line interface.

Commands:
- build: Regenerate bindings when the shader sources changed
- deps: Show the resolved dependency order of every entry point
- hash: Print the content fingerprint of the build input
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from wgslbind._version import get_version
from wgslbind.core.bindgen import WgslBindgen
from wgslbind.core.dependency_tree import DependencyTree
from wgslbind.core.errors import WgslBindError
from wgslbind.core.fingerprint import compute_fingerprint
from wgslbind.core.options import DEFAULT_OPTIONS_FILE, BindgenOptions, load_options

app = typer.Typer(
    help="wgslbind - WGSL shader dependency resolution and binding generation",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help=f"Path to the options file (default: {DEFAULT_OPTIONS_FILE})"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", help="Enable debug logging")]


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"wgslbind {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and environment information",
        ),
    ] = None,
) -> None:
    """wgslbind CLI main callback for global options."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _load(config: Path) -> BindgenOptions:
    try:
        return load_options(config)
    except WgslBindError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command("build")
def build_command(
    config: ConfigOption = Path(DEFAULT_OPTIONS_FILE),
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Regenerate even if the sources are unchanged")
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Generate bindings for the configured entry points."""
    _configure_logging(verbose)
    options = _load(config)

    try:
        written = WgslBindgen(options).generate(force=force)
    except WgslBindError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1) from e

    if written:
        typer.echo(f"Wrote {options.output}")
    else:
        typer.echo(f"{options.output} is up to date")


@app.command("deps")
def deps_command(
    config: ConfigOption = Path(DEFAULT_OPTIONS_FILE),
    verbose: VerboseOption = False,
) -> None:
    """Show each entry point's dependencies in composition order."""
    _configure_logging(verbose)
    options = _load(config)

    try:
        tree = DependencyTree.build(
            options.entry_points,
            options.search_roots(),
            detect_ambiguous=options.detect_ambiguous_imports,
        )
    except WgslBindError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1) from e

    table = Table(title="Entry point dependencies")
    table.add_column("Entry point", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Dependency")
    table.add_column("Module name", style="dim")

    for result in tree.entry_results():
        if not result.dependencies:
            table.add_row(str(result.module_path), "-", "(none)", "")
            continue
        for index, dependency in enumerate(result.dependencies, start=1):
            table.add_row(
                str(result.module_path) if index == 1 else "",
                str(index),
                str(dependency.module_path),
                dependency.module_name or "",
            )

    console.print(table)


@app.command("hash")
def hash_command(
    config: ConfigOption = Path(DEFAULT_OPTIONS_FILE),
    verbose: VerboseOption = False,
) -> None:
    """Print the content fingerprint of the current build input."""
    _configure_logging(verbose)
    options = _load(config)

    try:
        tree = DependencyTree.build(
            options.entry_points,
            options.search_roots(),
            detect_ambiguous=options.detect_ambiguous_imports,
        )
    except WgslBindError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(compute_fingerprint(options, tree.all_files(), get_version()))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
