"""Command-line interface for msipack."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ..config import load_packager
from ..exceptions import (
    ConfigError,
    InvalidVersionFormat,
    PackagerError,
    ToolchainError,
)
from ..msi_version import normalize
from ..package_name import build_package_name
from ._helpers import configure_logging, console, print_error, print_success

app = typer.Typer(help="Build Windows Installer packages with the WiX toolset")

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to config file (msipack.toml or pyproject.toml)",
    ),
]

IterationOption = Annotated[
    int,
    typer.Option(..., "--iteration", "-i", min=0, help="Build iteration"),
]

VerboseOption = Annotated[
    bool,
    typer.Option(..., "--verbose", "-v", help="Show debug output"),
]


@app.command()
def version(
    build_version: Annotated[str, typer.Argument(..., help="Upstream build version")],
    iteration: IterationOption = 1,
) -> None:
    """Show the MSI and display versions of a build version."""
    try:
        result = normalize(build_version, iteration)
    except InvalidVersionFormat as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    table = Table(title=f"Version {build_version}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("MSI version", result.msi_version)
    table.add_row("Display version", result.display_version)
    console.print(table)


@app.command()
def name(
    project: Annotated[str, typer.Argument(..., help="Project name")],
    build_version: Annotated[str, typer.Argument(..., help="Upstream build version")],
    iteration: IterationOption = 1,
) -> None:
    """Show the package file name for a build."""
    try:
        display_version = normalize(build_version, iteration).display_version
    except InvalidVersionFormat as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    console.print(build_package_name(project, display_version, iteration))


@app.command()
def render(
    staging: Annotated[
        Path | None,
        typer.Option(
            ...,
            "--staging",
            "-s",
            help="Staging directory (default: staging_dir from config)",
        ),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Write the WiX localization, parameters and source files."""
    configure_logging(verbose)
    try:
        packager = load_packager(config)
        if staging is not None:
            packager.staging_dir = staging
        packager.staging_dir.mkdir(parents=True, exist_ok=True)

        paths = packager.render()

        print_success(f"Rendered WiX files for {packager.project.name}")
        for path in paths:
            console.print(f"[dim]  • {path}[/dim]")

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except PackagerError as e:
        print_error(f"Render error: {e}")
        raise typer.Exit(1) from e
    except OSError as e:
        print_error(f"Could not write file: {e}")
        raise typer.Exit(1) from e


@app.command()
def build(
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Build the MSI package."""
    configure_logging(verbose)
    try:
        packager = load_packager(config)
        packager.staging_dir.mkdir(parents=True, exist_ok=True)

        package = packager.run()

        print_success(f"Built {packager.package_name}")
        console.print(f"[dim]Package written to: {package}[/dim]")

    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ToolchainError as e:
        print_error(f"Toolchain error: {e}")
        raise typer.Exit(1) from e
    except PackagerError as e:
        print_error(f"Build error: {e}")
        raise typer.Exit(1) from e
    except OSError as e:
        print_error(f"Could not write file: {e}")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
