"""
mdot: CLI entrypoint.

Usage:
    mdot --help
    mdot check
    mdot show --format json
    mdot --config ./main.yaml check
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List

import click

from mdot import __version__
from mdot.diagnostics import DiagnosticReporter, ManifestError
from mdot.loader import ConfigError, config_root, find_config_file, load_config
from mdot.logging_config import setup_logging
from mdot.model import Package
from mdot.normalizer import normalize_manifest
from mdot.report import analyze_packages
from mdot.serialization import packages_to_json, packages_to_yaml

logger = logging.getLogger("mdot")


def _load_packages(config_path: Path | None) -> List[Package]:
    """Load and normalize the manifest; exit 1 on the first fatal issue."""
    try:
        tree = load_config(config_path)
        return normalize_manifest(tree, DiagnosticReporter())
    except (ConfigError, ManifestError) as e:
        logger.error("%s", e)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="mdot")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to the manifest (default: main.yaml in the config root).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """mdot: dotfile and package manifest tool."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("MDOT_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("MDOT_LOG_FILE"),
        log_file_level=os.environ.get("MDOT_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the manifest and summarize its packages."""
    packages = _load_packages(ctx.obj.get("config_path"))

    for package in packages:
        state = "" if package.enabled is not False else " (disabled)"
        click.echo(
            f"{package.name}{state}: {len(package.links)} link(s), "
            f"{len(package.excludes)} exclude(s), {len(package.templates)} template(s)"
        )

    report = analyze_packages(packages)
    for warning in report.warnings:
        logger.warning("%s", warning)

    click.secho(f"ok: {report.total_packages} package(s), {report.total_links} link(s)", fg="green")


@cli.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Output format.",
)
@click.pass_context
def show(ctx: click.Context, fmt: str) -> None:
    """Print the normalized packages."""
    packages = _load_packages(ctx.obj.get("config_path"))
    if fmt == "json":
        click.echo(packages_to_json(packages))
    else:
        click.echo(packages_to_yaml(packages), nl=False)


@cli.command()
@click.pass_context
def where(ctx: click.Context) -> None:
    """Show where the manifest is looked up."""
    root = config_root()
    found = ctx.obj.get("config_path") or find_config_file(root)
    click.echo(f"config root: {root}")
    click.echo(f"manifest:    {found if found else '(none)'}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
