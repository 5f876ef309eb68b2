# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application validating interface declarations in a source tree."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from ..catalog import ClassCatalog
from ..config import InterfaceConfig, load_config
from ..errors import ConfigError
from ..hosts import SourceTreeHost
from ..logging import info, section
from ..orchestrator import Interfaces, run_startup_validation

LOGGER = logging.getLogger("ifacecheck")

app = typer.Typer(
    name="ifacecheck",
    help="Validate script interface declarations.",
    no_args_is_help=True,
    add_completion=False,
)


def _ensure_verbose_logger() -> None:
    """Stream engine debug messages to stderr."""

    if getattr(LOGGER, "_ifacecheck_verbose_configured", False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.propagate = False
    setattr(LOGGER, "_ifacecheck_verbose_configured", True)


def _load(root: Path, config_file: Path | None) -> InterfaceConfig:
    try:
        return load_config(root.resolve(), config_file=config_file)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("validate")
def validate_command(
    root: Path = typer.Argument(Path("."), help="Project root to scan."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Explicit configuration file."),
    color: bool = typer.Option(True, "--color/--no-color", help="Colourise output."),
    emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Prefix messages with emoji."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine diagnostics to stderr."),
) -> None:
    """Check that every script implements the interfaces it declares."""

    if verbose:
        _ensure_verbose_logger()
    config = _load(root, config_file)
    host = SourceTreeHost(config.project_root, config=config, editor=True)
    section("Interface validation", use_color=color)
    run_startup_validation(Interfaces(host, config), use_emoji=emoji, use_color=color)


@app.command("classes")
def classes_command(
    root: Path = typer.Argument(Path("."), help="Project root to scan."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Explicit configuration file."),
    emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Prefix messages with emoji."),
) -> None:
    """List the globally registered classes of a project."""

    config = _load(root, config_file)
    catalog = ClassCatalog.from_host(SourceTreeHost(config.project_root, config=config))
    if not len(catalog):
        info("No registered classes found", use_emoji=emoji)
        return
    for entry in catalog:
        typer.echo(f"{entry.class_name}\t{entry.path}")


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
