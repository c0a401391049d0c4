from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import aioesphomeapi
import typer
from rich.console import Console

from esplight.config import Settings, get_settings, resolve_config_path
from esplight.errors import (
    EXIT_DEVICE,
    EXIT_TIMEOUT,
    EXIT_USAGE,
    ResolveTimeoutError,
    UsageError,
)
from esplight.models import Outcome, OutcomeStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def exit_usage(exc: UsageError) -> NoReturn:
    logger.error("Usage incorrect: %s", exc)
    raise typer.Exit(EXIT_USAGE) from exc


@contextmanager
def exit_on_usage_error() -> Iterator[None]:
    try:
        yield
    except UsageError as exc:
        exit_usage(exc)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run ``coro`` to completion and map failures to exit statuses."""
    with exit_on_usage_error():
        try:
            return asyncio.run(coro)
        except ResolveTimeoutError as exc:
            logger.error("Timeout: %s", exc)
            raise typer.Exit(EXIT_TIMEOUT) from exc
        except (KeyboardInterrupt, asyncio.CancelledError) as exc:
            logger.error("Cancelled")
            raise typer.Exit(EXIT_TIMEOUT) from exc
        except (aioesphomeapi.APIConnectionError, OSError) as exc:
            logger.error("Device error: %s", exc)
            raise typer.Exit(EXIT_DEVICE) from exc


def print_outcome(console: Console, hostname: str, outcome: Outcome) -> None:
    if outcome.status is OutcomeStatus.APPLIED:
        console.print(f"[green]✓[/green] {hostname}: done")
    elif outcome.status is OutcomeStatus.SKIPPED:
        console.print(f"[yellow]![/yellow] {hostname}: {outcome.reason}, doing nothing")
    else:
        console.print(f"[red]✗[/red] {hostname}: {outcome.reason}")
