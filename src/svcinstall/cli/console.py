"""Shared console utilities for CLI commands."""

from rich.console import Console
from rich.markup import escape

from svcinstall.service.base import (
    Completed,
    Generated,
    ManualStep,
    RequiresManualStep,
    ServiceResult,
)

# Shared console instances for all CLI commands
console = Console()
err_console = Console(stderr=True)

DRY_RUN_BANNER = "This is a dry-run, nothing will be written to disk or installed."


def error(msg: str) -> None:
    """Print an error message in red to stderr."""
    err_console.print(f"[red]{escape(msg)}[/red]", soft_wrap=True)


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(msg)}[/green]", soft_wrap=True)


def info(msg: str) -> None:
    """Print an info message in cyan."""
    console.print(f"[cyan]{escape(msg)}[/cyan]", soft_wrap=True)


def plain(text: str) -> None:
    """Print text verbatim: no markup, highlighting or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def print_steps(steps: tuple[ManualStep, ...]) -> None:
    """Print a numbered runbook."""
    for number, step in enumerate(steps, start=1):
        plain(f"\nStep {number}: {step.description}")
        plain(f"\n  {step.command}")


def print_result(result: ServiceResult) -> None:
    """Render a backend result for the operator."""
    if isinstance(result, Generated):
        plain(f"\n{DRY_RUN_BANNER}")
        plain(f"\nPath: {result.path}")
        plain("\nConfiguration:\n")
        plain(result.content)
    elif isinstance(result, RequiresManualStep):
        info(result.message)
        print_steps(result.steps)
        plain("")
    elif isinstance(result, Completed):
        success(result.message)
        for step in result.follow_up:
            plain(step.description)
            plain(f"  {step.command}")
