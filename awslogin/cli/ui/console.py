"""
awslogin/cli/ui/console.py - Rich console utilities

Functions for consistent console output. Only the orchestrator and the CLI
print; drivers log.
"""

from __future__ import annotations

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from awslogin.cli.i18n import t

# Limit botocore noise
logging.getLogger("botocore").setLevel(logging.WARNING)


def get_console() -> Console:
    """Create the Rich console used for all user-facing output."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# Global console instance
console = get_console()


def get_logger(name: str = "awslogin", level: int = logging.DEBUG) -> logging.Logger:
    """Attach a RichHandler to a logger (used by --verbose).

    Args:
        name: logger name
        level: level set on the logger

    Returns:
        logging.Logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


# =============================================================================
# Standard output styles
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"

INDENT = "   "


def print_success(message: str) -> None:
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_hint(message: str) -> None:
    console.print(f"{INDENT}[dim]{escape(message)}[/dim]")


def print_header(title: str) -> None:
    """Section header.

    Args:
        title: header text
    """
    console.print()
    console.print(f"[bold underline cyan]{escape(title)}[/bold underline cyan]")
    console.print()


def print_identity(identity) -> None:
    """Show the caller identity a profile now resolves to.

    Args:
        identity: awslogin.core.auth.types.Identity or None
    """
    if identity is None:
        return
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="dim")
    table.add_column()
    table.add_row(t("login.identity_account"), identity.account)
    table.add_row(t("login.identity_arn"), identity.arn)
    if identity.user_id:
        table.add_row(t("login.identity_user_id"), identity.user_id)
    console.print(table)


def print_table(title: str, columns: list[str], rows: list[list[str]]) -> None:
    table = Table(title=title, title_style="bold", header_style="bold cyan")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*[escape(str(c)) for c in row])
    console.print(table)
