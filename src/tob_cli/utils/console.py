"""Console utility functions for formatting and output."""

import click
from typing import Optional, Any

from colorama import Fore, Style, init
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

init(autoreset=True)


# Status symbols for consistent iconography
STATUS_SYMBOLS = {
    'gear': '⚙️',
    'info': '💡',
    'warning': '⚠️',
    'error': '❌',
    'check': '✅',
    'preview': '👀',
}

_console = None


def _get_console() -> Optional[Any]:
    """Get the shared Rich console instance."""
    global _console
    if _console is None:
        try:
            _console = Console(highlight=False)
        except Exception:
            return None
    return _console


def _rich_echo(message: str, color: str = "white", style: str = None, bold: bool = False, symbol: str = None):
    """Echo message with Rich formatting or colorama fallback."""
    if style is not None:
        color = style

    if symbol and symbol in STATUS_SYMBOLS:
        message = f"{STATUS_SYMBOLS[symbol]} {message}"

    console = _get_console()
    if console:
        try:
            style_str = f"bold {color}" if bold else color
            console.print(message, style=style_str, markup=False)
            return
        except Exception:
            pass

    color_map = {
        'red': Fore.RED,
        'green': Fore.GREEN,
        'yellow': Fore.YELLOW,
        'blue': Fore.BLUE,
        'cyan': Fore.CYAN,
        'white': Fore.WHITE,
        'magenta': Fore.MAGENTA,
        'dim': Fore.WHITE,
    }
    color_code = color_map.get(color, Fore.WHITE)
    style_code = Style.BRIGHT if bold else ""
    click.echo(f"{color_code}{style_code}{message}{Style.RESET_ALL}")


def _rich_success(message: str, symbol: str = None):
    """Display success message with green color and bold styling."""
    _rich_echo(message, color="green", symbol=symbol, bold=True)


def _rich_error(message: str, symbol: str = None):
    """Display error message with red color."""
    _rich_echo(message, color="red", symbol=symbol)


def _rich_warning(message: str, symbol: str = None):
    """Display warning message with yellow color."""
    _rich_echo(message, color="yellow", symbol=symbol)


def _rich_info(message: str, symbol: str = None):
    """Display info message with blue color."""
    _rich_echo(message, color="blue", symbol=symbol)


def _rich_panel(content: str, title: str = None, style: str = "cyan"):
    """Display content in a Rich panel with fallback."""
    console = _get_console()
    if console:
        try:
            console.print(Panel(content, title=title, border_style=style))
            return
        except Exception:
            pass

    if title:
        click.echo(f"\n--- {title} ---")
    click.echo(content)
    if title:
        click.echo("-" * (len(title) + 8))


def _create_templates_table(rows: list, title: str = "Templates") -> Optional[Any]:
    """Create a Rich table of (path, detail) rows."""
    try:
        table = Table(title=f"📋 {title}", show_header=True, header_style="bold cyan")
        table.add_column("Template", style="bold white")
        table.add_column("Details", style="white")

        for row in rows:
            if isinstance(row, (list, tuple)) and len(row) >= 2:
                table.add_row(str(row[0]), str(row[1]))
            else:
                table.add_row(str(row), "")

        return table
    except Exception:
        return None
