"""CLI output styling utilities.

Provides consistent styling helpers for CLI output:
- Cyan bold for section headers and labels
- Green for success messages (with checkmark)
- Red for error messages (with cross)
- Dim for neutral/empty state messages
- Level colors for security log records
"""

from __future__ import annotations

__all__ = [
    "style_dim",
    "style_error",
    "style_header",
    "style_label",
    "style_level",
    "style_success",
    "style_warning",
]

import click

_LEVEL_COLORS = {
    "DEBUG": "bright_black",
    "INFO": "blue",
    "NOTICE": "cyan",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def style_header(title: str) -> str:
    """Style a section header with dashes.

    Args:
        title: The header title text.

    Returns:
        Styled string in format "--- Title ---" with cyan bold.

    Example:
        >>> click.echo(style_header("Archive"))
        --- Archive ---
    """
    return click.style(f"--- {title} ---", fg="cyan", bold=True)


def style_label(label: str) -> str:
    """Style a label for list/summary headers.

    Args:
        label: The label text (without colon).

    Returns:
        Styled string with cyan bold and colon suffix.

    Example:
        >>> click.echo(style_label("Archives") + f" {count}")
        Archives: 5
    """
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Style a success message with checkmark.

    Example:
        >>> click.echo(style_success("Configuration saved"))
        ✓ Configuration saved
    """
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Style an error message with cross mark.

    Example:
        >>> click.echo(style_error("File not found"), err=True)
        ✗ File not found
    """
    return click.style(f"✗ {message}", fg="red")


def style_dim(message: str) -> str:
    """Style a neutral/empty state message as dim."""
    return click.style(message, dim=True)


def style_warning(message: str) -> str:
    """Style a warning message with yellow color.

    Example:
        >>> click.echo(style_warning("3 files could not be archived"))
        Warning: 3 files could not be archived
    """
    return click.style(f"Warning: {message}", fg="yellow", bold=True)


def style_level(level: str) -> str:
    """Color a log level name; unknown levels are left plain."""
    color = _LEVEL_COLORS.get(level.upper())
    if color is None:
        return level
    return click.style(level, fg=color, bold=level.upper() == "CRITICAL")
