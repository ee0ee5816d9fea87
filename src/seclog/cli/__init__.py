"""Command-line interface for seclog.

Provides commands for reading active logs and archives, running archival
and pruning, serving the API, and managing configuration.
"""

from .main import cli, main

__all__ = ["cli", "main"]
