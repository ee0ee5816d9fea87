"""Shared utilities for seclog.

Import directly from submodules:
    from seclog.utils.file_helpers import format_size
"""

__all__: list[str] = []
