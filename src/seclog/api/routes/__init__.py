"""API route modules.

Route organization:
- security_logs: Active log pages, monthly archives, manual archival, statistics
"""

from . import security_logs

__all__ = ["security_logs"]
