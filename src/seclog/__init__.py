"""seclog: security log lifecycle management.

Reads daily security log files, compacts past months into compressed
monthly archives, and serves paginated views over both.
"""

__version__ = "0.1.0"
