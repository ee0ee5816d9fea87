"""HTTP API for seclog.

Thin FastAPI glue over SecurityLogService: routes, response schemas and
structured error responses.
"""

from seclog.api.server import create_api_app

__all__ = ["create_api_app"]
