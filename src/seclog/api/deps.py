"""Shared dependencies for API routes.

FastAPI convention: deps.py contains reusable request dependencies.
Route modules import dependencies from here rather than reaching into
app.state themselves.

Usage with Annotated:
    from seclog.api.deps import ConfigDep, ServiceDep

    @router.get("/statistics")
    async def get_statistics(service: ServiceDep) -> StatisticsResponse:
        ...
"""

from __future__ import annotations

__all__ = [
    # Dependency functions
    "get_config",
    "get_service",
    # Type aliases for Annotated pattern
    "ConfigDep",
    "ServiceDep",
]

from typing import Annotated, Any, Callable

from fastapi import Depends, HTTPException, Request

from seclog.config import AppConfig
from seclog.engine.service import SecurityLogService


# =============================================================================
# Factory for State Getters
# =============================================================================


def _create_state_getter(
    attr_name: str,
    type_hint: str,
    error_detail: str,
) -> Callable[[Request], Any]:
    """Create a dependency function that retrieves a value from app.state.

    Args:
        attr_name: Attribute name on app.state (e.g., "config", "service").
        type_hint: Type name used in the getter's docstring.
        error_detail: Error message for HTTPException.

    Returns:
        A dependency function compatible with FastAPI's Depends().
    """

    def getter(request: Request) -> Any:
        value = getattr(request.app.state, attr_name, None)
        if value is None:
            raise HTTPException(status_code=503, detail=error_detail)
        return value

    getter.__name__ = f"get_{attr_name}"
    getter.__doc__ = f"Get {type_hint} from app.state.\n\nRaises HTTPException 503 if not available."
    return getter


# =============================================================================
# Dependency Functions (generated via factory)
# =============================================================================

get_config: Callable[[Request], AppConfig] = _create_state_getter(
    "config",
    "AppConfig",
    "Config not available. Server may still be starting.",
)

get_service: Callable[[Request], SecurityLogService] = _create_state_getter(
    "service",
    "SecurityLogService",
    "Security log service not available. Server may still be starting.",
)


# =============================================================================
# Type Aliases for Annotated Pattern
# =============================================================================
# These allow clean route signatures:
#     async def endpoint(service: ServiceDep) -> Response:

ConfigDep = Annotated[AppConfig, Depends(get_config)]
ServiceDep = Annotated[SecurityLogService, Depends(get_service)]
