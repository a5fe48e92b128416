# media_gallery/utils/router_helpers.py
"""
Decorators and path validators shared by the routers, so every endpoint
stays a thin adapter over a service.
"""

from functools import wraps
from typing import Callable, Optional

from fastapi import HTTPException

from ..enums import LoggerName, LogSource, MediaType
from ..exceptions import NotFoundError, ValidationFailureError
from ..services.logger import get_service_logger

logger = get_service_logger(LoggerName.ROUTER, LogSource.API)


def handle_exceptions(operation_name: str):
    """
    Map exceptions escaping an endpoint onto HTTP errors.

    ``HTTPException`` passes through untouched, ``ValidationFailureError``
    becomes 400, ``NotFoundError`` 404 and anything else is logged and
    reported as 500 "Failed to <operation_name>".

    Usage:
        @router.get("/gallery")
        @handle_exceptions("get gallery")
        async def get_gallery(...): ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def endpoint(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ValidationFailureError as e:
                raise HTTPException(status_code=400, detail=e.message) from e
            except NotFoundError as e:
                raise HTTPException(status_code=404, detail=e.message) from e
            except Exception as e:
                logger.error(f"Unhandled error during {operation_name}", exception=e)
                raise HTTPException(
                    status_code=500, detail=f"Failed to {operation_name}"
                ) from e

        return endpoint

    return decorator


def validate_media_type(media_type: str) -> MediaType:
    """``{media_type}`` path segment to ``MediaType``; 400 for anything else."""
    try:
        return MediaType(media_type.lower())
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid media type '{media_type}'. Must be 'image' or 'video'",
        ) from e


def require_entity(entity: Optional[object], entity_name: str):
    """404 when the read model does not know ``entity``."""
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{entity_name.capitalize()} not found")
    return entity
