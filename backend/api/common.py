from datetime import datetime

from fastapi import HTTPException, status

from services.errors import Conflict, InvalidState, NotFound, ProductivityError
from utils.datetime_utils import utcnow


def get_now() -> datetime:
    """Request-time clock; overridden in tests via app.dependency_overrides."""
    return utcnow()


def to_http_error(exc: ProductivityError) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, Conflict):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, InvalidState):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
