
import logging
import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from drivers_service.domain.exceptions import ConflictError, DomainError, NotFoundError, ValidationError

log = logging.getLogger("drivers_service.error_handler")
domain_log = structlog.get_logger("drivers.errors")


def status_for(exc: DomainError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError):
    code = status_for(exc)
    domain_log.info("request.rejected", path=request.url.path, status=code,
                    error=exc.__class__.__name__, detail=exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message, "error": exc.__class__.__name__})


async def http_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error", extra={"path": str(request.url)})
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error": str(exc)},
    )
