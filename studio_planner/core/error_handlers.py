from fastapi import Request, status
from fastapi.responses import JSONResponse

from studio_planner.core.exceptions import (
    BusinessRuleError,
    CollaboratorError,
    ConflictError,
    DomainError,
    DuplicateExecutionError,
    ImmutableEntityError,
    NotFoundError,
    ValidationError,
)
from studio_planner.core.logging import get_logger
from studio_planner.schemas.base import APIError, APIResponse, ResponseMeta

logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConflictError: status.HTTP_409_CONFLICT,
    DuplicateExecutionError: status.HTTP_409_CONFLICT,
    ImmutableEntityError: status.HTTP_405_METHOD_NOT_ALLOWED,
    CollaboratorError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: DomainError) -> int:
    """Most specific mapped status along the exception's class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    request_id = getattr(request.state, "request_id", None)

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("domain_error", code=exc.code, status_code=status_code, error=exc.message)
    else:
        logger.info("domain_error", code=exc.code, status_code=status_code)

    body = APIResponse[None](
        meta=ResponseMeta(request_id=request_id),
        errors=[APIError(code=exc.code, message=exc.message, details=exc.details)],
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
