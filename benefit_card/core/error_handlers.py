"""Map domain errors and request validation failures to JSON responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from benefit_card.core.errors import BenefitCardError, ErrorCategory
from benefit_card.core.logging_config import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BenefitCardError, benefit_card_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, json_exception_handler)


async def benefit_card_error_handler(request: Request, exc: BenefitCardError) -> JSONResponse:
    logger.warning(
        "Domain error",
        extra={
            "details": {
                "event": "domain_error",
                "status_code": exc.http_status,
                "extra": {"method": request.method, "path": request.url.path, "code": exc.code},
            }
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"], "type": e["type"]}
        for e in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={
            "details": {
                "event": "validation_error",
                "status_code": status.HTTP_400_BAD_REQUEST,
                "extra": {"method": request.method, "path": request.url.path, "fields": [d["field"] for d in details]},
            }
        },
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "details": details,
            }
        },
    )


async def json_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Application error",
        exc_info=exc,
        extra={
            "details": {
                "event": "exception",
                "extra": {"method": request.method, "path": request.url.path, "error": str(exc)},
            }
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "details": {},
            }
        },
    )
