"""
Application exceptions and error handling.

Defines custom exceptions and error handlers for consistent error responses.
The grading engine itself never raises for bad answers; these errors cover
malformed requests and failures of the service around it.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from .config import settings
from .logging import get_context_logger

logger = get_context_logger(__name__)


# Custom Exceptions

class EngineError(Exception):
    """Base exception for answer engine service errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidRequestError(EngineError):
    """Raised when a request is well-formed JSON but cannot be processed"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


class BlankConfigurationError(EngineError):
    """Raised by strict imports when configured blanks do not match the text"""

    def __init__(self, reports: list[Dict[str, Any]]):
        super().__init__(
            message=f"{len(reports)} question(s) have mismatched blank configuration",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"questions": reports}
        )


class GradingError(EngineError):
    """Raised when answer grading fails"""

    def __init__(self, question_type: str, error: str):
        super().__init__(
            message=f"Failed to grade {question_type} answer: {error}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"question_type": question_type, "error": error}
        )


# Error Response Models

def create_error_response(
    error: Exception,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    include_details: bool = True
) -> JSONResponse:
    """Create standardized error response"""

    error_data = {
        "error": {
            "type": error.__class__.__name__,
            "message": str(error),
        }
    }

    # Add details for engine errors
    if isinstance(error, EngineError) and include_details:
        error_data["error"]["details"] = error.details

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Error occurred: {error}",
        extra_data={
            "error_type": error.__class__.__name__,
            "status_code": status_code,
        },
        exc_info=status_code >= 500
    )

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_data)
    )


# Exception Handlers

async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
    """Handle EngineError exceptions"""
    return create_error_response(exc, exc.status_code)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "type": "HTTPException",
                "message": exc.detail,
            }
        }
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        "Validation error",
        extra_data={"path": request.url.path, "error_count": len(errors)}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "type": "ValidationError",
                "message": "Request validation failed",
                "details": errors
            }
        }
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors"""
    logger.exception(
        "Unexpected error occurred",
        extra_data={"path": request.url.path}
    )

    # Don't expose internal errors in production
    message = str(exc) if settings.DEBUG else "An internal error occurred"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "type": "InternalServerError",
                "message": message,
            }
        }
    )


# Register all error handlers
def register_error_handlers(app):
    """Register error handlers with FastAPI app"""
    app.add_exception_handler(EngineError, engine_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
