"""
Error handling utilities following FastAPI best practices
"""

import traceback
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from blueprint.core.config import config
from blueprint.core.logger import logger

VALIDATION_PROBLEM_TYPE = "https://tools.ietf.org/html/rfc9110#section-15.5.1"
VALIDATION_PROBLEM_TITLE = "One or more validation errors occurred."


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationProblem(ErrorResponse):
    """Business-rule failure reported in the same shape as request validation errors"""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__(VALIDATION_PROBLEM_TITLE, status_code=400, details={"fields": list(errors.keys())})


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    error: str
    details: Optional[dict] = None


class ValidationProblemModel(BaseModel):
    """Pydantic model for validation problem responses"""
    type: str
    title: str
    status: int
    errors: Dict[str, List[str]]


def _field_name(loc: tuple) -> str:
    """Drop the 'body'/'query'/'path' prefix from a validation error location"""
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts)


def group_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Group pydantic error entries by the request field they refer to"""
    grouped: Dict[str, List[str]] = {}
    for err in errors:
        grouped.setdefault(_field_name(tuple(err.get("loc", ()))), []).append(err.get("msg", "Invalid value"))
    return grouped


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for custom ErrorResponse exceptions"""
    metadata = {
        "event": "error_response",
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
        **exc.details,
    }

    if config.is_development:
        metadata["traceback"] = traceback.format_exc()

    logger.error(f"Error: {exc.message}", metadata=metadata)

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details}
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def validation_problem_response(errors: Dict[str, List[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "type": VALIDATION_PROBLEM_TYPE,
            "title": VALIDATION_PROBLEM_TITLE,
            "status": status.HTTP_400_BAD_REQUEST,
            "errors": errors,
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for request validation errors, rendered as a 400 validation problem"""
    errors = group_validation_errors(exc.errors())

    logger.warning(
        "Request validation failed",
        metadata={
            "event": "validation_error",
            "url": str(request.url),
            "method": request.method,
            "fields": list(errors.keys()),
        }
    )

    return validation_problem_response(errors)


async def validation_problem_handler(request: Request, exc: ValidationProblem):
    """Handler for ValidationProblem raised below the API layer"""
    logger.warning(
        exc.message,
        metadata={
            "event": "validation_problem",
            "url": str(request.url),
            "method": request.method,
            "fields": list(exc.errors.keys()),
        }
    )

    return validation_problem_response(exc.errors)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler so unexpected failures surface as a logged 500"""
    logger.error(
        f"Unhandled exception: {exc}",
        error=exc,
        metadata={
            "event": "unhandled_exception",
            "url": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred"}
    )
