"""
Centralized Error Handling and Logging
Every error response carries the same JSON envelope and a trace ID that
also appears in the structured log line.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime
from typing import Any, Dict, Optional
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    LOG_REQUEST_BODIES = True
    MAX_BODY_LOG_SIZE = 5000
    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True

    @classmethod
    def truncate(cls, body: Optional[str]) -> Optional[str]:
        if body and len(body) > cls.MAX_BODY_LOG_SIZE:
            return body[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        return body

class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True,
        level: int = logging.ERROR
    ) -> str:
        """Log structured error and return the trace ID it was filed under"""
        trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": logging.getLevelName(level)
        }

        if request:
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else None
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception)
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = traceback.format_exc()

        if extra_context:
            log_entry["context"] = extra_context

        logger.log(level, json.dumps(log_entry, indent=2, default=str))
        return trace_id

class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to capture request context and add request IDs"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)

        if ErrorHandlingConfig.LOG_REQUEST_BODIES:
            request.state.captured_body = await request.body()
        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response

def _captured_body(request: Request) -> Optional[str]:
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        return ErrorHandlingConfig.truncate(body.decode('utf-8'))
    except UnicodeDecodeError:
        return "DECODE_ERROR"

def _envelope(error: str, message: Any, trace_id: Optional[str]) -> Dict[str, Any]:
    content: Dict[str, Any] = {
        "error": error,
        "message": message
    }
    if ErrorHandlingConfig.INCLUDE_TRACE_ID and trace_id:
        content["trace_id"] = trace_id
    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        content["timestamp"] = datetime.utcnow().isoformat()
    return content

# Global Exception Handlers
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with logging, including routing 404 and 405"""
    trace_id = StructuredLogger.log_error(
        f"http_{exc.status_code}",
        f"HTTP {exc.status_code}: {exc.detail}",
        request=request,
        extra_context={"request_body": _captured_body(request)},
        include_traceback=False,
        level=logging.ERROR if exc.status_code >= 500 else logging.WARNING
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(f"HTTP {exc.status_code}", exc.detail, trace_id),
        headers=getattr(exc, "headers", None)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle FastAPI validation errors (HTTP 422)"""
    validation_details = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown")
        }
        for error in exc.errors()
    ]

    trace_id = StructuredLogger.log_error(
        "validation_error_422",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        extra_context={
            "validation_errors": validation_details,
            "request_body": _captured_body(request)
        },
        include_traceback=False,
        level=logging.WARNING
    )

    content = _envelope("Validation Error", "Request validation failed", trace_id)
    content["detail"] = validation_details
    content["error_count"] = len(validation_details)
    return JSONResponse(status_code=422, content=content)

async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions without exposing internals"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)}
    )

    return JSONResponse(
        status_code=500,
        content=_envelope("Internal Server Error", "An unexpected error occurred", trace_id)
    )

def setup_error_handling(app):
    """Setup error handling for FastAPI app"""
    app.add_middleware(RequestContextMiddleware)

    # Most specific first; Starlette's HTTPException also covers FastAPI's subclass
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
