"""FastAPI middleware for request/response processing and error handling.

Middleware Components:
    - logging_middleware: Logs all requests/responses with timing metrics
    - error_handling_middleware: Catches exceptions and converts to proper HTTP responses

The error handling middleware maps application exceptions to HTTP status codes:
    - UnrecognizedAircraftCodeError → 400 Bad Request (unknown ICAO code)
    - ExtractionProviderError → 502 Bad Gateway (provider produced no record)
    - ScoringPolicyError → 500 Internal Server Error (bad policy file)
    - DatasetLoadError → 500 Internal Server Error (bad dataset file)
    - FlightEvalError → 500 Internal Server Error (general errors)

Both middleware functions are registered in main.py using app.middleware("http").
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from .exceptions import (
    DatasetLoadError,
    ExtractionProviderError,
    FlightEvalError,
    ScoringPolicyError,
    UnrecognizedAircraftCodeError,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: FlightEvalError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(error).__name__,
            "message": error.message,
            "details": error.details,
        },
    )


async def logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log every request and response with its processing time.

    Adds an ``X-Process-Time`` header (milliseconds) to the response.

    Args:
        request: The incoming HTTP request
        call_next: Passes the request to the next middleware/endpoint

    Returns:
        The endpoint's response with the timing header
    """
    start_time = time.time()

    logger.info(
        "Request started",
        extra={
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else None,
        },
    )

    response = await call_next(request)

    duration_ms = int((time.time() - start_time) * 1000)

    logger.info(
        "Request completed",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )

    response.headers["X-Process-Time"] = str(duration_ms)

    return response


async def error_handling_middleware(request: Request, call_next: Callable) -> Response:
    """Convert exceptions raised by endpoints into JSON error responses.

    Error Response Format:
        {
            "error": "UnrecognizedAircraftCodeError",
            "message": "Unrecognized aircraft code: 'ZZZZ'",
            "details": {"code": "ZZZZ"}
        }

    Client errors are logged as warnings, everything else as errors. Unexpected
    exceptions are logged with a traceback and answered with a generic 500 that
    does not leak internals.
    """
    try:
        return await call_next(request)
    except UnrecognizedAircraftCodeError as e:
        logger.warning(f"Unrecognized aircraft code: {e.code}", extra={"details": e.details})
        return _error_response(status.HTTP_400_BAD_REQUEST, e)
    except ExtractionProviderError as e:
        logger.error(f"Extraction provider failed: {e.message}", extra={"details": e.details})
        return _error_response(status.HTTP_502_BAD_GATEWAY, e)
    except ScoringPolicyError as e:
        logger.error(f"Scoring policy error: {e.message}", extra={"details": e.details})
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except DatasetLoadError as e:
        logger.error(f"Dataset load failed: {e.message}", extra={"details": e.details})
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except FlightEvalError as e:
        logger.error(f"Application error: {e.message}", extra={"details": e.details})
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except Exception as e:
        logger.exception("Unexpected error occurred")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "InternalServerError",
                "message": "An unexpected error occurred",
                "details": {"error_type": type(e).__name__},
            },
        )
