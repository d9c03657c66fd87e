"""
Global Error Handling

Application-wide exception handlers for the HTTP API.

Internal exception details are never returned to clients; the full stack
trace is logged instead.
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("rag.errors")

# Message returned per route for uncaught failures
_FAILURE_MESSAGES = {
    "/query": "Failed to process query",
    "/embed": "Failed to embed and store data",
}


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Registered with FastAPI as the final safety net. Logs the exception and
    returns a generic 500 payload in the same shape as route-level errors.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "success": False,
        "message": _FAILURE_MESSAGES.get(request.url.path, "Internal server error"),
        "error": "internal_server_error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
