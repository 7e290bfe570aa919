"""
ASGI middleware: JSON error responses and request logging
"""

import logging
import time
import traceback

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send
from asgi_correlation_id import CorrelationIdMiddleware
from slowapi.errors import RateLimitExceeded
from backend.exceptions import AppError

logger = logging.getLogger(__name__)

# The player page polls these; logging them at info would drown everything else
QUIET_PATHS = frozenset({"/health", "/api/playback"})


def _json(error: AppError, status_code: int | None = None) -> JSONResponse:
  return JSONResponse(
    status_code=status_code or error.status_code,
    content=error.to_response().model_dump(),
  )


def error_handler(exc: Exception) -> JSONResponse:
  """Map any exception escaping a route to an ErrorResponse"""
  match exc:
    case AppError() as e:
      logger.error(f"[{e.source}] {e.name}: {e.description}")
      return _json(e)

    case RateLimitExceeded() as e:
      logger.warning(f"Rate limit exceeded: {e}")
      return _json(
        AppError(
          description="Too many requests, slow down",
          name="RATE_LIMIT_EXCEEDED",
          source="rate_limiter",
          caused_by=str(e),
        )
      )

    case HTTPException() as e:
      logger.error(f"HTTP {e.status_code}: {e.detail}")
      return _json(
        AppError(description=str(e.detail), name=f"HTTP_{e.status_code}", source="http"),
        e.status_code,
      )

    # Includes pydantic ValidationError from a bad station catalog
    case ValueError() as e:
      logger.error(f"Validation error: {e}")
      return _json(AppError.from_exception(e, name="VALIDATION_ERROR", source="validation"))

    # Native player failures (libVLC, MediaPlayer) are raised as OSError
    case OSError() as e:
      logger.error(f"Audio backend error: {e}")
      return _json(
        AppError.from_exception(e, name="PLAYBACK_BACKEND_ERROR", source="playback")
      )

    case _:
      logger.error(f"Unhandled error: {exc}", exc_info=True)
      error = AppError.from_exception(exc, name="INTERNAL_ERROR", source="unknown")
      error.caused_by = f"{error.caused_by}\n\nTraceback:\n{traceback.format_exc()}"
      return _json(error)


class ErrorHandlingMiddleware:
  def __init__(self, app: ASGIApp):
    self.app = app

  async def __call__(self, scope: Scope, receive: Receive, send: Send):
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    response_started = False

    async def send_wrapper(message):
      nonlocal response_started
      if message["type"] == "http.response.start":
        response_started = True
      await send(message)

    try:
      await self.app(scope, receive, send_wrapper)
    except Exception as e:
      if response_started:
        logger.error(f"Error after response started, dropping it: {e}")
        return
      await error_handler(e)(scope, receive, send)


class LoggingMiddleware:
  def __init__(self, app: ASGIApp):
    self.app = app

  async def __call__(self, scope: Scope, receive: Receive, send: Send):
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    method = scope["method"]
    path = scope["path"]
    query = scope["query_string"].decode()
    target = f"{path}?{query}" if query else path
    client = (scope.get("client") or ("unknown", 0))[0]
    level = (
      logging.DEBUG if method == "GET" and path in QUIET_PATHS else logging.INFO
    )

    logger.log(level, f"Request: {method} {target} from {client}")
    start_time = time.time()
    status_code = None

    async def send_wrapper(message):
      nonlocal status_code
      if message["type"] == "http.response.start":
        status_code = message["status"]
      await send(message)

    await self.app(scope, receive, send_wrapper)

    duration = time.time() - start_time
    logger.log(level, f"Response: {status_code} for {method} {path} ({duration:.3f}s)")


def setup_logging_middleware(app):
  """Add request logging wrapped in correlation ids, so request logs carry one"""
  app.add_middleware(LoggingMiddleware)
  app.add_middleware(CorrelationIdMiddleware)
