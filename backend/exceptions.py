"""
Error types shared by the pxfm API
"""

from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field


# Where an error came from; decides the HTTP status
ErrorSource = Literal[
  "rate_limiter",
  "validation",  # Bad query params or configuration values
  "browse",  # Browse tree / station catalog
  "playback",  # Player backend or playback controller
  "http",
  "unknown",
]

_STATUS_BY_SOURCE: Dict[str, int] = {
  "rate_limiter": 429,
  "validation": 400,
  # No usable audio backend is a temporary condition from the client's view
  "playback": 503,
  "browse": 500,
  "http": 500,
  "unknown": 500,
}


def get_status_code(source: ErrorSource) -> int:
  return _STATUS_BY_SOURCE.get(source, 500)


class ErrorResponse(BaseModel):
  """Body of every error the API returns"""

  description: str = Field(..., description="Human-readable error message")
  name: str = Field(..., description="Stable error identifier, e.g. PLAYBACK_UNAVAILABLE")
  source: ErrorSource
  caused_by: Optional[str] = Field(None, description="Wrapped exception, if any")


class AppError(Exception):
  """
  An error the API reports as an ErrorResponse.
  Handlers raise this; ErrorHandlingMiddleware turns it into JSON.
  """

  def __init__(
    self,
    description: str,
    name: str,
    source: ErrorSource,
    caused_by: Optional[str] = None,
  ):
    self.description = description
    self.name = name
    self.source: ErrorSource = source
    self.caused_by = caused_by
    super().__init__(description)

  @property
  def status_code(self) -> int:
    return get_status_code(self.source)

  def to_response(self) -> ErrorResponse:
    return ErrorResponse(
      description=self.description,
      name=self.name,
      source=self.source,
      caused_by=self.caused_by,
    )

  @classmethod
  def from_exception(
    cls,
    e: Exception,
    name: str,
    source: ErrorSource,
    context: Optional[str] = None,
  ) -> "AppError":
    """
    Wrap an exception, keeping its type and message in `caused_by`

    Args:
        e: The exception being wrapped
        name: Error identifier
        source: Where the error originated
        context: Prefix for the description
    """
    message = str(e)
    return cls(
      description=f"{context}: {message}" if context else message,
      name=name,
      source=source,
      caused_by=f"{e.__class__.__name__}: {message}",
    )
