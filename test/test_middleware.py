"""Tests for error mapping and request logging middleware"""

import json
import logging

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from backend.exceptions import AppError, get_status_code
from backend.middleware import error_handler
from browse_tree import StationRecord


def _body(response):
  return json.loads(response.body)


class TestErrorHandler:
  def test_app_error_keeps_its_source(self):
    response = error_handler(
      AppError(description="gone", name="PLAYBACK_UNAVAILABLE", source="playback")
    )
    assert response.status_code == 503
    assert _body(response)["name"] == "PLAYBACK_UNAVAILABLE"

  def test_http_exception_keeps_status(self):
    response = error_handler(HTTPException(status_code=404, detail="Not Found"))
    assert response.status_code == 404
    assert _body(response)["name"] == "HTTP_404"

  def test_value_error_is_validation(self):
    response = error_handler(ValueError("Invalid layout hint: carousel"))
    assert response.status_code == 400
    assert _body(response)["source"] == "validation"

  def test_pydantic_error_is_validation(self):
    with pytest.raises(ValidationError) as excinfo:
      StationRecord(id=" ", title="Blank")
    response = error_handler(excinfo.value)
    assert response.status_code == 400

  def test_os_error_is_playback(self):
    response = error_handler(OSError("libVLC failed to start playback"))
    body = _body(response)
    assert response.status_code == 503
    assert body["name"] == "PLAYBACK_BACKEND_ERROR"
    assert body["caused_by"].startswith("OSError")

  def test_unknown_error_carries_traceback(self):
    try:
      raise KeyError("station")
    except KeyError as e:
      response = error_handler(e)
    body = _body(response)
    assert response.status_code == 500
    assert body["name"] == "INTERNAL_ERROR"
    assert "Traceback" in body["caused_by"]


@pytest.mark.parametrize(
  "source,status",
  [("rate_limiter", 429), ("validation", 400), ("playback", 503), ("browse", 500)],
)
def test_status_codes(source, status):
  assert get_status_code(source) == status


class TestRequestLogging:
  def test_polling_logged_at_debug(self, client, caplog):
    with caplog.at_level(logging.INFO, logger="backend.middleware"):
      client.get("/api/playback")
    assert not any("/api/playback" in r.message for r in caplog.records)

  def test_commands_logged_at_info(self, client, caplog):
    with caplog.at_level(logging.INFO, logger="backend.middleware"):
      client.post("/api/playback/toggle")
    assert any(
      "POST /api/playback/toggle" in r.message for r in caplog.records
    )
