"""
Playback API endpoints
Exposes the play/pause toggle and the labels the player UI renders
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from backend.exceptions import AppError
from playback import PlaybackController, PlaybackSnapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/playback", tags=["playback"])


class PlaybackStateResponse(BaseModel):
  """Current playback state as shown to the user"""

  status: str
  status_label: str
  toggle_label: str
  stream_url: str

  @classmethod
  def from_snapshot(cls, snapshot: PlaybackSnapshot) -> "PlaybackStateResponse":
    return cls(
      status=snapshot.status.name.lower(),
      status_label=snapshot.status_label,
      toggle_label=snapshot.toggle_label,
      stream_url=snapshot.stream_url,
    )


def get_playback_controller(request: Request) -> PlaybackController:
  controller = getattr(request.app.state, "playback", None)
  if controller is None:
    raise AppError(
      description="No audio backend is available on this system",
      name="PLAYBACK_UNAVAILABLE",
      source="playback",
    )
  return controller


@router.get("", response_model=PlaybackStateResponse)
async def get_playback_state(
  controller: PlaybackController = Depends(get_playback_controller),
) -> PlaybackStateResponse:
  return PlaybackStateResponse.from_snapshot(controller.snapshot())


@router.post("/toggle", response_model=PlaybackStateResponse)
async def toggle_playback(
  controller: PlaybackController = Depends(get_playback_controller),
) -> PlaybackStateResponse:
  """Play when stopped, pause when playing"""
  try:
    # Player backends make native calls; keep them off the event loop
    snapshot = await run_in_threadpool(controller.toggle)
  except AppError:
    raise
  except Exception as e:
    logger.exception("Toggle failed")
    raise AppError.from_exception(
      e,
      name="PLAYBACK_BACKEND_ERROR",
      source="playback",
      context="Failed to toggle playback",
    )
  return PlaybackStateResponse.from_snapshot(snapshot)


@router.post("/teardown", response_model=PlaybackStateResponse)
async def teardown_playback(
  controller: PlaybackController = Depends(get_playback_controller),
) -> PlaybackStateResponse:
  """Release the player; the next toggle starts from scratch"""
  snapshot = await run_in_threadpool(controller.teardown)
  return PlaybackStateResponse.from_snapshot(snapshot)
