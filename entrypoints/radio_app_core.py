"""Platform-agnostic pywebview bootstrap for the player shell.

Linux and Android entrypoints call `run_pywebview_app` with their audio
player bundle. The backend runs on a uvicorn server thread; the window shows
the player page. Closing the window stops the server, whose lifespan
shutdown tears playback down.
"""

from __future__ import annotations

import logging
import os
import threading
import time

import uvicorn
import webview
from fastapi import FastAPI

from backend.config import AppConfig
from backend.main import create_app
from os_interfaces.base import OSImplementations

# backend.main already configured the root logger
if AppConfig.WEBVIEW_DEBUG:
  logging.getLogger().setLevel(logging.DEBUG)
logger = logging.getLogger(__name__)

STARTUP_TIMEOUT_S = 10
SHUTDOWN_TIMEOUT_S = 5


def _backend_server(app: FastAPI) -> uvicorn.Server:
  config = uvicorn.Config(
    app,
    host=AppConfig.HOST,
    port=AppConfig.PORT,
    log_level="info",
    access_log=False,
  )
  return uvicorn.Server(config)


def _wait_until_started(server: uvicorn.Server, thread: threading.Thread) -> bool:
  deadline = time.monotonic() + STARTUP_TIMEOUT_S
  while time.monotonic() < deadline:
    if server.started:
      return True
    if not thread.is_alive():
      # uvicorn exits its thread when the port is taken
      break
    time.sleep(0.05)
  return False


def _stop_backend(app: FastAPI, server: uvicorn.Server, thread: threading.Thread) -> None:
  server.should_exit = True
  thread.join(timeout=SHUTDOWN_TIMEOUT_S)
  if thread.is_alive():
    logger.warning("Backend did not stop in time, releasing the player directly")
    if app.state.playback is not None:
      app.state.playback.teardown()


def run_pywebview_app(*, os_impl: OSImplementations) -> None:
  logger.info("Starting pxfm player shell...")

  app = create_app(os_impl=os_impl)
  server = _backend_server(app)
  thread = threading.Thread(target=server.run, daemon=True, name="FastAPI-Backend")
  thread.start()

  if not _wait_until_started(server, thread):
    raise RuntimeError(
      f"Backend failed to start on {AppConfig.HOST}:{AppConfig.PORT}"
    )
  logger.info("Backend is ready")

  webview.create_window(
    title="pxfm",
    url=f"http://{AppConfig.HOST}:{AppConfig.PORT}/",
    width=360,
    height=480,
    min_size=(240, 240),
  )
  webview.start(debug=AppConfig.WEBVIEW_DEBUG, private_mode=True)

  logger.info("pxfm window closed. Exiting...")
  _stop_backend(app, server, thread)
  os._exit(0)
