"""
pxfm backend - FastAPI server
Hosts the browse tree and the playback toggle for the player UI
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import uvicorn
import logging
from asgi_correlation_id import CorrelationIdFilter

from backend.api.browse import router as browse_router
from backend.api.playback import router as playback_router
from backend.config import (
  APP_VERSION,
  AppConfig,
  audio_backend,
  browse_policy,
  station_catalog,
)
from backend.middleware import ErrorHandlingMiddleware, setup_logging_middleware
from browse_tree import BrowseTreeSource, StaticBrowseTree
from os_interfaces.base import OSImplementations
from playback import PlaybackController
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.middleware import SlowAPIMiddleware

# Configure logging
logging.basicConfig(
  level=AppConfig.LOG_LEVEL,
  format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Add correlation ID filter to all handlers
for handler in logging.root.handlers:
  handler.addFilter(CorrelationIdFilter(uuid_length=4))


def default_os_implementations(config: type[AppConfig] = AppConfig) -> OSImplementations:
  """Pick the audio backend named in configuration"""
  if audio_backend(config) == "mock":
    from os_interfaces.mock import AutoPreparingMockPlayer

    return OSImplementations(audio_player_cls=AutoPreparingMockPlayer)

  from os_interfaces.linux import VlcAudioPlayer

  return OSImplementations(audio_player_cls=VlcAudioPlayer)


def _build_playback(
  os_impl: Optional[OSImplementations], config: type[AppConfig]
) -> Optional[PlaybackController]:
  backend = audio_backend(config)
  try:
    os_impl = os_impl or default_os_implementations(config)
  except Exception as e:
    # libVLC missing is not fatal: browsing still works
    logger.error(f"Audio backend '{backend}' unavailable, playback disabled: {e}")
    return None
  return PlaybackController(
    stream_url=config.STREAM_URL, player_factory=os_impl.audio_player
  )


def create_app(
  os_impl: Optional[OSImplementations] = None,
  browse_source: Optional[BrowseTreeSource] = None,
  config: type[AppConfig] = AppConfig,
) -> FastAPI:
  """
  Build the FastAPI application

  Args:
    os_impl: Platform implementations; chosen from config when omitted
    browse_source: Browse tree to serve; the static catalog tree when omitted
    config: Settings class (tests pass a subclass)
  """
  playback = _build_playback(os_impl, config)
  source = browse_source or StaticBrowseTree(
    catalog=station_catalog(config), policy=browse_policy(config)
  )

  @asynccontextmanager
  async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    logger.info("Starting pxfm backend...")
    yield
    logger.info("Shutting down pxfm backend...")
    if app.state.playback is not None:
      app.state.playback.teardown()

  app = FastAPI(
    title="pxfm",
    description="Radio station browser and stream player",
    version=APP_VERSION,
    lifespan=lifespan,
  )
  app.state.playback = playback
  app.state.browse_source = source

  # innermost
  app.add_middleware(ErrorHandlingMiddleware)

  app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )

  limiter = Limiter(key_func=get_remote_address, default_limits=[config.RATE_LIMIT])
  app.state.limiter = limiter

  app.add_middleware(SlowAPIMiddleware)

  # outermost
  setup_logging_middleware(app)

  app.include_router(browse_router)
  app.include_router(playback_router)

  @app.get("/health")
  async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "pxfm-backend", "version": APP_VERSION}

  index_file = Path(config.FRONTEND_PATH) / "index.html"
  if index_file.is_file():
    logger.info(f"Serving player page from: {index_file}")

    @app.get("/", include_in_schema=False)
    async def serve_frontend():
      """Serve the player page; never cached so rebuilt pages show up"""
      response = FileResponse(index_file)
      response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
      return response
  else:
    logger.warning("Player page not found. API-only mode.")

    @app.get("/")
    async def root():
      """Root endpoint - API only mode"""
      return {"message": "pxfm API", "version": APP_VERSION}

  return app


if __name__ == "__main__":
  uvicorn.run(
    "backend.main:create_app",
    factory=True,
    host=AppConfig.HOST,
    port=AppConfig.PORT,
    log_level="info",
  )
