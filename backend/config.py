"""
Configuration module for the pxfm backend
Reads settings from the environment (and a .env file) once at startup
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_config_dir

from browse_tree import (
  DEFAULT_CATALOG,
  BrowsePolicy,
  LayoutHint,
  StationCatalog,
  load_catalog,
)

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

APP_NAME = "pxfm"
APP_VERSION = "0.1.0"
DEFAULT_STREAM_URL = "https://stream.zeno.fm/g4n2811262zuv"
AUDIO_BACKENDS = ("vlc", "mock")


def _env_bool(name: str, default: bool) -> bool:
  raw = os.getenv(name)
  if raw is None:
    return default
  return raw.strip().lower() in {"1", "true", "yes", "on"}


def default_catalog_path() -> Path:
  return Path(user_config_dir(APP_NAME)) / "stations.yaml"


class AppConfig:
  """Application configuration settings"""

  # Server settings
  HOST = os.getenv("HOST", "127.0.0.1")
  PORT = int(os.getenv("PORT", "8000"))

  # CORS settings
  CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS", "http://localhost:5173,http://localhost:8000"
  ).split(",")

  # Rate limiting
  RATE_LIMIT = os.getenv("RATE_LIMIT", "3600/hour")

  # Playback settings
  STREAM_URL = os.getenv("PXFM_STREAM_URL", DEFAULT_STREAM_URL)
  AUDIO_BACKEND = os.getenv("PXFM_AUDIO_BACKEND", "vlc").strip().lower()

  # Browse tree settings
  ATTACH_ROOT_HINTS = _env_bool("PXFM_ATTACH_ROOT_HINTS", True)
  FAVORITES_HINT = os.getenv("PXFM_FAVORITES_HINT", "none")
  ALL_STATIONS_HINT = os.getenv("PXFM_ALL_STATIONS_HINT", "grid")
  UNKNOWN_FOLDER = os.getenv("PXFM_UNKNOWN_FOLDER", "empty").strip().lower()
  CATALOG_PATH = Path(os.getenv("PXFM_CATALOG_PATH", str(default_catalog_path())))

  # Frontend
  FRONTEND_PATH = os.getenv(
    "PXFM_FRONTEND_PATH", str(Path(__file__).resolve().parent.parent / "frontend")
  )
  WEBVIEW_DEBUG = _env_bool("PXFM_WEBVIEW_DEBUG", False)

  # Logging
  LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def browse_policy(config: type[AppConfig] = AppConfig) -> BrowsePolicy:
  """
  Build the browse policy from configuration

  Raises:
    ValueError: If a hint or fallback value is invalid
  """
  return BrowsePolicy(
    attach_root_hints=config.ATTACH_ROOT_HINTS,
    favorites_layout_hint=LayoutHint.parse(config.FAVORITES_HINT),
    all_stations_layout_hint=LayoutHint.parse(config.ALL_STATIONS_HINT),
    unknown_folder_fallback=config.UNKNOWN_FOLDER,
  )


def station_catalog(config: type[AppConfig] = AppConfig) -> StationCatalog:
  """
  Load the station catalog, falling back to the built-in table

  A catalog file that exists but is invalid is an error, not a fallback.
  """
  path = config.CATALOG_PATH
  if not path.exists():
    logger.info(f"No catalog at {path}, using built-in stations")
    return DEFAULT_CATALOG

  catalog = load_catalog(path)
  logger.info(f"Loaded {len(catalog.stations)} stations from {path}")
  return catalog


def audio_backend(config: type[AppConfig] = AppConfig) -> str:
  if config.AUDIO_BACKEND not in AUDIO_BACKENDS:
    raise ValueError(
      f"Invalid audio backend: {config.AUDIO_BACKEND}. Must be 'vlc' or 'mock'"
    )
  return config.AUDIO_BACKEND
