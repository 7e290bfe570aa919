"""Shared fixtures"""

from typing import List

import pytest
from fastapi.testclient import TestClient

from backend.config import AppConfig
from backend.main import create_app
from os_interfaces.base import OSImplementations
from os_interfaces.mock import MockAudioPlayer
from playback import PlaybackController

STREAM_URL = "https://stream.example.test/live"


class PlayerFactory:
  """Hands out MockAudioPlayers and remembers every one it created"""

  def __init__(self):
    self.created: List[MockAudioPlayer] = []

  def __call__(self) -> MockAudioPlayer:
    player = MockAudioPlayer()
    self.created.append(player)
    return player

  @property
  def last(self) -> MockAudioPlayer:
    return self.created[-1]


@pytest.fixture
def player_factory() -> PlayerFactory:
  return PlayerFactory()


@pytest.fixture
def controller(player_factory) -> PlaybackController:
  return PlaybackController(stream_url=STREAM_URL, player_factory=player_factory)


@pytest.fixture
def config(tmp_path):
  """AppConfig with no catalog file, no player page and the mock backend"""

  class Config(AppConfig):
    AUDIO_BACKEND = "mock"
    CATALOG_PATH = tmp_path / "missing.yaml"
    FRONTEND_PATH = str(tmp_path)

  return Config


@pytest.fixture
def app(config, player_factory):
  return create_app(
    os_impl=OSImplementations(audio_player_cls=player_factory), config=config
  )


@pytest.fixture
def client(app):
  with TestClient(app) as client:
    yield client
