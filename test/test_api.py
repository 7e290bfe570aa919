"""
Tests for the pxfm HTTP API
Run with: pytest test/test_api.py
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from backend.config import (
  AppConfig,
  audio_backend,
  browse_policy,
  station_catalog,
)
from backend.main import create_app, default_os_implementations
from browse_tree import DEFAULT_CATALOG, LayoutHint
from browse_tree.models import CONTENT_STYLE_BROWSABLE_HINT, CONTENT_STYLE_PLAYABLE_HINT
from os_interfaces.base import OSImplementations
from os_interfaces.mock import AutoPreparingMockPlayer


class TestBrowseApi:
  def test_root(self, client):
    response = client.get("/api/browse/root")

    assert response.status_code == 200
    assert response.json() == {
      "root_id": "media_root_id",
      "extras": {
        CONTENT_STYLE_BROWSABLE_HINT: 1,
        CONTENT_STYLE_PLAYABLE_HINT: 1,
      },
    }

  def test_root_accepts_any_client(self, client):
    anonymous = client.get("/api/browse/root").json()
    named = client.get(
      "/api/browse/root", params={"client_package": "com.example.car", "client_uid": 1013}
    ).json()
    assert anonymous == named

  def test_root_children(self, client):
    children = client.get("/api/browse/children/media_root_id").json()

    assert [c["id"] for c in children] == ["folder_favorites", "folder_all_stations"]
    assert children[0]["layout_hint"] is None
    assert children[1]["layout_hint"] == 2
    assert all(c["kind"] == "folder" for c in children)

  def test_all_stations(self, client):
    stations = client.get("/api/browse/children/folder_all_stations").json()

    assert [s["title"] for s in stations] == [
      "Kral FM",
      "Power Turk",
      "Joy FM",
      "Metro FM",
      "Fenomen",
      "Number 1",
    ]
    assert stations[3]["subtitle"] == "Hit"
    assert all(s["kind"] == "station" for s in stations)

  def test_favorites(self, client):
    favorites = client.get("/api/browse/children/folder_favorites").json()
    assert [s["id"] for s in favorites] == ["1"]

  def test_unknown_node(self, client):
    response = client.get("/api/browse/children/folder_unknown")
    assert response.status_code == 200
    assert response.json() == []

  def test_missing_browse_source(self, app, client):
    app.state.browse_source = None

    response = client.get("/api/browse/root")

    assert response.status_code == 500
    assert response.json()["name"] == "BROWSE_NOT_CONFIGURED"


class TestPlaybackApi:
  def test_initial_state(self, client):
    state = client.get("/api/playback").json()

    assert state == {
      "status": "idle",
      "status_label": "Ready to Play",
      "toggle_label": "Play",
      "stream_url": AppConfig.STREAM_URL,
    }

  def test_toggle_flow(self, client, player_factory):
    state = client.post("/api/playback/toggle").json()
    assert (state["status"], state["status_label"]) == ("buffering", "Buffering...")

    player_factory.last.fire_prepared()
    state = client.get("/api/playback").json()
    assert (state["status_label"], state["toggle_label"]) == ("Playing", "Stop")

    state = client.post("/api/playback/toggle").json()
    assert (state["status_label"], state["toggle_label"]) == ("Paused", "Play")

    state = client.post("/api/playback/toggle").json()
    assert state["status"] == "playing"
    assert len(player_factory.created) == 1

  def test_error_reported_through_state(self, client, player_factory):
    client.post("/api/playback/toggle")
    player_factory.last.fire_error()

    state = client.get("/api/playback").json()

    assert state["status"] == "error"
    assert state["status_label"] == "Error playing"
    assert state["toggle_label"] == "Play"

  def test_teardown(self, client, player_factory):
    client.post("/api/playback/toggle")
    player_factory.last.fire_prepared()

    state = client.post("/api/playback/teardown").json()
    assert state["status"] == "idle"
    assert player_factory.last.released

    # Idempotent
    assert client.post("/api/playback/teardown").status_code == 200

  def test_shutdown_releases_player(self, app, player_factory):
    with TestClient(app) as client:
      client.post("/api/playback/toggle")
      player = player_factory.last
      assert not player.released

    assert player.released

  def test_playback_unavailable(self, app, client):
    app.state.playback = None

    response = client.post("/api/playback/toggle")

    assert response.status_code == 503
    body = response.json()
    assert body["name"] == "PLAYBACK_UNAVAILABLE"
    assert body["source"] == "playback"

  def test_player_construction_failure(self, config):
    def broken_player():
      raise OSError("libvlc not found")

    app = create_app(
      os_impl=OSImplementations(audio_player_cls=broken_player), config=config
    )
    with TestClient(app) as client:
      response = client.post("/api/playback/toggle")

    assert response.status_code == 503
    body = response.json()
    assert body["name"] == "PLAYBACK_BACKEND_ERROR"
    assert "libvlc not found" in body["caused_by"]

  def test_mock_backend_from_config(self, config):
    with TestClient(create_app(config=config)) as client:
      state = client.post("/api/playback/toggle").json()
    assert state["status"] == "playing"

  @patch("backend.main.default_os_implementations")
  def test_missing_audio_backend_disables_playback(self, mock_default, config):
    mock_default.side_effect = OSError("no libvlc")

    app = create_app(config=config)

    assert app.state.playback is None
    with TestClient(app) as client:
      assert client.get("/api/browse/root").status_code == 200
      assert client.get("/api/playback").status_code == 503


class TestAppSurface:
  def test_health(self, client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "pxfm-backend"

  def test_api_only_root(self, client):
    assert client.get("/").json()["message"] == "pxfm API"

  def test_serves_player_page(self, config, player_factory, tmp_path):
    (tmp_path / "index.html").write_text("<html><body>pxfm</body></html>")
    app = create_app(
      os_impl=OSImplementations(audio_player_cls=player_factory), config=config
    )

    with TestClient(app) as client:
      response = client.get("/")

    assert response.status_code == 200
    assert "pxfm" in response.text
    assert "no-cache" in response.headers["cache-control"]

  def test_correlation_id_header(self, client):
    response = client.get("/health")
    assert "x-request-id" in response.headers


class TestConfig:
  def test_browse_policy_defaults(self):
    policy = browse_policy(AppConfig)
    assert policy.attach_root_hints is True
    assert policy.favorites_layout_hint is None
    assert policy.all_stations_layout_hint is LayoutHint.GRID
    assert policy.unknown_folder_fallback == "empty"

  def test_invalid_hint(self, config):
    config.FAVORITES_HINT = "carousel"
    with pytest.raises(ValueError):
      browse_policy(config)

  def test_invalid_hint_fails_app_creation(self, config, player_factory):
    config.UNKNOWN_FOLDER = "guess"
    with pytest.raises(ValueError):
      create_app(
        os_impl=OSImplementations(audio_player_cls=player_factory), config=config
      )

  def test_invalid_audio_backend(self, config):
    config.AUDIO_BACKEND = "alsa"
    with pytest.raises(ValueError, match="Invalid audio backend"):
      audio_backend(config)

  def test_mock_backend_implementations(self, config):
    os_impl = default_os_implementations(config)
    assert os_impl.audio_player_cls is AutoPreparingMockPlayer

  def test_catalog_fallback(self, config):
    assert station_catalog(config) is DEFAULT_CATALOG

  def test_catalog_from_file(self, config, tmp_path):
    path = tmp_path / "stations.yaml"
    path.write_text("stations:\n  - id: a\n    title: Alpha\n")
    config.CATALOG_PATH = Path(path)

    catalog = station_catalog(config)

    assert [s.title for s in catalog.stations] == ["Alpha"]
