import logging
from unittest.mock import Mock

import pytest

from app_state import get_asset_cache
from asset_cache import CachedResponse
from main import app


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to Gym Buddy"}


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_initial_state(client):
    response = client.get("/api/v1/state")
    assert response.status_code == 200
    assert response.json() == {
        "view": "home",
        "notice": None,
        "draft": {"name": "", "description": "", "exercises": []},
        "session": None,
        "finish": {"rating": 0, "comment": ""},
    }


def test_navigate(client):
    response = client.post("/api/v1/navigate", json={"view": "history"})
    assert response.status_code == 200
    assert response.json()["view"] == "history"

    response = client.post("/api/v1/navigate", json={"view": "home"})
    assert response.json()["view"] == "home"


def test_navigate_to_restricted_view(client):
    response = client.post("/api/v1/navigate", json={"view": "active"})
    assert response.status_code == 409


def test_navigate_unknown_view(client):
    response = client.post("/api/v1/navigate", json={"view": "settings"})
    assert response.status_code == 422


@pytest.fixture
def mock_asset_cache():
    cache = Mock()
    cache.fetch.return_value = CachedResponse(
        200, b"<html></html>", {"content-type": "text/html"}
    )
    app.dependency_overrides[get_asset_cache] = lambda: cache
    yield cache
    app.dependency_overrides.pop(get_asset_cache, None)


def test_serve_asset(client, mock_asset_cache):
    response = client.get("/app/index.html")
    assert response.status_code == 200
    assert response.content == b"<html></html>"
    assert response.headers["content-type"].startswith("text/html")
    mock_asset_cache.fetch.assert_called_once_with("/index.html")


def test_serve_asset_without_origin(client):
    app.dependency_overrides[get_asset_cache] = lambda: None
    response = client.get("/app/index.html")
    assert response.status_code == 404


def test_unhandled_error_is_logged(client, mock_asset_cache, caplog):
    mock_asset_cache.fetch.side_effect = RuntimeError("disk full")

    with caplog.at_level(logging.ERROR, logger="main"):
        with pytest.raises(RuntimeError):
            client.get("/app/index.html")

    (record,) = [r for r in caplog.records if r.name == "main"]
    assert "Unhandled exception during request: GET" in record.getMessage()
    assert record.exc_info[0] is RuntimeError
