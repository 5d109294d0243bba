"""Tests for FastAPI app entry point."""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def clear_controller():
    from anime_mirror.main import app

    yield
    if hasattr(app.state, "controller"):
        del app.state.controller


def test_health_endpoint_returns_200() -> None:
    """Health check endpoint should return HTTP 200."""
    from anime_mirror.main import app
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200


def test_health_endpoint_returns_status_ok() -> None:
    """Health check response should contain status=ok."""
    from anime_mirror.main import app
    client = TestClient(app)
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert "version" in data


def test_app_has_correct_title() -> None:
    from anime_mirror.main import app
    assert app.title == "Anime Mirror"


def test_index_serves_single_page() -> None:
    from anime_mirror.main import app
    response = TestClient(app).get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "ANIME MIRROR" in response.text
    assert 'accept="image/*"' in response.text


def test_static_script_served() -> None:
    from anime_mirror.main import app
    response = TestClient(app).get("/static/app.js")
    assert response.status_code == 200
    assert "/api/mirror" in response.text


def test_static_script_debounces_and_chains_name_updates() -> None:
    """Name PUTs are debounced and each waits for the previous one."""
    from anime_mirror.main import app
    script = TestClient(app).get("/static/app.js").text
    assert "NAME_DEBOUNCE_MS" in script
    assert "setTimeout(flushName, NAME_DEBOUNCE_MS)" in script
    assert "nameSync = settled(nameSync).then(" in script


def test_lifespan_initializes_controller() -> None:
    """With an API key configured, startup wires the controller."""
    from anime_mirror.main import app
    from anime_mirror.services.controller import MirrorController

    with TestClient(app) as client:
        assert isinstance(app.state.controller, MirrorController)
        assert client.get("/health").json()["services"]["generation"] == "ok"


def test_lifespan_degraded_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Missing key: app still starts, health reports unavailable, API returns 503."""
    from anime_mirror.core.config import get_settings
    from anime_mirror.main import app

    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.chdir("/")  # keep any local .env out of the way
    get_settings.cache_clear()

    with TestClient(app) as client:
        assert client.get("/health").json()["services"]["generation"] == "unavailable"
        assert client.get("/api/mirror/state").status_code == 503
