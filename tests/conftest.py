import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.config import get_settings

WALLET = "0x1111111111111111111111111111111111111111"


@pytest.fixture
def client():
    app = create_app()
    with TestClient(app) as client:
        yield client


@pytest.fixture
def wallet():
    return WALLET


@pytest.fixture(autouse=True)
def _configure_llm(monkeypatch, request):
    get_settings.cache_clear()
    if request.node.get_closest_marker("use_llm"):
        yield
        get_settings.cache_clear()
        return
    monkeypatch.setenv("LLM_ENABLED", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
