import json
from typing import Any, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from roadmap_api.config import Settings, get_settings
from roadmap_api.dependencies import get_backend_factory
from roadmap_api.main import app

MODELS = ["model-a", "model-b", "model-c"]

SAMPLE_ROADMAP = {
    "title": "Learn Python",
    "nodes": [
        {
            "id": "main",
            "label": "Python Mastery",
            "level": 0,
            "description": "Become productive with Python",
            "category": "goal",
            "timeEstimate": "6-12 months",
            "children": ["basics1", "ghost"],
            "resources": [
                {
                    "title": "Python docs",
                    "type": "documentation",
                    "url": "https://docs.python.org/3/",
                }
            ],
        },
        {
            "id": "basics1",
            "label": "Syntax Basics",
            "level": 3,
            "description": "Variables, loops and functions",
            "category": "basics",
            "timeEstimate": "2 weeks",
            "children": [],
            "resources": [],
        },
    ],
}


class FakeResult:
    def __init__(self, text):
        self.text = text


class FakeBackend:
    """
    Records every call. `outcomes` maps a model name to either an
    exception (raised) or a result object (returned).
    """

    def __init__(self, outcomes=None, default: Any = None):
        self.outcomes = outcomes or {}
        self.default = default
        self.calls: List[Tuple[str, str]] = []

    def generate_content(self, model: str, prompt: str) -> Any:
        self.calls.append((model, prompt))
        outcome = self.outcomes.get(model, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeBackendFactory:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.keys: List[str] = []

    def __call__(self, api_key: str) -> FakeBackend:
        self.keys.append(api_key)
        return self.backend


class RateLimited(Exception):
    def __init__(self, message="Resource exhausted"):
        super().__init__(message)
        self.code = 429


def make_settings(api_key: Optional[str] = "test-key", models=None) -> Settings:
    return Settings(
        _env_file=None,
        gemini_api_key=api_key,
        gemini_models=list(models or MODELS),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GEMINI_API_KEY", "API_KEY", "GEMINI_MODELS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend():
    return FakeBackend(default=FakeResult(json.dumps(SAMPLE_ROADMAP)))


@pytest.fixture
def factory(backend):
    return FakeBackendFactory(backend)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings, factory):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_backend_factory] = lambda: factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
