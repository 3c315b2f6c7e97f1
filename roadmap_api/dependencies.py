import logging
from typing import Callable

from fastapi import Depends

from roadmap_api.config import Settings, get_settings
from roadmap_api.errors import ConfigurationError
from roadmap_api.services.gemini_service import (
    GeminiBackend,
    GenerativeBackend,
    RoadmapGenerator,
)

logger = logging.getLogger(__name__)

BackendFactory = Callable[[str], GenerativeBackend]


def get_backend_factory() -> BackendFactory:
    return GeminiBackend


def get_roadmap_generator(
    settings: Settings = Depends(get_settings),
    backend_factory: BackendFactory = Depends(get_backend_factory),
) -> RoadmapGenerator:
    """
    Builds a generator bound to the configured credential.
    Raises before any backend is created when no key is set.
    """
    if not settings.has_api_key:
        logger.error("No API key found in environment variables")
        raise ConfigurationError(
            "API key not configured. Please set GEMINI_API_KEY or API_KEY "
            "environment variable."
        )
    backend = backend_factory(settings.gemini_api_key)
    return RoadmapGenerator(backend, settings.gemini_models)
