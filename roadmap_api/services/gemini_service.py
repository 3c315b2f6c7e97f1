import asyncio
import json
import logging
import re
from typing import Any, Callable, List, Optional, Protocol, Sequence

from google import genai

from roadmap_api.errors import (
    ConfigurationError,
    ExtractionError,
    ParseError,
    RateLimitError,
    classify_backend_error,
)
from roadmap_api.services.roadmap_prompt import build_prompt

logger = logging.getLogger(__name__)


class GenerativeBackend(Protocol):
    def generate_content(self, model: str, prompt: str) -> Any: ...


class GeminiBackend:
    """Thin wrapper over the google-genai client for a single credential."""

    def __init__(self, api_key: str):
        self.client = genai.Client(api_key=api_key)

    def generate_content(self, model: str, prompt: str) -> Any:
        return self.client.models.generate_content(
            model=model,
            contents=[{"role": "user", "parts": [{"text": prompt}]}],
        )


def _lookup(value: Any, *path: Any) -> Any:
    for step in path:
        if value is None:
            return None
        if isinstance(step, int):
            value = value[step]
        elif isinstance(value, dict):
            value = value.get(step)
        else:
            value = getattr(value, step, None)
    return value


def _text_field(result: Any) -> Any:
    return _lookup(result, "text")


def _response_text_field(result: Any) -> Any:
    return _lookup(result, "response", "text")


def _candidate_part_text(result: Any) -> Any:
    return _lookup(result, "candidates", 0, "content", "parts", 0, "text")


# Tried in order; the first non-empty string wins
TEXT_EXTRACTORS: List[Callable[[Any], Any]] = [
    _text_field,
    _response_text_field,
    _candidate_part_text,
]


def extract_text(result: Any) -> str:
    for extractor in TEXT_EXTRACTORS:
        try:
            text = extractor(result)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError):
            continue
        if isinstance(text, str) and text:
            return text
    logger.error("Unexpected Gemini response structure: %r", result)
    raise ExtractionError()


def clean_gemini_output(text: str) -> str:
    """Removes markdown-style ```json and ``` from Gemini output."""
    text = re.sub(r"^```(?:json)?\s*", "", text.strip(), flags=re.IGNORECASE)
    text = re.sub(r"\s*```$", "", text.strip())
    return text.strip()


def _reject_constant(token: str) -> Any:
    raise ParseError(
        f"Unexpected token {token} is not valid JSON", error_type="JSONDecodeError"
    )


def parse_roadmap(text: str) -> Any:
    cleaned = clean_gemini_output(text)
    try:
        # NaN and Infinity are not JSON and cannot be rendered back out
        return json.loads(cleaned, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        logger.error("Gemini returned invalid JSON: %s", e)
        raise ParseError(str(e), error_type=e.__class__.__name__) from e


class RoadmapGenerator:
    def __init__(self, backend: GenerativeBackend, models: Sequence[str]):
        self.backend = backend
        self.models = list(models)

    async def call_with_fallback(self, prompt: str) -> Any:
        """
        Tries each model once, in order, with no delay between attempts.
        Only the last failure is surfaced, classified as a rate limit
        or a plain backend failure.
        """
        if not self.models:
            raise ConfigurationError("No Gemini model identifiers configured.")

        last_error: Optional[Exception] = None
        for index, model in enumerate(self.models):
            logger.info("Attempting to generate content with model: %s", model)
            try:
                return await asyncio.to_thread(
                    self.backend.generate_content, model, prompt
                )
            except Exception as e:
                last_error = e
                if index + 1 < len(self.models):
                    logger.warning(
                        "%s failed, trying %s: %s", model, self.models[index + 1], e
                    )
                else:
                    logger.warning("%s failed, no models left: %s", model, e)

        error = classify_backend_error(last_error)
        if isinstance(error, RateLimitError):
            logger.warning("Gemini quota exhausted on every configured model")
        if error is last_error:
            raise error
        raise error from last_error

    async def generate(self, goal: str) -> Any:
        prompt = build_prompt(goal)
        result = await self.call_with_fallback(prompt)

        logger.info("Generation successful, extracting text...")
        text = extract_text(result)
        logger.debug("Gemini roadmap raw response:\n%s", text)
        return parse_roadmap(text)
