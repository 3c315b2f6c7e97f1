from typing import Any, Dict, Optional

RATE_LIMIT_MESSAGE = "AI Service is busy. Please try again in 30 seconds."
RATE_LIMIT_DETAILS = "Quota limit reached for the free tier."


class RoadmapError(Exception):
    """
    Base error for the roadmap endpoint.
    Every subclass knows its HTTP status and renders its own JSON body.
    """

    status_code = 500
    error = "Internal Server Error"

    def __init__(
        self,
        details: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(details or self.error)
        self.details = details
        self.error_type = error_type

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"error": self.error}
        if self.details:
            content["details"] = self.details
        if self.error_type:
            content["type"] = self.error_type
        return content


class ValidationError(RoadmapError):
    status_code = 400
    error = "Goal is required"


class MethodNotAllowedError(RoadmapError):
    status_code = 405
    error = "Method not allowed"


class ConfigurationError(RoadmapError):
    status_code = 500
    error = "Server configuration error"


class BackendUnavailableError(RoadmapError):
    """Every configured model failed; carries the last failure's message."""


class RateLimitError(BackendUnavailableError):
    status_code = 429
    error = RATE_LIMIT_MESSAGE

    def __init__(self, details: Optional[str] = RATE_LIMIT_DETAILS):
        super().__init__(details)


class ExtractionError(RoadmapError):
    def __init__(self, details: str = "Could not extract text from AI response"):
        super().__init__(details)


class ParseError(RoadmapError):
    pass


def is_rate_limited(exc: BaseException) -> bool:
    # google-genai APIError exposes `code` (int) and `status` (str)
    for attr in ("code", "status", "status_code"):
        value = getattr(exc, attr, None)
        if value == 429 or value == "429" or value == "RESOURCE_EXHAUSTED":
            return True
    return "429" in str(exc)


def classify_backend_error(exc: BaseException) -> BackendUnavailableError:
    if isinstance(exc, BackendUnavailableError):
        return exc
    if is_rate_limited(exc):
        return RateLimitError()
    return BackendUnavailableError(
        str(exc) or exc.__class__.__name__, error_type=exc.__class__.__name__
    )


def unexpected_error(exc: BaseException) -> RoadmapError:
    return RoadmapError(str(exc), error_type=exc.__class__.__name__)
