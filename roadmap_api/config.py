import json
from typing import Annotated, List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

load_dotenv()

DEFAULT_GEMINI_MODELS = [
    "gemini-2.0-flash",
    "gemini-1.5-flash-latest",
    "gemini-1.5-pro-latest",
]


class Settings(BaseSettings):
    # GEMINI_API_KEY wins over the API_KEY alias when both are set
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "gemini_api_key"),
    )
    # Ordered fallback chain, e.g. GEMINI_MODELS="gemini-2.0-flash,gemini-1.5-pro"
    gemini_models: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_GEMINI_MODELS),
        validation_alias=AliasChoices("GEMINI_MODELS", "gemini_models"),
    )
    log_level: str = Field(
        default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level")
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("gemini_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("gemini_models", mode="before")
    @classmethod
    def split_models(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                value = json.loads(value)
            else:
                value = value.split(",")
        models = [str(m).strip() for m in value if str(m).strip()]
        if not models:
            raise ValueError("At least one Gemini model identifier is required.")
        return models

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)


def get_settings() -> Settings:
    # Built per request so a key set after startup is picked up
    return Settings()
