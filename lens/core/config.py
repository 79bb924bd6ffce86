from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "SoloPreneur Lens"
    debug: bool = False

    # API
    frontend_url: str = "http://localhost:3000"

    # Gemini (API_KEY is what the hosted key selector injects)
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )

    # Redis (profile + strategy map persistence)
    redis_url: str = "redis://localhost:6379"

    # Model routing per capability
    text_model: str = "gemini-3-pro-preview"  # web-grounded research
    fast_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-3-pro-image-preview"
    edit_model: str = "gemini-3-pro-image-preview"
    audio_model: str = "gemini-2.5-flash-preview-tts"
    narrator_voice: str = "Kore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def resolve_api_key() -> str:
    """Read the Gemini key fresh from the environment (never from the cached Settings).

    A key swapped by the host mid-session is picked up by the next call.
    """
    return Settings().gemini_api_key


def has_api_key() -> bool:
    """Entitlement check surfaced to the shell before it allows generation."""
    return bool(resolve_api_key().strip())
