"""Runtime settings from the environment (A4FRAMER_* variables or a .env file)."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FramerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='A4FRAMER_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        populate_by_name=True,
    )

    # Gemini key for caption suggestions; empty disables them
    api_key: str = Field(
        default='',
        validation_alias=AliasChoices('A4FRAMER_API_KEY', 'GEMINI_API_KEY', 'API_KEY'),
    )
    caption_model: str = 'gemini-3-flash-preview'
    caption_prompt: str = (
        'Suggest a short, elegant 1-3 word title for this photo suitable for a '
        'framed print. Output only the words.'
    )

    # Pause between batch items, seconds
    export_delay_sec: float = Field(default=0.5, ge=0)
    log_level: str = 'INFO'


@lru_cache
def get_settings() -> FramerSettings:
    return FramerSettings()
