# triage_intake/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    openai_api_key: str | None = Field(None, validation_alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(None, validation_alias="OPENAI_BASE_URL")
    llm_model: str = Field("llama-3.3-70b-versatile", validation_alias="LLM_MODEL")
    llm_max_retries: int = Field(1, validation_alias="LLM_MAX_RETRIES")

    summary_timeout_seconds: float = Field(30.0, validation_alias="SUMMARY_TIMEOUT_SECONDS")
    emergency_number: str = Field("1122", validation_alias="EMERGENCY_NUMBER")
    default_language: str = Field("en", validation_alias="DEFAULT_LANGUAGE")

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], validation_alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
