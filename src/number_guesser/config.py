"""Runtime configuration for Number Guesser."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="NUMBER_GUESSER_", env_file=".env", extra="ignore")

    app_name: str = "number-guesser"
    log_level: str = "INFO"

    generation_host: str = Field(
        default="http://127.0.0.1:11434",
        description="Base URL of the Ollama-compatible text generation service.",
    )
    generation_model: str = "glados"
    default_spice: str = Field(default="medium", description="Narration intensity before the hot threshold.")
    hot_after_attempts: int = Field(default=6, ge=0)
    generation_timeout_seconds: float = Field(default=30.0, gt=0)
    probe_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for the preflight probe; keep it shorter than the generation timeout.",
    )

    min_value: int = 0
    max_value: int = 100

    speech_enabled: bool = False
    speech_endpoint: str = "http://127.0.0.1:8124/synthesize/"
    speech_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    speech_timeout_seconds: float = Field(default=30.0, gt=0)
    speech_ping_timeout_seconds: float = Field(default=5.0, gt=0)
    speech_log_lines: bool = False

    telemetry_enabled: bool = True

    @model_validator(mode="after")
    def check_bounds(self) -> "Settings":
        if self.min_value > self.max_value:
            raise ValueError(f"min_value ({self.min_value}) must not exceed max_value ({self.max_value})")
        if self.probe_timeout_seconds >= self.generation_timeout_seconds:
            raise ValueError(
                f"probe_timeout_seconds ({self.probe_timeout_seconds}) must be shorter than "
                f"generation_timeout_seconds ({self.generation_timeout_seconds})"
            )
        return self


settings = Settings()
