import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Timecard"
    data_dir: Path = Field(
        default=Path.home() / ".timecard",
        description="Directory holding saved timesheets and the preferences file",
    )
    log_level: str = "WARNING"
    autosave_delay_seconds: float = Field(default=1.0, ge=0, description="Quiet period before an auto-save fires")
    request_timeout_seconds: float = Field(default=10.0, gt=0, description="Approval service request timeout")

    model_config = SettingsConfigDict(env_prefix="TIMECARD_", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def saves_dir(self) -> Path:
        return self.data_dir / "saves"

    @property
    def preferences_path(self) -> Path:
        return self.data_dir / "settings.json"


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("TIMECARD_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None
