from __future__ import annotations
import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .core.logging import get_logger

logger = get_logger(__name__)


class Preferences(BaseModel):
    """User-editable options, stored as camelCase JSON next to the saved timesheets."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    employee_name: str = ""
    auto_fill_from_template: bool = False
    show_add_hours_button: bool = False
    salary_mode: bool = False
    server_url: str = ""
    supervisor_token: Optional[str] = Field(default=None, description="Remembered supervisor session")

    @field_validator("server_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class PreferencesStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Preferences:
        """Return saved preferences, or defaults when the file is missing or unreadable."""
        if not self.path.exists():
            return Preferences()
        try:
            return Preferences.model_validate(json.loads(self.path.read_text()))
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("preferences_load_failed", path=str(self.path), error=str(exc))
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = preferences.model_dump(by_alias=True, exclude_none=True)
        self.path.write_text(json.dumps(payload, indent=2))
        logger.info("preferences_saved", path=str(self.path))

    def update(self, **changes) -> Preferences:
        preferences = Preferences.model_validate({**self.load().model_dump(), **changes})
        self.save(preferences)
        return preferences
