"""The student's saved grade and class number."""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from schoolwatch.logging import get_logger

logger = get_logger(__name__)

GRADES = range(1, 4)
CLASS_NUMBERS = range(1, 16)


class StudentPreferences(BaseModel):
    """Grade (1-3) and class number (1-15); None or 0 means "not chosen yet"."""

    grade: int | None = Field(default=None, ge=1, le=3)
    classno: int | None = Field(default=None, ge=1, le=15)

    @field_validator("grade", "classno", mode="before")
    @classmethod
    def _zero_is_unset(cls, value):
        # The watch stores 0 for "never picked"
        return None if value == 0 and not isinstance(value, bool) else value

    def resolved(self, default_grade: int = 2, default_classno: int = 6) -> tuple[int, int]:
        """Return (grade, classno) with defaults substituted for unset values."""
        return (self.grade or default_grade, self.classno or default_classno)


class PreferencesStore:
    """Persists StudentPreferences as JSON under the state directory."""

    def __init__(self, state_dir: str = "data/state") -> None:
        self.state_dir = Path(state_dir)
        self.path = self.state_dir / "preferences.json"

    def load(self) -> StudentPreferences:
        if not self.path.exists():
            return StudentPreferences()
        try:
            return StudentPreferences.model_validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning("preferences_unreadable", path=str(self.path), error=str(e))
            return StudentPreferences()

    def save(self, preferences: StudentPreferences) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(preferences.model_dump(), indent=2), encoding="utf-8"
        )
        logger.info(
            "preferences_saved", grade=preferences.grade, classno=preferences.classno
        )
