"""Request bodies for the JSON API."""

from pydantic import BaseModel, Field

from ..models.exercises import MuscleGroup
from ..models.preferences import AppLanguage, StatType, WeightUnit


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    muscle_groups: list[MuscleGroup] = Field(..., min_length=1)
    description: str = ""
    instructions: str = ""


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    muscle_groups: list[MuscleGroup] | None = None
    description: str | None = None
    instructions: str | None = None


class FavoriteUpdate(BaseModel):
    is_favorite: bool


class ProgramCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: str = ""
    preset_icon_name: str | None = None
    duration_minutes: int | None = Field(None, ge=1)
    exercise_ids: list[str] = []


class ProgramUpdate(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    preset_icon_name: str | None = None
    duration_minutes: int | None = Field(None, ge=1)


class SettingsEntry(BaseModel):
    """One exercise's settings. `weight` is in the preferred unit."""

    exercise_id: str
    sets: int = Field(3, ge=0)
    reps: int = Field(10, ge=0)
    weight: float = Field(0.0, ge=0)
    rest_seconds: int = Field(60, ge=0)
    notes: str = ""


class SettingsEntryUpdate(BaseModel):
    sets: int | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    weight: float | None = Field(None, ge=0)
    rest_seconds: int | None = Field(None, ge=0)
    notes: str | None = None


class WeightUnitUpdate(BaseModel):
    unit: WeightUnit


class LanguageUpdate(BaseModel):
    language: AppLanguage


class HomeStatsUpdate(BaseModel):
    stats: list[StatType]


class MoveRequest(BaseModel):
    source: int = Field(..., ge=0)
    destination: int = Field(..., ge=0)
