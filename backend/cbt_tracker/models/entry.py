# mood entry models: thought records shown on the dashboard
# field names here are the storage names; the client draft renames onto them

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from cbt_tracker.models.labels import CognitiveDistortion, parse_distortion

# fields a user may write; id, owner and created_at belong to the store
EDITABLE_FIELDS = (
    "situation",
    "automatic_thought",
    "emotion",
    "emotion_intensity",
    "cognitive_distortion",
    "rational_response",
    "outcome",
)

REQUIRED_TEXT_FIELDS = ("situation", "automatic_thought", "emotion", "rational_response")


class MoodEntryCreate(BaseModel):
    """payload for a new thought record"""
    situation: str = Field(..., min_length=1)
    automatic_thought: str = Field(..., min_length=1)
    emotion: str = Field(..., min_length=1)
    emotion_intensity: int = Field(..., ge=1, le=10, description="intensity 1-10")
    cognitive_distortion: Optional[CognitiveDistortion] = None
    rational_response: str = Field(..., min_length=1)
    outcome: str = ""

    @field_validator("cognitive_distortion", mode="before")
    @classmethod
    def coerce_distortion(cls, v):
        return parse_distortion(v)


class MoodEntryUpdate(BaseModel):
    """partial update: only fields present in the request are written"""
    situation: Optional[str] = Field(None, min_length=1)
    automatic_thought: Optional[str] = Field(None, min_length=1)
    emotion: Optional[str] = Field(None, min_length=1)
    emotion_intensity: Optional[int] = Field(None, ge=1, le=10)
    cognitive_distortion: Optional[CognitiveDistortion] = None
    rational_response: Optional[str] = Field(None, min_length=1)
    outcome: Optional[str] = None

    @field_validator("cognitive_distortion", mode="before")
    @classmethod
    def coerce_distortion(cls, v):
        return parse_distortion(v)

    @field_validator(
        "situation", "automatic_thought", "emotion", "emotion_intensity", "rational_response", "outcome"
    )
    @classmethod
    def not_null(cls, v):
        # only the distortion may be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class MoodEntry(BaseModel):
    """a stored thought record as returned by the store"""
    id: str
    created_at: datetime
    situation: str
    automatic_thought: str
    emotion: str
    emotion_intensity: int
    cognitive_distortion: Optional[CognitiveDistortion] = None
    rational_response: str
    outcome: str = ""

    @field_validator("cognitive_distortion", mode="before")
    @classmethod
    def coerce_distortion(cls, v):
        return parse_distortion(v)
