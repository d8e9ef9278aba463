# worksheet models: payload shapes for the four cbt worksheets
# payloads keep the form's camelCase keys when stored

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, RootModel, ValidationError, field_validator, model_validator

from cbt_tracker.models.labels import (
    CognitiveDistortion,
    LifeDomain,
    ValueCategory,
    parse_distortion,
)


class WorksheetKind(str, Enum):
    THOUGHT_RECORD = "thought-record"
    ACTIVITY_LOG = "activity-log"
    VALUES_CLARIFICATION = "values-clarification"
    WEEKLY_PROGRESS = "weekly-progress"


class ThoughtRecord(BaseModel):
    situation: str = ""
    automatic_thought: str = Field("", alias="automaticThought")
    emotion: str = ""
    emotion_intensity: int = Field(5, ge=1, le=10, alias="emotionIntensity")
    evidence_for: str = Field("", alias="evidenceFor")
    evidence_against: str = Field("", alias="evidenceAgainst")
    cognitive_distortion: Optional[CognitiveDistortion] = Field(None, alias="cognitiveDistortion")
    balanced_thought: str = Field("", alias="balancedThought")
    new_emotion_intensity: int = Field(5, ge=1, le=10, alias="newEmotionIntensity")

    model_config = {"populate_by_name": True}

    @field_validator("cognitive_distortion", mode="before")
    @classmethod
    def coerce_distortion(cls, v):
        return parse_distortion(v)


class DailyActivity(BaseModel):
    domain: LifeDomain = LifeDomain.WORK_SCHOOL
    hours: str = ""
    mood_before: int = Field(5, ge=1, le=10, alias="moodBefore")
    mood_after: int = Field(5, ge=1, le=10, alias="moodAfter")

    model_config = {"populate_by_name": True}


class ActivityLog(BaseModel):
    activities: list[DailyActivity] = Field(..., min_length=1)
    date: date


class ValueRating(BaseModel):
    importance: int = Field(5, ge=1, le=10)
    action: str = ""


class ValuesClarification(RootModel[dict[ValueCategory, ValueRating]]):
    pass


class WeeklyProgress(BaseModel):
    weekly_goals: list[str] = Field(
        default_factory=lambda: ["", "", ""], min_length=3, max_length=3, alias="weeklyGoals"
    )
    achievements: str = ""
    challenges: str = ""
    next_steps: str = Field("", alias="nextSteps")

    model_config = {"populate_by_name": True}


WORKSHEET_PAYLOADS = {
    WorksheetKind.THOUGHT_RECORD: ThoughtRecord,
    WorksheetKind.ACTIVITY_LOG: ActivityLog,
    WorksheetKind.VALUES_CLARIFICATION: ValuesClarification,
    WorksheetKind.WEEKLY_PROGRESS: WeeklyProgress,
}


def dump_payload(payload: BaseModel) -> dict:
    """json-ready document with the form's key names"""
    return payload.model_dump(mode="json", by_alias=True)


class WorksheetCreate(BaseModel):
    """a worksheet submission: data is checked against the shape for its type"""
    type: WorksheetKind
    data: dict

    @model_validator(mode="after")
    def check_payload(self):
        try:
            payload = WORKSHEET_PAYLOADS[self.type].model_validate(self.data)
        except ValidationError as e:
            err = e.errors()[0]
            where = ".".join(str(part) for part in err["loc"])
            raise ValueError(f"Invalid {self.type.value} data at {where or 'root'}: {err['msg']}")
        self.data = dump_payload(payload)
        return self


class Worksheet(BaseModel):
    """a stored worksheet submission"""
    id: str
    user_id: str
    type: WorksheetKind
    data: dict
    created_at: datetime
