# chart projector: mood entries to a (date, intensity) line series

from datetime import datetime, tzinfo
from typing import Optional

from pydantic import BaseModel

from cbt_tracker.models.entry import MoodEntry


class ChartPoint(BaseModel):
    date: str
    intensity: int


def format_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """short month/day/year date in `tz`, or the local zone when none is given. no zero padding"""
    value = value.astimezone(tz)
    return f"{value.month}/{value.day}/{value.year}"


def project_series(entries: list[MoodEntry], tz: Optional[tzinfo] = None) -> list[ChartPoint]:
    """one point per entry in list order. no binning or smoothing."""
    return [
        ChartPoint(date=format_date(entry.created_at, tz), intensity=entry.emotion_intensity)
        for entry in entries
    ]


def should_render(series: list[ChartPoint]) -> bool:
    return len(series) > 0
