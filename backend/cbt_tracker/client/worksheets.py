# worksheets controller: the four tabbed cbt worksheets
# submissions are append-only, each save inserts a new worksheet row

import logging
from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from cbt_tracker.models.labels import ValueCategory
from cbt_tracker.models.worksheet import (
    ActivityLog,
    DailyActivity,
    ThoughtRecord,
    ValueRating,
    ValuesClarification,
    WeeklyProgress,
    WorksheetKind,
    dump_payload,
)
from cbt_tracker.client.errors import TrackerError
from cbt_tracker.client.session import GuardedView, ViewState
from cbt_tracker.client.state import resolve_field
from cbt_tracker.client.store import WORKSHEETS

logger = logging.getLogger(__name__)


class WorksheetTab(str, Enum):
    THOUGHT_RECORD = "thought-record"
    ACTIVITY_LOG = "activity-log"
    VALUES = "values"
    PROGRESS = "progress"


class WorksheetsState(ViewState):
    active_tab: WorksheetTab = WorksheetTab.THOUGHT_RECORD
    saving: bool = False
    message: str = ""
    thought_record: ThoughtRecord = Field(default_factory=ThoughtRecord)
    activities: list[DailyActivity] = Field(default_factory=lambda: [DailyActivity()])
    values: dict[ValueCategory, ValueRating] = Field(default_factory=dict)
    progress: WeeklyProgress = Field(default_factory=WeeklyProgress)


def _with_field(model: BaseModel, field: str, value: Any) -> BaseModel:
    return model.model_copy(update={resolve_field(type(model), field): value})


class WorksheetsController(GuardedView):
    def __init__(self, store, guard=None):
        super().__init__(store, guard)
        self.state = WorksheetsState()

    def switch_tab(self, tab: str):
        self._update(active_tab=WorksheetTab(tab))

    def clear_message(self):
        self._update(message="")

    # thought record

    def set_thought_field(self, field: str, value: Any):
        self._update(thought_record=_with_field(self.state.thought_record, field, value))

    async def save_thought_record(self) -> bool:
        saved = await self._save(
            WorksheetKind.THOUGHT_RECORD,
            ThoughtRecord,
            self.state.thought_record.model_dump(),
            "Thought record saved!",
        )
        if saved:
            self._update(thought_record=ThoughtRecord())
        return saved

    # activity log

    def add_activity(self):
        self._update(activities=[*self.state.activities, DailyActivity()])

    def update_activity(self, index: int, field: str, value: Any):
        activities = list(self.state.activities)
        activities[index] = _with_field(activities[index], field, value)
        self._update(activities=activities)

    def remove_activity(self, index: int):
        """the last remaining row stays"""
        if len(self.state.activities) <= 1:
            return
        self._update(activities=[a for i, a in enumerate(self.state.activities) if i != index])

    async def save_activity_log(self, today: Optional[date] = None) -> bool:
        raw = {
            "activities": [a.model_dump() for a in self.state.activities],
            "date": (today or date.today()).isoformat(),
        }
        saved = await self._save(WorksheetKind.ACTIVITY_LOG, ActivityLog, raw, "Activity log saved!")
        if saved:
            self._update(activities=[DailyActivity()])
        return saved

    # values clarification

    def value_for(self, category: str) -> ValueRating:
        """untouched categories read as importance 5 with no action"""
        return self.state.values.get(ValueCategory(category), ValueRating())

    def set_value(self, category: str, importance: Optional[int] = None, action: Optional[str] = None):
        key = ValueCategory(category)
        rating = self.value_for(key)
        if importance is not None:
            rating = rating.model_copy(update={"importance": importance})
        if action is not None:
            rating = rating.model_copy(update={"action": action})
        self._update(values={**self.state.values, key: rating})

    async def save_values(self) -> bool:
        raw = {category: rating.model_dump() for category, rating in self.state.values.items()}
        # values stay on screen after saving
        return await self._save(WorksheetKind.VALUES_CLARIFICATION, ValuesClarification, raw, "Values saved!")

    # weekly progress

    def set_goal(self, index: int, text: str):
        goals = list(self.state.progress.weekly_goals)
        goals[index] = text
        self._update(progress=self.state.progress.model_copy(update={"weekly_goals": goals}))

    def set_progress_field(self, field: str, value: str):
        self._update(progress=_with_field(self.state.progress, field, value))

    async def save_progress(self) -> bool:
        saved = await self._save(
            WorksheetKind.WEEKLY_PROGRESS,
            WeeklyProgress,
            self.state.progress.model_dump(),
            "Progress saved!",
        )
        if saved:
            self._update(progress=WeeklyProgress())
        return saved

    async def _save(self, kind: WorksheetKind, payload_cls: type[BaseModel], raw: Any, success: str) -> bool:
        if self.state.saving:
            return False
        try:
            data = dump_payload(payload_cls.model_validate(raw))
        except PydanticValidationError as e:
            err = e.errors()[0]
            self._update(message=f"Error saving: {err['msg']}")
            return False

        self._update(saving=True, message="")
        try:
            await self.store.insert(WORKSHEETS, {"type": kind.value, "data": data})
        except TrackerError as e:
            logger.warning(f"Could not save {kind.value}: {e}")
            self._update(saving=False, message=f"Error saving: {e}")
            return False

        logger.info(f"Saved {kind.value} worksheet")
        self._update(saving=False, message=success)
        return True
