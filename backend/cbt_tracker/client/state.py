# dashboard view state and the pure functions that move it forward
# each function returns a new DashboardState and leaves its input untouched

from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from cbt_tracker.models.entry import (
    EDITABLE_FIELDS,
    REQUIRED_TEXT_FIELDS,
    MoodEntry,
    MoodEntryCreate,
    MoodEntryUpdate,
)
from cbt_tracker.client.errors import ValidationError
from cbt_tracker.client.session import ViewState

DEFAULT_INTENSITY = 5

FIELD_LABELS = {
    "situation": "Situation",
    "automatic_thought": "Automatic thought",
    "emotion": "Emotion",
    "emotion_intensity": "Intensity",
    "cognitive_distortion": "Cognitive distortion",
    "rational_response": "Rational response",
    "outcome": "Outcome",
}


class EntryDraft(BaseModel):
    """the new-entry form. aliases are the form's field names,
    attribute names are the storage names."""
    situation: str = ""
    automatic_thought: str = Field("", alias="automaticThought")
    emotion: str = ""
    emotion_intensity: int = Field(DEFAULT_INTENSITY, alias="emotionIntensity")
    cognitive_distortion: str = Field("", alias="cognitiveDistortion")
    rational_response: str = Field("", alias="rationalResponse")
    outcome: str = ""

    model_config = {"populate_by_name": True}


class EditSession(BaseModel):
    entry_id: str
    draft: dict[str, Any]


class DashboardState(ViewState):
    entries: list[MoodEntry] = Field(default_factory=list)
    draft: EntryDraft = Field(default_factory=EntryDraft)
    show_form: bool = False
    loading: bool = False
    editing: Optional[EditSession] = None
    error: Optional[str] = None


def resolve_field(model_cls: type[BaseModel], field: str) -> str:
    """attribute name for a field given by attribute name or alias"""
    if field in model_cls.model_fields:
        return field
    for name, info in model_cls.model_fields.items():
        if info.alias == field:
            return name
    raise KeyError(f"Unknown field: {field}")


def _describe(e: PydanticValidationError) -> str:
    err = e.errors()[0]
    loc = err.get("loc") or ("",)
    label = FIELD_LABELS.get(str(loc[0]), str(loc[0]))
    return f"{label}: {err['msg']}" if label else err["msg"]


def find_entry(state: DashboardState, entry_id: str) -> Optional[MoodEntry]:
    for entry in state.entries:
        if entry.id == entry_id:
            return entry
    return None


# new-entry form

def set_field(state: DashboardState, field: str, value: Any) -> DashboardState:
    name = resolve_field(EntryDraft, field)
    draft = state.draft.model_copy(update={name: value})
    return state.model_copy(update={"draft": draft})


def reset_draft(state: DashboardState) -> DashboardState:
    return state.model_copy(update={"draft": EntryDraft()})


def toggle_form(state: DashboardState) -> DashboardState:
    return state.model_copy(update={"show_form": not state.show_form})


def draft_payload(draft: EntryDraft) -> dict:
    """check required fields and build the insert payload under storage names"""
    for name in REQUIRED_TEXT_FIELDS:
        if not getattr(draft, name):
            raise ValidationError(f"{FIELD_LABELS[name]} is required", field=name)

    try:
        payload = MoodEntryCreate.model_validate(draft.model_dump())
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e
    return payload.model_dump(mode="json")


# edit mode

def begin_edit(state: DashboardState, entry: MoodEntry) -> DashboardState:
    draft = entry.model_dump(mode="json", include=set(EDITABLE_FIELDS))
    return state.model_copy(update={"editing": EditSession(entry_id=entry.id, draft=draft), "error": None})


def set_edit_field(state: DashboardState, field: str, value: Any) -> DashboardState:
    if state.editing is None:
        return state
    name = field if field in EDITABLE_FIELDS else resolve_field(EntryDraft, field)
    editing = state.editing.model_copy(update={"draft": {**state.editing.draft, name: value}})
    return state.model_copy(update={"editing": editing})


def cancel_edit(state: DashboardState) -> DashboardState:
    return state.model_copy(update={"editing": None})


def edit_patch(state: DashboardState) -> dict:
    """fields of the edit draft whose value differs from the stored record"""
    editing = state.editing
    if editing is None:
        return {}
    entry = find_entry(state, editing.entry_id)
    if entry is None:
        raise ValidationError("Entry is no longer in the list")

    try:
        edited = MoodEntryUpdate.model_validate(editing.draft).model_dump(mode="json", exclude_unset=True)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e

    current = entry.model_dump(mode="json", include=set(EDITABLE_FIELDS))
    return {name: value for name, value in edited.items() if current.get(name) != value}


# list reconciliation

def replace_entries(state: DashboardState, entries: list[MoodEntry]) -> DashboardState:
    """full replace after a fetch"""
    return state.model_copy(update={"entries": list(entries)})


def apply_patch(state: DashboardState, entry_id: str, patch: dict) -> DashboardState:
    """overlay an accepted patch on the local copy and leave edit mode"""
    entries = [
        MoodEntry.model_validate({**entry.model_dump(), **patch}) if entry.id == entry_id else entry
        for entry in state.entries
    ]
    return state.model_copy(update={"entries": entries, "editing": None})


def remove_entry(state: DashboardState, entry_id: str) -> DashboardState:
    """drop a deleted record from the local copy"""
    entries = [entry for entry in state.entries if entry.id != entry_id]
    return state.model_copy(update={"entries": entries})
