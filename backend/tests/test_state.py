# tests for the pure dashboard state functions

import pytest
from datetime import datetime, timezone

from cbt_tracker.client import state as st
from cbt_tracker.client.errors import ValidationError
from cbt_tracker.models.entry import MoodEntry
from cbt_tracker.models.labels import CognitiveDistortion


def _entry(entry_id="e1", **overrides):
    fields = {
        "id": entry_id,
        "created_at": datetime(2025, 6, 10, 12, tzinfo=timezone.utc),
        "situation": "Missed the bus",
        "automatic_thought": "The day is ruined",
        "emotion": "Frustration",
        "emotion_intensity": 6,
        "cognitive_distortion": "All or nothing thinking",
        "rational_response": "One late start is fine",
        "outcome": "",
    }
    fields.update(overrides)
    return MoodEntry.model_validate(fields)


def _filled_state():
    s = st.DashboardState()
    for field, value in [
        ("situation", "Meeting"),
        ("automaticThought", "I'll fail"),
        ("emotion", "Anxiety"),
        ("emotionIntensity", 8),
        ("cognitiveDistortion", "Catastrophizing"),
        ("rationalResponse", "I've prepared well"),
    ]:
        s = st.set_field(s, field, value)
    return s


class TestDraft:
    """new-entry form"""

    def test_defaults(self):
        draft = st.DashboardState().draft
        assert draft.situation == ""
        assert draft.emotion_intensity == 5
        assert draft.cognitive_distortion == ""

    def test_set_field_touches_one_field(self):
        before = st.DashboardState()
        after = st.set_field(before, "automaticThought", "I'll fail")
        assert after.draft.automatic_thought == "I'll fail"
        assert after.draft.model_dump(exclude={"automatic_thought"}) == before.draft.model_dump(
            exclude={"automatic_thought"}
        )
        # input state is not mutated
        assert before.draft.automatic_thought == ""

    def test_set_field_by_storage_name(self):
        s = st.set_field(st.DashboardState(), "rational_response", "Balanced")
        assert s.draft.rational_response == "Balanced"

    def test_set_unknown_field(self):
        with pytest.raises(KeyError):
            st.set_field(st.DashboardState(), "mood", 3)

    def test_reset(self):
        s = st.reset_draft(_filled_state())
        assert s.draft == st.EntryDraft()

    def test_payload_renames_to_storage_names(self):
        payload = st.draft_payload(_filled_state().draft)
        assert payload == {
            "situation": "Meeting",
            "automatic_thought": "I'll fail",
            "emotion": "Anxiety",
            "emotion_intensity": 8,
            "cognitive_distortion": "Catastrophizing",
            "rational_response": "I've prepared well",
            "outcome": "",
        }

    def test_payload_without_distortion(self):
        s = st.set_field(_filled_state(), "cognitiveDistortion", "")
        assert st.draft_payload(s.draft)["cognitive_distortion"] is None

    @pytest.mark.parametrize("field", ["situation", "automaticThought", "emotion", "rationalResponse"])
    def test_required_fields(self, field):
        s = st.set_field(_filled_state(), field, "")
        with pytest.raises(ValidationError) as exc:
            st.draft_payload(s.draft)
        assert "is required" in str(exc.value)

    def test_outcome_optional(self):
        s = st.set_field(_filled_state(), "outcome", "")
        assert st.draft_payload(s.draft)["outcome"] == ""

    def test_intensity_range(self):
        s = st.set_field(_filled_state(), "emotionIntensity", 11)
        with pytest.raises(ValidationError, match="Intensity"):
            st.draft_payload(s.draft)

    def test_unknown_distortion(self):
        s = st.set_field(_filled_state(), "cognitiveDistortion", "Wishful thinking")
        with pytest.raises(ValidationError):
            st.draft_payload(s.draft)


class TestEdit:
    """edit mode"""

    def test_begin_edit_seeds_from_record(self):
        entry = _entry()
        s = st.begin_edit(st.replace_entries(st.DashboardState(), [entry]), entry)
        assert s.editing.entry_id == "e1"
        assert s.editing.draft["situation"] == "Missed the bus"
        assert s.editing.draft["cognitive_distortion"] == "All or nothing thinking"

    def test_patch_has_only_changed_field(self):
        entry = _entry()
        s = st.begin_edit(st.replace_entries(st.DashboardState(), [entry]), entry)
        s = st.set_edit_field(s, "emotion", "Irritation")
        assert st.edit_patch(s) == {"emotion": "Irritation"}

    def test_patch_empty_on_noop(self):
        entry = _entry()
        s = st.begin_edit(st.replace_entries(st.DashboardState(), [entry]), entry)
        s = st.set_edit_field(s, "emotion", "Frustration")
        assert st.edit_patch(s) == {}

    def test_patch_accepts_form_field_names(self):
        entry = _entry()
        s = st.begin_edit(st.replace_entries(st.DashboardState(), [entry]), entry)
        s = st.set_edit_field(s, "emotionIntensity", 3)
        assert st.edit_patch(s) == {"emotion_intensity": 3}

    def test_patch_rejects_empty_required(self):
        entry = _entry()
        s = st.begin_edit(st.replace_entries(st.DashboardState(), [entry]), entry)
        s = st.set_edit_field(s, "situation", "")
        with pytest.raises(ValidationError):
            st.edit_patch(s)

    def test_cancel_leaves_record(self):
        entry = _entry()
        s = st.begin_edit(st.replace_entries(st.DashboardState(), [entry]), entry)
        s = st.set_edit_field(s, "situation", "Something else")
        s = st.set_edit_field(s, "emotion_intensity", 1)
        s = st.cancel_edit(s)
        assert s.editing is None
        assert s.entries == [entry]

    def test_set_edit_field_outside_edit_mode(self):
        s = st.DashboardState()
        assert st.set_edit_field(s, "emotion", "x") is s


class TestReconcile:
    """merge rules for the local list"""

    def test_apply_patch_overlays_one_entry(self):
        a, b = _entry("a"), _entry("b")
        s = st.replace_entries(st.DashboardState(), [a, b])
        s = st.begin_edit(s, a)
        s = st.apply_patch(s, "a", {"cognitive_distortion": "Labeling", "outcome": "Better"})
        assert s.editing is None
        assert s.entries[0].cognitive_distortion is CognitiveDistortion.LABELING
        assert s.entries[0].outcome == "Better"
        assert s.entries[0].situation == a.situation
        assert s.entries[1] == b

    def test_remove_entry(self):
        s = st.replace_entries(st.DashboardState(), [_entry("a"), _entry("b"), _entry("c")])
        s = st.remove_entry(s, "b")
        assert [e.id for e in s.entries] == ["a", "c"]

    def test_remove_missing_entry_is_noop(self):
        s = st.replace_entries(st.DashboardState(), [_entry("a")])
        assert [e.id for e in st.remove_entry(s, "zzz").entries] == ["a"]

