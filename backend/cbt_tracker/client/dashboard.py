# dashboard controller: mood entries, the new-entry form, edit mode and chart
# keeps the local list consistent with the store after every mutation

import logging
from typing import Any, Callable, Optional

from cbt_tracker.models.entry import MoodEntry
from cbt_tracker.client.chart import ChartPoint, project_series, should_render
from cbt_tracker.client.errors import TrackerError, ValidationError
from cbt_tracker.client.session import GuardedView, SessionGuard
from cbt_tracker.client.store import ENTRIES
from cbt_tracker.client import state as st

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Delete this entry?"


class DashboardController(GuardedView):
    """owns one DashboardState.

    merge rules for the local list: full replace after refresh (and so after
    insert), patch overlay after update, filter-removal after delete.
    `confirm` is asked before every delete and must return a bool.
    """

    def __init__(
        self,
        store,
        confirm: Callable[[str], bool],
        guard: Optional[SessionGuard] = None,
    ):
        super().__init__(store, guard)
        self.confirm = confirm
        self.state = st.DashboardState()

    async def on_activate(self):
        await self.refresh()

    @property
    def series(self) -> list[ChartPoint]:
        return project_series(self.state.entries)

    @property
    def show_chart(self) -> bool:
        return should_render(self.series)

    def _fail(self, message: str):
        self._update(error=message, loading=False)

    # list synchronizer

    async def refresh(self) -> bool:
        """replace the local list with the store's, oldest first"""
        self._update(loading=True)
        try:
            rows = await self.store.list(ENTRIES, order_by="created_at", ascending=True)
        except TrackerError as e:
            logger.warning(f"Could not load entries: {e}")
            self._fail(str(e))
            return False
        self.state = st.replace_entries(self.state, [MoodEntry.model_validate(row) for row in rows])
        self._update(loading=False)
        return True

    def remove_local(self, entry_id: str):
        self.state = st.remove_entry(self.state, entry_id)

    async def delete(self, entry_id: str) -> bool:
        if self.state.loading:
            return False
        if not self.confirm(DELETE_PROMPT):
            return False

        self._update(loading=True, error=None)
        try:
            await self.store.delete(ENTRIES, entry_id)
        except TrackerError as e:
            logger.warning(f"Could not delete entry {entry_id}: {e}")
            self._fail(str(e))
            return False
        self.remove_local(entry_id)
        self._update(loading=False)
        return True

    # new-entry form

    def set_field(self, field: str, value: Any):
        self.state = st.set_field(self.state, field, value)

    def reset(self):
        self.state = st.reset_draft(self.state)

    def toggle_form(self):
        self.state = st.toggle_form(self.state)

    async def submit(self) -> bool:
        """insert the draft. the draft survives any failure."""
        if self.state.loading:
            return False
        try:
            payload = st.draft_payload(self.state.draft)
        except ValidationError as e:
            self._fail(str(e))
            return False

        self._update(loading=True, error=None)
        try:
            await self.store.insert(ENTRIES, payload)
        except TrackerError as e:
            logger.warning(f"Could not save entry: {e}")
            self._fail(str(e))
            return False

        self.state = st.reset_draft(self.state)
        self._update(loading=False, show_form=False)
        await self.refresh()
        return True

    # edit mode

    def begin_edit(self, entry: MoodEntry):
        self.state = st.begin_edit(self.state, entry)

    def set_edit_field(self, field: str, value: Any):
        self.state = st.set_edit_field(self.state, field, value)

    def cancel_edit(self):
        self.state = st.cancel_edit(self.state)

    async def commit_edit(self, entry_id: str) -> bool:
        """send the changed fields and overlay them locally, no re-fetch"""
        editing = self.state.editing
        if editing is None or editing.entry_id != entry_id or self.state.loading:
            return False
        try:
            patch = st.edit_patch(self.state)
        except ValidationError as e:
            self._fail(str(e))
            return False

        if not patch:
            self.cancel_edit()
            return True

        self._update(loading=True, error=None)
        try:
            await self.store.update(ENTRIES, entry_id, patch)
        except TrackerError as e:
            logger.warning(f"Could not update entry {entry_id}: {e}")
            self._fail(str(e))
            return False

        self.state = st.apply_patch(self.state, entry_id, patch)
        self._update(loading=False)
        return True
