"""Adapter between a drag/drop calendar widget and the event endpoints.

The widget itself only renders; it reports drops, range selections and
clicks to `CalendarAdapter`, which talks to the API and keeps the event
list and the edit-form state the widget reads back.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import httpx

from .api import ApiError, PenguinClient

logger = logging.getLogger("penguin.client")

DEFAULT_COLOR = "#3788d8"


def widget_options() -> Dict[str, Any]:
    """Configuration handed to the calendar widget on render."""
    return {
        "plugins": ["dayGrid", "timeGrid", "interaction"],
        "initialView": "dayGridMonth",
        "headerToolbar": {
            "left": "prev,next today",
            "center": "title",
            "right": "dayGridMonth,timeGridWeek,timeGridDay",
        },
        "editable": True,
        "selectable": True,
        "selectMirror": True,
        "dayMaxEvents": True,
        "weekends": True,
        "height": "auto",
    }


class CalendarAdapter:
    def __init__(self, client: PenguinClient):
        self.client = client
        self.events: List[Dict[str, Any]] = []
        self.selected_event: Optional[Dict[str, Any]] = None
        self.show_form = False

    def mount(self) -> None:
        self.fetch_events()

    def fetch_events(self) -> None:
        try:
            self.events = self.client.list_events()
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Error fetching events: %s", e)

    def on_event_drop(self, event_id: int, start: datetime, end: datetime, all_day: bool, revert: Callable[[], None]) -> bool:
        """Persist a drag-to-move right away; undo the move in the widget on failure.

        Returns True when the server accepted the new time range.
        """
        try:
            self.client.update_event(event_id, {"start": start, "end": end, "all_day": all_day})
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Error updating event %s: %s", event_id, e)
            revert()
            return False
        self.fetch_events()
        return True

    def on_event_click(self, event: Dict[str, Any]) -> None:
        self.selected_event = dict(event)
        self.show_form = True

    def on_date_select(self, start: datetime, end: datetime, all_day: bool) -> None:
        self.selected_event = {"start": start, "end": end, "all_day": all_day}
        self.show_form = True

    def form_defaults(self) -> Dict[str, Any]:
        """Initial values for the edit form fields."""
        ev = self.selected_event or {}
        return {
            "title": ev.get("title") or "",
            "description": ev.get("description") or "",
            "color": ev.get("color") or DEFAULT_COLOR,
        }

    @property
    def editing_existing(self) -> bool:
        return bool(self.selected_event and self.selected_event.get("id") is not None)

    def save(self, title: str, description: Optional[str] = None, color: Optional[str] = None) -> bool:
        """Create or update the selected event from the form fields.

        The time range comes from the selection, not the form. On success
        the form closes and the list is reloaded; on failure the form stays
        open.
        """
        if self.selected_event is None:
            raise ValueError("no event selected")
        ev = self.selected_event
        payload = {
            "title": title,
            "description": description,
            "start": ev.get("start"),
            "end": ev.get("end"),
            "all_day": bool(ev.get("all_day", False)),
            "color": color,
        }
        try:
            if self.editing_existing:
                self.client.update_event(ev["id"], payload)
            else:
                self.client.create_event(payload)
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Error saving event: %s", e)
            return False
        self.close_form()
        self.fetch_events()
        return True

    def delete(self) -> bool:
        if not self.editing_existing:
            raise ValueError("only existing events can be deleted")
        try:
            self.client.delete_event(self.selected_event["id"])
        except (ApiError, httpx.HTTPError) as e:
            logger.error("Error deleting event: %s", e)
            return False
        self.close_form()
        self.fetch_events()
        return True

    def close_form(self) -> None:
        self.show_form = False
        self.selected_event = None

    cancel = close_form
