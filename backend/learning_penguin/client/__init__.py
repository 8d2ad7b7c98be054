"""Browser-side state for the upload panel and calendar.

`UploadPanel` and `CalendarAdapter` hold the view state a UI renders and
translate user or calendar-widget actions into calls on `PenguinClient`.
"""

from .api import ApiError, PenguinClient
from .calendar import CalendarAdapter
from .state import SelectedFile, UploadPanel

__all__ = ["ApiError", "PenguinClient", "CalendarAdapter", "SelectedFile", "UploadPanel"]
