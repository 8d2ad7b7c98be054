"""Sample calendar data for local development."""

from datetime import datetime, time, timedelta, timezone
from typing import List, Optional
from sqlmodel import Session
from . import models, repositories


def sample_events(today: Optional[datetime] = None) -> List[models.Event]:
    """Four study events: a morning session today, then three all-day items."""
    today = today or datetime.now(timezone.utc)
    day = today.date()
    tz = today.tzinfo or timezone.utc

    def all_day(offset: int, title: str, description: str, color: str) -> models.Event:
        start = datetime.combine(day + timedelta(days=offset), time(0, 0), tzinfo=tz)
        return models.Event(title=title, description=description, start=start, end=start, color=color, all_day=True)

    return [
        models.Event(
            title="Math Study Session",
            description="Review calculus and linear algebra",
            start=datetime.combine(day, time(10, 0), tzinfo=tz),
            end=datetime.combine(day, time(12, 0), tzinfo=tz),
            color="#3788d8",
            all_day=False,
        ),
        all_day(1, "Programming Workshop", "Learn React and Node.js", "#28a745"),
        all_day(2, "Group Project Meeting", "Discuss project progress and next steps", "#dc3545"),
        all_day(3, "Language Practice", "Spanish conversation practice", "#ffc107"),
    ]


def reset_events(session: Session, today: Optional[datetime] = None) -> List[models.Event]:
    """Replace every stored event with the sample set."""
    repo = repositories.EventRepository(session)
    repo.delete_all()
    return [repo.create(ev) for ev in sample_events(today)]
