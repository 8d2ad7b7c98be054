"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (file records,
events). Repositories return SQLModel objects and perform
commits/refreshes where appropriate.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlmodel import Session, select
from . import models


class FileRecordRepository:
    """CRUD operations for `FileRecord` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, record: models.FileRecord) -> models.FileRecord:
        """Persist a new record and return the managed instance."""
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def get(self, record_id: int) -> Optional[models.FileRecord]:
        """Get a `FileRecord` by primary key."""
        return self.session.get(models.FileRecord, record_id)

    def list_newest_first(self) -> List[models.FileRecord]:
        """Return all records, most recent upload first."""
        stmt = select(models.FileRecord).order_by(
            models.FileRecord.upload_date.desc(), models.FileRecord.id.desc()
        )
        return self.session.exec(stmt).all()

    def list_all(self) -> List[models.FileRecord]:
        return self.session.exec(select(models.FileRecord)).all()

    def delete(self, record: models.FileRecord) -> None:
        self.session.delete(record)
        self.session.commit()

    def delete_many(self, records: List[models.FileRecord]) -> int:
        """Remove the given records in one commit and return how many went away."""
        for record in records:
            self.session.delete(record)
        self.session.commit()
        return len(records)


class EventRepository:
    """CRUD operations for calendar `Event` rows."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, event: models.Event) -> models.Event:
        self.session.add(event)
        self.session.commit()
        self.session.refresh(event)
        return event

    def get(self, event_id: int) -> Optional[models.Event]:
        return self.session.get(models.Event, event_id)

    def list_by_start(self) -> List[models.Event]:
        """Return all events ordered by start time ascending."""
        stmt = select(models.Event).order_by(models.Event.start.asc(), models.Event.id.asc())
        return self.session.exec(stmt).all()

    def update(self, event: models.Event, changes: Dict[str, Any], updated_at: datetime) -> models.Event:
        """Merge `changes` into `event` and stamp `updated_at`."""
        for key, value in changes.items():
            setattr(event, key, value)
        event.updated_at = updated_at
        self.session.add(event)
        self.session.commit()
        self.session.refresh(event)
        return event

    def delete(self, event: models.Event) -> None:
        self.session.delete(event)
        self.session.commit()

    def delete_all(self) -> int:
        events = self.session.exec(select(models.Event)).all()
        for event in events:
            self.session.delete(event)
        self.session.commit()
        return len(events)
