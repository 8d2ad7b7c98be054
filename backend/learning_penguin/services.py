"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories and
the upload directory. Services are intentionally thin: they perform
validation, execute domain logic and persist rows via repositories.
Validation problems are raised as `ValueError`; store errors propagate as
SQLAlchemy exceptions for the controllers to translate.
"""

import logging
import os
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional
from sqlmodel import Session
from . import models, repositories

logger = logging.getLogger("penguin.ingest")

ALLOWED_EXTENSION = ".pdf"
DEFAULT_MEDIA_TYPE = "application/octet-stream"


def unlink_quietly(path: str) -> Optional[str]:
    """Remove `path` from disk and return an error message instead of raising."""
    try:
        os.unlink(path)
    except OSError as e:
        logger.warning("could not delete file %s: %s", path, e)
        return str(e)
    return None


class IngestService:
    """Validate an uploaded PDF, write it to disk and record its metadata."""
    def __init__(self, session: Session, upload_dir: Path, max_bytes: int):
        self.session = session
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.repo = repositories.FileRecordRepository(session)

    def validate_filename(self, filename: Optional[str]) -> str:
        """Return the submitted filename or raise ValueError if unusable."""
        if not filename:
            raise ValueError("No file uploaded.")
        if len(filename) > 200:
            raise ValueError("Invalid filename.")
        if "/" in filename or "\\" in filename:
            raise ValueError("Invalid filename path.")
        if Path(filename).suffix.lower() != ALLOWED_EXTENSION:
            raise ValueError("Only PDF files are allowed!")
        return filename

    def ingest(self, filename: Optional[str], content_type: Optional[str], stream: BinaryIO) -> models.FileRecord:
        """Run the upload pipeline and return the persisted `FileRecord`.

        The bytes are written before the metadata insert. If the insert
        fails the written file is removed again and the store error is
        re-raised.
        """
        original = self.validate_filename(filename)
        payload = stream.read(self.max_bytes + 1)
        if len(payload) > self.max_bytes:
            raise ValueError("File too large.")

        stored_path = self._write(original, payload)
        record = models.FileRecord(
            filename=stored_path.name,
            original_name=original,
            path=str(stored_path),
            size=len(payload),
            media_type=content_type or DEFAULT_MEDIA_TYPE,
        )
        try:
            record = self.repo.create(record)
        except Exception:
            self.session.rollback()
            logger.error("metadata insert failed, removing %s", stored_path)
            unlink_quietly(str(stored_path))
            raise
        logger.info("stored upload %s (%d bytes) as id=%s", record.filename, record.size, record.id)
        return record

    def _write(self, original: str, payload: bytes) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        stamp = int(time.time() * 1000)
        while True:
            target = self.upload_dir / f"{stamp}-{original}"
            try:
                # exclusive create keeps stored names unique
                with open(target, "xb") as out:
                    out.write(payload)
                return target
            except FileExistsError:
                stamp += 1


class FileService:
    """Listing and removal of stored PDFs."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.FileRecordRepository(session)

    def list_files(self) -> List[models.FileRecord]:
        return self.repo.list_newest_first()

    def delete_file(self, record_id: int) -> Optional[models.FileRecord]:
        """Delete one record and its file; returns None when the id is unknown.

        The record goes first. A failed unlink is logged and does not undo
        the metadata removal.
        """
        record = self.repo.get(record_id)
        if record is None:
            return None
        path = record.path
        self.repo.delete(record)
        unlink_quietly(path)
        return record

    def clear(self) -> List[Dict[str, Any]]:
        """Remove every record, then its file, reporting each item.

        Records are committed away before any unlink, so a store failure
        leaves every file in place.
        """
        records = self.repo.list_all()
        stored = [(r.id, r.filename, r.path) for r in records]
        self.repo.delete_many(records)
        results = []
        for record_id, filename, path in stored:
            error = unlink_quietly(path)
            results.append({
                "id": record_id,
                "filename": filename,
                "file_removed": error is None,
                "error": error,
            })
        return results


class EventService:
    """Calendar event CRUD."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.EventRepository(session)

    def list_events(self) -> List[models.Event]:
        return self.repo.list_by_start()

    def create(self, fields: Dict[str, Any]) -> models.Event:
        now = models.utcnow()
        event = models.Event(**fields, created_at=now, updated_at=now)
        return self.repo.create(event)

    def update(self, event_id: int, changes: Dict[str, Any]) -> Optional[models.Event]:
        """Merge `changes` into the event; returns None when the id is unknown."""
        event = self.repo.get(event_id)
        if event is None:
            return None
        return self.repo.update(event, changes, models.utcnow())

    def delete(self, event_id: int) -> bool:
        event = self.repo.get(event_id)
        if event is None:
            return False
        self.repo.delete(event)
        return True
