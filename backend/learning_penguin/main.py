"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints used by the Learning Penguin
study backend. Controllers are intentionally thin: they accept requests,
delegate to services, and return plain-text or JSON responses.

Endpoints implemented:
- GET /pdfs
- POST /upload
- DELETE /pdfs/clear
- DELETE /pdfs/{id}/delete
- GET /events
- POST /events
- PUT /events/{id}
- DELETE /events/{id}
"""

from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile as StarletteUploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
import json
import logging
import time
import uuid

from . import services
from .config import Settings, settings as default_settings
from .database import Store, get_session
from .schemas import ClearReport, EventIn, EventOut, EventPatch, FileRecordOut

logger = logging.getLogger("penguin.api")

router = APIRouter()

UPLOAD_FIELD = "pdfFile"


def _store_error(message: str) -> HTTPException:
    logger.exception(message)
    return HTTPException(status_code=500, detail=message)


@router.get("/", response_class=PlainTextResponse)
def home():
    return "Hello from Learning Penguin Backend!"


@router.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


@router.get("/pdfs", response_model=List[FileRecordOut])
def list_pdfs(db: Session = Depends(get_session)):
    """List uploaded PDFs, newest upload first."""
    try:
        return services.FileService(db).list_files()
    except SQLAlchemyError:
        raise _store_error("Error fetching PDF files.")


def _single_upload(form: FormData) -> StarletteUploadFile:
    """Return the one file sent under `pdfFile`, rejecting anything else."""
    for key, value in form.multi_items():
        if key != UPLOAD_FIELD and isinstance(value, StarletteUploadFile):
            raise HTTPException(status_code=400, detail=f"Unexpected file field: {key}")
    uploads = [v for v in form.getlist(UPLOAD_FIELD) if isinstance(v, StarletteUploadFile)]
    if not uploads:
        raise HTTPException(status_code=400, detail="No file uploaded.")
    if len(uploads) > 1:
        raise HTTPException(status_code=400, detail="Only one file may be uploaded.")
    return uploads[0]


@router.post("/upload", response_class=PlainTextResponse)
async def upload_pdf(request: Request, db: Session = Depends(get_session)):
    """Store a single PDF sent as the multipart field `pdfFile`.

    Missing or repeated files, files under other field names, non-PDF
    extensions and oversized payloads are rejected with 400 before
    anything is written.
    """
    cfg: Settings = request.app.state.settings
    svc = services.IngestService(db, cfg.UPLOAD_DIR, cfg.MAX_UPLOAD_BYTES)
    async with request.form() as form:
        upload = _single_upload(form)
        try:
            record = await run_in_threadpool(svc.ingest, upload.filename, upload.content_type, upload.file)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except SQLAlchemyError:
            raise _store_error("Error saving file metadata.")
        except OSError:
            raise _store_error("Error writing uploaded file.")
    return f"File uploaded successfully: {record.filename}"


@router.delete("/pdfs/clear", response_model=ClearReport)
def clear_pdfs(db: Session = Depends(get_session)):
    """Delete every PDF record and try to remove each file from disk.

    Unlink failures are reported per item but do not fail the request.
    """
    try:
        results = services.FileService(db).clear()
    except SQLAlchemyError:
        raise _store_error("Error clearing PDF files.")
    failed = sum(1 for r in results if not r["file_removed"])
    if failed:
        logger.warning("clear finished with %d of %d files left on disk", failed, len(results))
    return {
        "message": "All PDF files have been cleared from the database and filesystem.",
        "deleted": len(results),
        "failed": failed,
        "results": results,
    }


@router.delete("/pdfs/{pdf_id}/delete", response_class=PlainTextResponse)
def delete_pdf(pdf_id: int, db: Session = Depends(get_session)):
    try:
        record = services.FileService(db).delete_file(pdf_id)
    except SQLAlchemyError:
        raise _store_error("Error deleting PDF file")
    if record is None:
        raise HTTPException(status_code=404, detail="PDF file not found")
    return "PDF file deleted successfully"


@router.get("/events", response_model=List[EventOut])
def list_events(db: Session = Depends(get_session)):
    """Return all calendar events ordered by start time."""
    try:
        return services.EventService(db).list_events()
    except SQLAlchemyError:
        raise _store_error("Error fetching events")


@router.post("/events", response_model=EventOut, status_code=201)
def create_event(payload: EventIn, db: Session = Depends(get_session)):
    try:
        return services.EventService(db).create(payload.model_dump())
    except SQLAlchemyError:
        raise _store_error("Error creating event")


@router.put("/events/{event_id}", response_model=EventOut)
def update_event(event_id: int, payload: EventPatch, db: Session = Depends(get_session)):
    """Apply the fields present in the body and refresh `updated_at`."""
    try:
        event = services.EventService(db).update(event_id, payload.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        raise _store_error("Error updating event")
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.delete("/events/{event_id}", response_class=PlainTextResponse)
def delete_event(event_id: int, db: Session = Depends(get_session)):
    try:
        deleted = services.EventService(db).delete(event_id)
    except SQLAlchemyError:
        raise _store_error("Error deleting event")
    if not deleted:
        raise HTTPException(status_code=404, detail="Event not found")
    return "Event deleted successfully"


async def plain_text_http_error(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as their bare message, the way clients display them."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """Build the application around an explicitly owned store.

    The store is opened when the app starts and closed when it shuts
    down; tests pass their own settings to get an isolated database and
    upload directory.
    """
    cfg = settings or default_settings
    store = store or Store(cfg.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.open()
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Learning Penguin API", lifespan=lifespan)
    app.state.settings = cfg
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        # browsers reject credentials with a wildcard origin
        allow_credentials="*" not in cfg.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        request.state.request_id = req_id
        started = time.perf_counter()
        response: Response
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
            logger.exception(
                "request_failed %s",
                json.dumps(
                    {
                        "request_id": req_id,
                        "path": request.url.path,
                        "method": request.method,
                        "duration_ms": elapsed_ms,
                        "client": request.client.host if request.client else "unknown",
                    },
                    ensure_ascii=True,
                ),
            )
            raise
        response.headers["X-Request-ID"] = req_id
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        return response

    app.add_exception_handler(StarletteHTTPException, plain_text_http_error)
    app.include_router(router)
    return app


if not logging.getLogger().handlers:
    logging.basicConfig(level=default_settings.LOG_LEVEL)

app = create_app()
