"""Metadata store handle and session helpers.

The `Store` wraps a SQLModel/SQLAlchemy engine built from the configured
connection string. It is created explicitly by the application factory,
opened during startup and disposed at shutdown, so nothing here holds
process-wide connection state.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

logger = logging.getLogger("penguin.store")


class Store:
    """Owns the engine for the file-record and event tables."""

    def __init__(self, url: str):
        self.url = url
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("store is not open")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "Store":
        """Create the engine and make sure both tables exist.

        Calling `open` on an already open store is a no-op.
        """
        if self._engine is not None:
            return self
        connect_args = {"check_same_thread": False} if self.url.startswith("sqlite") else {}
        self._engine = create_engine(self.url, echo=False, connect_args=connect_args)
        # registers the table classes on SQLModel.metadata
        from . import models  # noqa: F401
        SQLModel.metadata.create_all(self._engine)
        logger.info("store opened url=%s", self._engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("store closed")

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session


def get_session(request: Request):
    """Yield a database `Session` for FastAPI dependency injection.

    The store lives on `app.state` and the session is closed when the
    request scope finishes.
    """
    store: Store = request.app.state.store
    with store.session() as session:
        yield session
