from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from fastapi import Request
from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from patient_api.models.base import Base


def _prepare_url(database_url: str) -> str:
    url = make_url(database_url)
    if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
        db_path = Path(url.database).expanduser()
        if db_path.parent:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        # Rebuild URL so SQLAlchemy can handle relative paths nicely
        return f"sqlite:///{db_path}"
    return database_url


class Database:
    """Process-wide store handle: one engine (connection pool) and its session factory."""

    def __init__(self, database_url: str, *, echo: bool = False, **engine_kwargs: Any) -> None:
        url = _prepare_url(database_url)
        is_sqlite = make_url(url).drivername.startswith("sqlite")
        self.engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            **engine_kwargs,
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Connected to the database at {url}", url=self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        session: Session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def get_database(request: Request) -> Database:
    return request.app.state.database
