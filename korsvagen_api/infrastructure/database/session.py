# korsvagen_api/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from flask import Flask, current_app
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from korsvagen_api.core.exceptions import AppError
from korsvagen_api.infrastructure.database.base_model import BaseModel

EXTENSION_KEY = "korsvagen.database"


def _create_engine(url: str, *, echo: bool) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/") == "sqlite:":
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=echo, **kwargs)

    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let SQLAlchemy emit it
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


class Database:
    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.engine = _create_engine(url, echo=echo)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except AppError:
            # handled outcomes (failed login counters, audit rows) must persist
            session.commit()
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        import korsvagen_api.infrastructure.database.models  # noqa: F401

        BaseModel.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def init_database(app: Flask, url: str, *, echo: bool = False) -> Database:
    database = Database(url, echo=echo)
    app.extensions[EXTENSION_KEY] = database
    return database


def get_database() -> Database:
    return current_app.extensions[EXTENSION_KEY]


@contextmanager
def db_session() -> Iterator[Session]:
    with get_database().session() as session:
        yield session
