"""
Shared fixtures: a throwaway SQLite database with SAVEPOINT support, a
scripted batch source and registry record factories.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

import db.models  # noqa: F401  registers models on Base.metadata
from app.domain.death_registry import RegistryEvent, RegistryLocation, RegistryName, RegistryPerson
from db.base import Base
from db.session import build_session_factory


class ScriptedBatchSource:
    """
    Yields pre-built batches. ``before_batch(index)`` runs right before a
    batch is handed out; ``fail_at`` raises instead of yielding that batch.
    """

    def __init__(
        self,
        batches: list[list[RegistryPerson]],
        *,
        before_batch: Callable[[int], None] | None = None,
        fail_at: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self.batches = batches
        self.before_batch = before_batch
        self.fail_at = fail_at
        self.error = error or RuntimeError("registry unavailable")
        self.periods: list[str] = []

    def fetch_for_period(self, period: str) -> Iterator[list[RegistryPerson]]:
        self.periods.append(period)
        for index, batch in enumerate(self.batches):
            if self.before_batch is not None:
                self.before_batch(index)
            if self.fail_at == index:
                raise self.error
            yield batch


def build_person(
    index: int,
    *,
    first: list[str] | None = None,
    last: str | None = None,
    death_date: str = "20251215",
    death_code: str | None = "75115",
    certificate_id: str | None = "auto",
    sex: str | None = "M",
) -> RegistryPerson:
    return RegistryPerson(
        id=f"person-{index}",
        name=RegistryName(
            first=["Jean", "Louis"] if first is None else first,
            last=f"Martin{index}" if last is None else last,
        ),
        birth=RegistryEvent(
            date="19400101",
            location=RegistryLocation(city="Lyon", code="69123"),
        ),
        death=RegistryEvent(
            date=death_date,
            location=RegistryLocation(
                city=["Paris 15e Arrondissement", "Paris"],
                code=death_code,
                latitude=48.84,
                longitude=2.29,
            ),
            certificate_id=f"CERT{index:04d}" if certificate_id == "auto" else certificate_id,
        ),
        score=1.0,
        sex=sex,
    )


def chunk(items: list[RegistryPerson], size: int) -> list[list[RegistryPerson]]:
    return [items[start : start + size] for start in range(0, len(items), size)]


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'registry.db'}")

    # pysqlite handles BEGIN itself and breaks SAVEPOINT; let SQLAlchemy emit it.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def person_factory() -> Callable[..., RegistryPerson]:
    return build_person


@pytest.fixture()
def batch_source_factory() -> type[ScriptedBatchSource]:
    return ScriptedBatchSource


@pytest.fixture()
def chunked() -> Callable[[list[RegistryPerson], int], list[list[RegistryPerson]]]:
    return chunk
