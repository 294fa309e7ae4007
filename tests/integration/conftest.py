"""
Fixtures backed by a real SQLite file, so units of work and the capability
resolver each get their own connection.
"""

import pytest

from timesheets.infrastructure.db.database import create_db_engine, create_session_factory, create_tables
from timesheets.infrastructure.auth.capability_resolver import SQLAlchemyCapabilityResolver
from timesheets.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'timesheets.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def resolver(session_factory):
    return SQLAlchemyCapabilityResolver(session_factory)


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SQLAlchemyUnitOfWork(session_factory)
