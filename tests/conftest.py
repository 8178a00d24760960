"""
CRediT Icon Survey - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Generator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['LOG_PATH'] = tempfile.mkdtemp(prefix='credit-survey-logs-')
os.environ['RATE_LIMIT_ENABLED'] = 'false'

from src.app.main import app
from src.credit.catalog import AGE_RANGES, CREDIT_ROLES, ICON_SET
from src.db import Base
from src.db.session import enable_sqlite_foreign_keys, get_db
import src.db.models  # noqa: F401

fake = Faker()

# Test database setup
test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)
TestSessionLocal = sessionmaker(bind=test_engine, autoflush=False)


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
async def client(db_session: Session) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def participant_data() -> dict:
    """Random but valid participant demographics"""
    return {
        'age': fake.random_element(AGE_RANGES),
        'field_of_study': fake.job()[:100],
        'country_of_residence': fake.country()[:100],
    }


@pytest.fixture
def full_responses() -> list[dict]:
    """One response per CRediT role, icons in catalog order"""
    return [
        {'role_title': role.title, 'assigned_icon': icon.name, 'response_order': index}
        for index, (role, icon) in enumerate(zip(CREDIT_ROLES, ICON_SET))
    ]


class MemoryDraftStore:
    """In-memory draft store standing in for the draft_entries table"""

    def __init__(self):
        self.items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove(self, key: str) -> None:
        self.items.pop(key, None)


@pytest.fixture
def draft_store() -> MemoryDraftStore:
    return MemoryDraftStore()
