import os

# Must be set before src.config is imported so the app engine never points at Postgres
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime
from functools import partial
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.main import app
from src.database import get_db, Base
from src.clients.models import Client, ClientDetails, LegalType


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """A fresh in-memory database and a session on it for each test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client for testing API endpoints."""
    # Override the get_db dependency to use our test session
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def add_client(
    db: AsyncSession,
    company_id: int,
    *,
    legal_type: LegalType = LegalType.PHYSICAL,
    contact_name: Optional[str] = None,
    firstname: Optional[str] = None,
    lastname: Optional[str] = None,
    patronymic: Optional[str] = None,
    mobilephone_code: Optional[str] = None,
    mobilephone: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Client:
    """Insert a client with details straight into the database."""
    client = Client(
        company_id=company_id,
        user_id=1,
        legal_type=int(legal_type),
        contact_name=contact_name,
        firstname=firstname,
        lastname=lastname,
        patronymic=patronymic,
    )
    if created_at is not None:
        client.created_at = created_at
    client.client_details = ClientDetails(mobilephone_code=mobilephone_code, mobilephone=mobilephone)
    db.add(client)
    await db.commit()
    return client


@pytest.fixture
def make_client(db_session: AsyncSession):
    return partial(add_client, db_session)
