import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Settings are read at import time; point the app at a throwaway database
os.environ["DATABASE_USE"] = "dev"
os.environ.setdefault("DATABASE_URL_DEV", f"sqlite+aiosqlite:///{ROOT_DIR / 'test_benefit_card.db'}")
os.environ["MIGRATE_ON_START"] = "false"
os.environ["RESET_DB_ON_START"] = "false"

from benefit_card.crud.consumer import ConsumerCRUD  # noqa: E402
from benefit_card.db.base import Base  # noqa: E402
from benefit_card.db.session import get_db  # noqa: E402
from benefit_card.main import app  # noqa: E402


@pytest.fixture()
async def test_engine(tmp_path):
    # One SQLite file per test keeps tests independent of each other
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture()
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    # Separate sessions stand in for concurrent requests
    return async_sessionmaker(bind=test_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture()
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(test_engine) -> AsyncGenerator[AsyncClient, None]:
    SessionLocal = async_sessionmaker(bind=test_engine, expire_on_commit=False, autoflush=False)

    async def _get_db_override() -> AsyncGenerator[AsyncSession, None]:
        async with SessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db_override
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def make_consumer(async_session):
    async def _make(
        *,
        food: int = 111,
        fuel: int = 222,
        drugstore: int = 333,
        food_balance: str = "50.00",
        fuel_balance: str = "80.00",
        drugstore_balance: str = "40.00",
        name: str = "Maria Silva",
    ):
        return await ConsumerCRUD.create(
            async_session,
            name=name,
            document_number="12345678900",
            food_card_number=food,
            food_card_balance=Decimal(food_balance),
            fuel_card_number=fuel,
            fuel_card_balance=Decimal(fuel_balance),
            drugstore_card_number=drugstore,
            drugstore_card_balance=Decimal(drugstore_balance),
        )

    return _make
