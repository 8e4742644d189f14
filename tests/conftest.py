"""Pytest configuration and fixtures."""

import os
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

# Set test environment variables before importing settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from portal.db.base import Base  # noqa: E402
from portal.modules.companies.models import Company  # noqa: E402
from portal.modules.payments.models import Payment  # noqa: E402


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Fresh SQLite database per test, schema created from the models."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{(tmp_path / 'test.db').as_posix()}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_company(db):
    """Insert a company and return its id."""

    async def _make(**overrides) -> int:
        data = {
            "name": "Acme Ltda",
            "status": "ativo",
            "contract_value": Decimal("1000.00"),
            "start_date": date(2024, 1, 1),
            "end_date": None,
            "payment_frequency": "Monthly",
        }
        data.update(overrides)
        company = Company(**data)
        db.add(company)
        await db.commit()
        return company.id

    return _make


@pytest.fixture
def fetch_payments(db):
    """All payments of a company ordered by due date."""

    async def _fetch(company_id: int) -> list[Payment]:
        res = await db.execute(
            select(Payment)
            .where(Payment.company_id == company_id)
            .order_by(Payment.due_date.asc())
            .execution_options(populate_existing=True)
        )
        return list(res.scalars().all())

    return _fetch
