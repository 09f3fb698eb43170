"""Pytest configuration and fixtures for backend tests."""

import os

# Must be set before the app (and its limiter) is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from webx_crm.db.base import Base  # noqa: E402
from webx_crm.db.session import get_db  # noqa: E402
from webx_crm.main import app  # noqa: E402
from webx_crm.models import (  # noqa: E402
    CalendarEvent,
    Client,
    OneOffSale,
    Project,
    RecurringSale,
    Renewal,
    Task,
    XeroExport,
    XeroExportItem,
)

# Test database URL (using in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[Any, None]:
    """Create test database engine.

    An in-memory database lives only as long as its connection, so every
    session shares one connection through StaticPool.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with the database dependency overridden."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_client_data() -> dict[str, Any]:
    """Sample client data for testing."""
    return {
        "name": "Jane Smith",
        "company": "Kiwi Plumbing Ltd",
        "contact_name": "Jane Smith",
        "email": "jane@kiwiplumbing.co.nz",
        "phone": "+6491234567",
        "address1": "12 Queen Street",
        "city": "Auckland",
        "website": "https://kiwiplumbing.co.nz",
        "notes": "Prefers email",
    }


async def _save(session: AsyncSession, instance: Any) -> Any:
    session.add(instance)
    await session.commit()
    await session.refresh(instance)
    return instance


@pytest_asyncio.fixture
async def create_test_client(test_session: AsyncSession) -> Any:
    """Factory fixture to create test clients."""

    async def _create_client(**kwargs: Any) -> Client:
        client_data: dict[str, Any] = {
            "name": "Test Client",
            "company": "Test Co",
            "email": "client@example.com",
            "status": "active",
        }
        client_data.update(kwargs)
        return await _save(test_session, Client(**client_data))

    return _create_client


@pytest_asyncio.fixture
async def create_test_oneoff_sale(test_session: AsyncSession) -> Any:
    """Factory fixture to create one-off sales."""

    async def _create_sale(**kwargs: Any) -> OneOffSale:
        sale_data: dict[str, Any] = {
            "description": "Website build",
            "amount": Decimal("100.00"),
            "status": "paid",
            "sale_date": date(2024, 6, 1),
        }
        sale_data.update(kwargs)
        return await _save(test_session, OneOffSale(**sale_data))

    return _create_sale


@pytest_asyncio.fixture
async def create_test_recurring_sale(test_session: AsyncSession) -> Any:
    """Factory fixture to create recurring sales."""

    async def _create_sale(**kwargs: Any) -> RecurringSale:
        sale_data: dict[str, Any] = {
            "product": "Hosting",
            "service_name": "Managed hosting",
            "amount": Decimal("50.00"),
            "start_date": date(2024, 1, 1),
            "active": True,
            "billing_cycle": "monthly",
        }
        sale_data.update(kwargs)
        return await _save(test_session, RecurringSale(**sale_data))

    return _create_sale


@pytest_asyncio.fixture
async def create_test_task(test_session: AsyncSession) -> Any:
    """Factory fixture to create tasks."""

    async def _create_task(**kwargs: Any) -> Task:
        task_data: dict[str, Any] = {"title": "Call back", "status": "open"}
        task_data.update(kwargs)
        return await _save(test_session, Task(**task_data))

    return _create_task


@pytest_asyncio.fixture
async def create_test_project(test_session: AsyncSession) -> Any:
    """Factory fixture to create projects."""

    async def _create_project(**kwargs: Any) -> Project:
        project_data: dict[str, Any] = {
            "title": "New website",
            "allocated_to": "Unassigned",
            "priority": "normal",
            "stage": "not_started",
            "completed": False,
        }
        project_data.update(kwargs)
        return await _save(test_session, Project(**project_data))

    return _create_project


@pytest_asyncio.fixture
async def create_test_renewal(test_session: AsyncSession) -> Any:
    """Factory fixture to create renewals."""

    async def _create_renewal(**kwargs: Any) -> Renewal:
        renewal_data: dict[str, Any] = {
            "service_type": "domain",
            "item_label": "example.co.nz",
            "renewal_date": date(2024, 9, 1),
            "cost": Decimal("35.00"),
        }
        renewal_data.update(kwargs)
        return await _save(test_session, Renewal(**renewal_data))

    return _create_renewal


@pytest_asyncio.fixture
async def create_test_event(test_session: AsyncSession) -> Any:
    """Factory fixture to create calendar events."""

    async def _create_event(**kwargs: Any) -> CalendarEvent:
        event_data: dict[str, Any] = {
            "title": "Kickoff",
            "event_type": "meeting",
            "event_date": date(2024, 6, 10),
        }
        event_data.update(kwargs)
        return await _save(test_session, CalendarEvent(**event_data))

    return _create_event


@pytest_asyncio.fixture
async def create_test_export(test_session: AsyncSession) -> Any:
    """Factory fixture to create Xero export batches, optionally with items."""

    async def _create_export(items: int = 0, **kwargs: Any) -> XeroExport:
        export_data: dict[str, Any] = {
            "name": "June invoices",
            "period_year": 2024,
            "period_month": 6,
        }
        export_data.update(kwargs)
        export = XeroExport(**export_data)
        export.items = [
            XeroExportItem(description=f"Line {n}", amount=Decimal("10.00")) for n in range(items)
        ]
        return await _save(test_session, export)

    return _create_export
