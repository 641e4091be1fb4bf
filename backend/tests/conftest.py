"""
Shared pytest configuration for all tests.
Points the app at an in-memory SQLite database and provides driver fixtures.
"""
import copy
import datetime as dt
import itertools
import os

# must be set before drivers_service.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool

from drivers_service.domain import clock
from drivers_service.domain.entities.driver import Driver
from drivers_service.domain.exceptions import NotFoundError
from drivers_service.infrastructure.db.session import create_schema


def base_driver_fields(**overrides):
    today = clock.today()
    fields = {
        "first_name": "Hassan",
        "last_name": "Ali",
        "dob": dt.date(1990, 1, 15),
        "phone_primary": "(555) 123-4567",
        "email": "hassan.ali@example.com",
        "license_number": "D1234567",
        "license_state": "TX",
        "license_class": "A",
        "license_expiry": today + dt.timedelta(days=365),
        "med_cert_expiry": today + dt.timedelta(days=180),
        "hire_date": dt.date(2020, 3, 1),
        "driver_type": "company",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def driver_fields():
    """Factory for a valid set of driver creation fields."""
    return base_driver_fields


@pytest.fixture
def driver(driver_fields) -> Driver:
    return Driver.create(**driver_fields())


class InMemoryDriverRepository:
    """Dict-backed driver store; hands out copies the way a real store would."""

    def __init__(self):
        self.rows: dict[str, Driver] = {}
        self._ids = itertools.count(1)
        self.update_calls = 0

    def _persist(self, driver: Driver) -> Driver:
        for item in [*driver.emergency_contacts, *driver.endorsements]:
            if item.id is None:
                item.id = next(self._ids)
            item.driver_id = driver.id
        for doc in driver.documents:
            doc.driver_id = driver.id
        if driver.hours_of_service is not None:
            driver.hours_of_service.driver_id = driver.id
        self.rows[driver.id] = copy.deepcopy(driver)
        return copy.deepcopy(driver)

    async def find_all(self):
        return [copy.deepcopy(d) for d in self.rows.values()]

    async def find_by_id(self, driver_id):
        d = self.rows.get(driver_id)
        return copy.deepcopy(d) if d else None

    async def find_by_email(self, email):
        for d in self.rows.values():
            if d.email == email:
                return copy.deepcopy(d)
        return None

    async def create(self, driver):
        return self._persist(driver)

    async def update(self, driver):
        if driver.id not in self.rows:
            raise NotFoundError(f"Driver with ID {driver.id} not found")
        self.update_calls += 1
        return self._persist(driver)

    async def delete(self, driver_id):
        return self.rows.pop(driver_id, None)


@pytest.fixture
def memory_repo():
    return InMemoryDriverRepository()


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s
