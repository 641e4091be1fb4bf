import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from drivers_service.core.constants import DriverStatus, DriverType
from drivers_service.domain.entities.document import Document
from drivers_service.domain.entities.driver import Driver
from drivers_service.domain.entities.emergency_contact import EmergencyContact
from drivers_service.domain.entities.endorsement import Endorsement
from drivers_service.domain.entities.hours_of_service import HoursOfService
from drivers_service.domain.exceptions import ConflictError, NotFoundError
from drivers_service.infrastructure.db.tables import EmergencyContactRow, EndorsementRow, HoursOfServiceRow
from drivers_service.infrastructure.repositories.driver_repo_sql import SQLDriverRepository


@pytest.fixture
def repo(session):
    return SQLDriverRepository(session)


def _full_driver(driver_fields, **overrides) -> Driver:
    d = Driver.create(**driver_fields(**overrides))
    d.emergency_contacts = [EmergencyContact.create(name="Amina Ali", relationship="Spouse", phone="555-987-6543")]
    d.endorsements = [Endorsement.create(type="H"), Endorsement.create(type="N")]
    d.documents = [Document.create(file_name="cdl.pdf", file_url="uploads/cdl.pdf", file_type="license")]
    d.hours_of_service = HoursOfService.create_default(d.id)
    return d


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_create_and_find(self, repo, driver_fields):
        """A stored driver comes back with every field and child collection."""
        d = _full_driver(driver_fields, city="Austin", status="on-break")
        saved = await repo.create(d)

        found = await repo.find_by_id(d.id)
        assert found is not None
        assert found.full_name == "Hassan Ali"
        assert found.city == "Austin"
        assert found.driver_type is DriverType.COMPANY
        assert found.status is DriverStatus.ON_BREAK
        assert found.license_expiry == d.license_expiry
        assert found.created_at.tzinfo is not None
        assert [c.name for c in found.emergency_contacts] == ["Amina Ali"]
        assert found.emergency_contacts[0].id is not None
        assert sorted(e.type for e in found.endorsements) == ["H", "N"]
        assert found.documents[0].id == d.documents[0].id
        assert found.hours_of_service.time_until_break_required == 0.5
        assert saved.id == d.id

    @pytest.mark.asyncio
    async def test_find_by_email_and_all(self, repo, driver_fields):
        await repo.create(Driver.create(**driver_fields(last_name="Zed", email="z@example.com")))
        await repo.create(Driver.create(**driver_fields(last_name="Abbot", email="a@example.com")))

        found = await repo.find_by_email("z@example.com")
        assert found.last_name == "Zed"
        assert await repo.find_by_email("nobody@example.com") is None
        assert [d.last_name for d in await repo.find_all()] == ["Abbot", "Zed"]

    @pytest.mark.asyncio
    async def test_missing_driver(self, repo):
        assert await repo.find_by_id("missing") is None
        assert await repo.delete("missing") is None


class TestUpdate:
    @pytest.mark.asyncio
    async def test_child_collections_are_synced_by_id(self, repo, session, driver_fields):
        """Kept children keep their ids, dropped ones are deleted, new ones are inserted."""
        saved = await repo.create(_full_driver(driver_fields))
        kept = next(e for e in saved.endorsements if e.type == "H")
        kept_id = kept.id

        saved.endorsements = [kept, Endorsement.create(type="T")]
        saved.emergency_contacts = []
        saved.hours_of_service.add_driving_time(2)
        saved.assign_load("LOAD-7")
        updated = await repo.update(saved)

        assert sorted(e.type for e in updated.endorsements) == ["H", "T"]
        assert next(e for e in updated.endorsements if e.type == "H").id == kept_id
        assert updated.emergency_contacts == []
        assert updated.hours_of_service.driving_hours_today == 2
        assert updated.status is DriverStatus.DRIVING
        assert updated.load_id == "LOAD-7"
        assert await _count(session, EmergencyContactRow) == 0
        assert await _count(session, EndorsementRow) == 2

    @pytest.mark.asyncio
    async def test_update_missing_driver(self, repo, driver):
        with pytest.raises(NotFoundError):
            await repo.update(driver)

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_conflict(self, repo, driver_fields):
        """The unique email index surfaces as a ConflictError."""
        await repo.create(Driver.create(**driver_fields()))
        with pytest.raises(ConflictError, match="already exists"):
            await repo.create(Driver.create(**driver_fields(first_name="Copy")))
        assert len(await repo.find_all()) == 1


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_cascades_to_children(self, repo, session, driver_fields):
        """Deleting a driver removes its contacts, endorsements and counter."""
        saved = await repo.create(_full_driver(driver_fields))
        deleted = await repo.delete(saved.id)

        assert deleted.id == saved.id
        assert await repo.find_by_id(saved.id) is None
        assert await _count(session, EmergencyContactRow) == 0
        assert await _count(session, EndorsementRow) == 0
        assert await _count(session, HoursOfServiceRow) == 0


class TestIntegrityErrors:
    @pytest.mark.asyncio
    async def test_non_unique_violation_is_not_reported_as_conflict(self, repo, driver_fields):
        """Only unique-index failures become conflicts; a NOT NULL failure propagates as is."""
        d = Driver.create(**driver_fields())
        # SQLite stores NaN as NULL, which trips the NOT NULL column
        d.hours_of_service = HoursOfService(driving_hours_today=float("nan"), duty_hours_today=1.0)
        with pytest.raises(IntegrityError):
            await repo.create(d)
        assert await repo.find_all() == []
