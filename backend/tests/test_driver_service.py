import datetime as dt

import pytest

from drivers_service.core.constants import DriverStatus, EmploymentStatus
from drivers_service.domain import clock
from drivers_service.domain.exceptions import (
    ConflictError,
    DriverUnavailableError,
    InvalidDataError,
    InvalidHoursOfServiceError,
    InvalidStateError,
    NotFoundError,
)
from drivers_service.services.driver_service import DriverService


@pytest.fixture
def service(memory_repo):
    return DriverService(memory_repo)


@pytest.fixture
async def created(service, driver_fields):
    return await service.create_driver(
        emergency_contacts=[{"name": "Amina Ali", "relationship": "Spouse", "phone": "555-987-6543"}],
        endorsements=[{"type": "h"}],
        **driver_fields(),
    )


class TestCreateAndRead:
    @pytest.mark.asyncio
    async def test_create_sets_defaults_and_children(self, created, memory_repo):
        """A new driver gets a fresh hours counter and its contacts and endorsements."""
        assert created.id in memory_repo.rows
        assert created.hours_of_service is not None
        assert created.hours_of_service.time_until_break_required == 0.5
        assert [e.type for e in created.endorsements] == ["H"]
        assert created.emergency_contacts[0].id is not None

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, service, created, driver_fields):
        """Creating a second driver with the same email is a conflict."""
        with pytest.raises(ConflictError, match="already exists"):
            await service.create_driver(**driver_fields(first_name="Other"))

    @pytest.mark.asyncio
    async def test_invalid_contact_rejects_create(self, service, driver_fields, memory_repo):
        """A malformed emergency contact stops the driver from being stored."""
        with pytest.raises(InvalidDataError):
            await service.create_driver(
                emergency_contacts=[{"name": "X", "relationship": "Friend", "phone": "12"}],
                **driver_fields(),
            )
        assert memory_repo.rows == {}

    @pytest.mark.asyncio
    async def test_get_unknown_driver(self, service):
        """Looking up a missing id raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Driver with ID nope not found"):
            await service.get_driver("nope")

    @pytest.mark.asyncio
    async def test_list_available(self, service, created, driver_fields):
        """Only drivers in the available status are listed as available."""
        busy = await service.create_driver(**driver_fields(email="busy@example.com"))
        await service.assign_load(busy.id, "LOAD-1")
        available = await service.list_available_drivers()
        assert [d.id for d in available] == [created.id]
        assert len(await service.list_drivers()) == 2

    @pytest.mark.asyncio
    async def test_credential_status(self, service, driver_fields):
        """Credential checks run against the stored driver."""
        d = await service.create_driver(**driver_fields(license_expiry=clock.today() + dt.timedelta(days=10)))
        status = await service.check_credential_status(d.id, 30)
        assert status.license_expiring_soon is True
        assert status.license_expired is False


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_fields_and_replace_contacts(self, service, created):
        """Field changes and collection replacement are saved together."""
        updated = await service.update_driver(
            created.id,
            city="Dallas",
            emergency_contacts=[{"name": "Omar Ali", "relationship": "Brother", "phone": "555-222-3333"}],
        )
        assert updated.city == "Dallas"
        assert [c.name for c in updated.emergency_contacts] == ["Omar Ali"]
        assert [e.type for e in updated.endorsements] == ["H"]

    @pytest.mark.asyncio
    async def test_update_email_conflict(self, service, created, driver_fields):
        """Changing an email to one owned by another driver is a conflict."""
        other = await service.create_driver(**driver_fields(email="other@example.com"))
        with pytest.raises(ConflictError):
            await service.update_driver(other.id, email=created.email)

    @pytest.mark.asyncio
    async def test_invalid_update_is_not_saved(self, service, created, memory_repo):
        """A rejected update leaves the stored driver untouched."""
        with pytest.raises(InvalidDataError):
            await service.update_driver(created.id, city="Dallas", email="broken")
        assert memory_repo.rows[created.id].city is None
        assert memory_repo.update_calls == 0

    @pytest.mark.asyncio
    async def test_update_unknown_driver(self, service):
        with pytest.raises(NotFoundError):
            await service.update_driver("missing", city="Dallas")

    @pytest.mark.asyncio
    async def test_delete(self, service, created):
        """Deleted drivers can no longer be fetched."""
        await service.delete_driver(created.id)
        with pytest.raises(NotFoundError):
            await service.get_driver(created.id)
        with pytest.raises(NotFoundError):
            await service.delete_driver(created.id)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_assign_and_complete_load_are_persisted(self, service, created, memory_repo):
        """Load assignment and completion round-trip through the repository."""
        await service.assign_load(created.id, "LOAD-9")
        stored = memory_repo.rows[created.id]
        assert stored.status is DriverStatus.DRIVING
        assert stored.load_id == "LOAD-9"

        await service.complete_load(created.id)
        stored = memory_repo.rows[created.id]
        assert stored.status is DriverStatus.AVAILABLE
        assert stored.load_id is None

    @pytest.mark.asyncio
    async def test_assign_to_unavailable_driver(self, service, created, memory_repo):
        """A driver who is not available cannot take a load and is not saved."""
        await service.update_status(created.id, "on-break")
        calls = memory_repo.update_calls
        with pytest.raises(DriverUnavailableError):
            await service.assign_load(created.id, "LOAD-9")
        assert memory_repo.update_calls == calls
        assert memory_repo.rows[created.id].status is DriverStatus.ON_BREAK

    @pytest.mark.asyncio
    async def test_leave_and_terminate(self, service, created):
        on_leave = await service.put_driver_on_leave(created.id, "family")
        assert on_leave.employment_status is EmploymentStatus.LEAVE
        back = await service.return_driver_from_leave(created.id)
        assert back.status is DriverStatus.AVAILABLE
        gone = await service.terminate_driver(created.id, "contract ended")
        assert gone.employment_status is EmploymentStatus.TERMINATED
        assert gone.notes == "Leave: family\n\nTermination: contract ended"


class TestHoursOfService:
    @pytest.mark.asyncio
    async def test_driving_time_is_persisted(self, service, created, memory_repo):
        hos = await service.record_driving_time(created.id, 6)
        assert hos.driving_hours_today == 6
        assert memory_repo.rows[created.id].hours_of_service.duty_hours_today == 6

    @pytest.mark.asyncio
    async def test_rejected_hours_leave_store_unchanged(self, service, created, memory_repo):
        """An over-limit entry is refused and the stored counter keeps its values."""
        await service.record_driving_time(created.id, 10)
        with pytest.raises(InvalidHoursOfServiceError):
            await service.record_driving_time(created.id, 2)
        assert memory_repo.rows[created.id].hours_of_service.driving_hours_today == 10

    @pytest.mark.asyncio
    async def test_break_and_reset(self, service, created):
        await service.record_on_duty_time(created.id, 2)
        await service.record_driving_time(created.id, 1)
        after_break = await service.record_break(created.id, 0.5)
        assert after_break.time_until_break_required == 0.5
        fresh = await service.reset_hours_for_new_day(created.id)
        assert fresh.duty_hours_today == 0
        assert (await service.get_hours_of_service(created.id)).driving_hours_today == 0


class TestCollections:
    @pytest.mark.asyncio
    async def test_remove_unknown_contact(self, service, created):
        with pytest.raises(NotFoundError, match="Emergency contact 999"):
            await service.remove_emergency_contact(created.id, 999)

    @pytest.mark.asyncio
    async def test_add_and_remove_endorsement(self, service, created):
        d = await service.add_endorsement(created.id, type="t")
        added = next(e for e in d.endorsements if e.type == "T")
        d = await service.remove_endorsement(created.id, added.id)
        assert [e.type for e in d.endorsements] == ["H"]

    @pytest.mark.asyncio
    async def test_attach_and_remove_document(self, service, created):
        """Removing a document hands back the removed record."""
        d = await service.attach_document(created.id, file_name="cdl.pdf", file_url="uploads/x.pdf", file_type="license")
        doc_id = d.documents[0].id
        removed = await service.remove_document(created.id, doc_id)
        assert removed.file_url == "uploads/x.pdf"
        assert (await service.get_driver(created.id)).documents == []
        with pytest.raises(NotFoundError):
            await service.remove_document(created.id, doc_id)


class TestMissingHoursAfterSave:
    @pytest.mark.asyncio
    async def test_lost_hours_counter_is_reported(self, created, memory_repo):
        """A store that drops the hours counter on save surfaces a state error."""
        original_update = memory_repo.update

        async def update_without_hours(driver):
            saved = await original_update(driver)
            saved.hours_of_service = None
            return saved

        memory_repo.update = update_without_hours
        with pytest.raises(InvalidStateError, match="were not saved"):
            await DriverService(memory_repo).record_driving_time(created.id, 1)
