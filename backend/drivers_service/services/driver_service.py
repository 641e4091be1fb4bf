from __future__ import annotations
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import structlog

from drivers_service.core.constants import DEFAULT_CREDENTIAL_THRESHOLD_DAYS, DriverStatus
from drivers_service.domain.entities.document import Document
from drivers_service.domain.entities.driver import CredentialStatus, Driver
from drivers_service.domain.entities.emergency_contact import EmergencyContact
from drivers_service.domain.entities.endorsement import Endorsement
from drivers_service.domain.entities.hours_of_service import HoursOfService
from drivers_service.domain.exceptions import ConflictError, InvalidDataError, InvalidStateError, NotFoundError
from drivers_service.domain.interfaces.driver_repo import DriverRepository

logger = structlog.get_logger("drivers.service")


def _build_contacts(items: Iterable[Mapping[str, Any]]) -> list[EmergencyContact]:
    contacts = [EmergencyContact.create(**dict(c)) for c in items]
    for c in contacts:
        if not c.is_valid():
            raise InvalidDataError(
                "Emergency contact requires name, relationship and a phone with at least 10 digits"
            )
    return contacts


def _build_endorsements(items: Iterable[Mapping[str, Any]]) -> list[Endorsement]:
    return [Endorsement.create(**dict(e)) for e in items]


class DriverService:
    def __init__(self, repo: DriverRepository):
        self.repo = repo

    # --- reads ---------------------------------------------------------

    async def list_drivers(self) -> Sequence[Driver]:
        return await self.repo.find_all()

    async def list_available_drivers(self) -> Sequence[Driver]:
        return [d for d in await self.repo.find_all() if d.is_available()]

    async def get_driver(self, driver_id: str) -> Driver:
        driver = await self.repo.find_by_id(driver_id)
        if driver is None:
            raise NotFoundError(f"Driver with ID {driver_id} not found")
        return driver

    async def get_driver_by_email(self, email: str) -> Optional[Driver]:
        return await self.repo.find_by_email(email)

    async def check_credential_status(self, driver_id: str,
                                      days_threshold: int = DEFAULT_CREDENTIAL_THRESHOLD_DAYS) -> CredentialStatus:
        driver = await self.get_driver(driver_id)
        return driver.check_credential_status(days_threshold)

    async def get_hours_of_service(self, driver_id: str) -> HoursOfService:
        driver = await self.get_driver(driver_id)
        return driver.hours_of_service or HoursOfService.create_default(driver.id)

    # --- create / update / delete --------------------------------------

    async def create_driver(self, *, emergency_contacts: Iterable[Mapping[str, Any]] | None = None,
                            endorsements: Iterable[Mapping[str, Any]] | None = None, **fields: Any) -> Driver:
        email = fields.get("email")
        if email and await self.repo.find_by_email(email):
            raise ConflictError(f"A driver with email {email} already exists")

        driver = Driver.create(**fields)
        driver.emergency_contacts = _build_contacts(emergency_contacts or [])
        driver.endorsements = _build_endorsements(endorsements or [])
        driver.hours_of_service = HoursOfService.create_default(driver.id)

        created = await self.repo.create(driver)
        logger.info("driver.created", driver_id=created.id, driver_type=created.driver_type.value)
        return created

    async def update_driver(self, driver_id: str, *, emergency_contacts: Iterable[Mapping[str, Any]] | None = None,
                            endorsements: Iterable[Mapping[str, Any]] | None = None, **changes: Any) -> Driver:
        driver = await self.get_driver(driver_id)

        new_email = changes.get("email")
        if new_email and new_email != driver.email:
            other = await self.repo.find_by_email(new_email)
            if other is not None and other.id != driver_id:
                raise ConflictError(f"A driver with email {new_email} already exists")

        # build replacements first so a bad contact or endorsement rejects the whole update
        contacts = _build_contacts(emergency_contacts) if emergency_contacts is not None else None
        new_endorsements = _build_endorsements(endorsements) if endorsements is not None else None

        driver.update(**changes)
        if contacts is not None:
            driver.emergency_contacts = contacts
        if new_endorsements is not None:
            driver.endorsements = new_endorsements

        updated = await self.repo.update(driver)
        logger.info("driver.updated", driver_id=driver_id, fields=sorted(changes))
        return updated

    async def delete_driver(self, driver_id: str) -> Driver:
        await self.get_driver(driver_id)
        deleted = await self.repo.delete(driver_id)
        if deleted is None:
            raise NotFoundError(f"Driver with ID {driver_id} not found")
        logger.info("driver.deleted", driver_id=driver_id)
        return deleted

    # --- lifecycle -----------------------------------------------------

    async def _mutate(self, driver_id: str, apply: Callable[[Driver], Any], event: str, **context: Any) -> Driver:
        driver = await self.get_driver(driver_id)
        apply(driver)
        saved = await self.repo.update(driver)
        logger.info(event, driver_id=driver_id, status=saved.status.value, **context)
        return saved

    async def update_status(self, driver_id: str, status: DriverStatus | str) -> Driver:
        return await self._mutate(driver_id, lambda d: d.update_status(status), "driver.status_updated")

    async def assign_load(self, driver_id: str, load_id: str) -> Driver:
        return await self._mutate(driver_id, lambda d: d.assign_load(load_id), "driver.load_assigned", load_id=load_id)

    async def complete_load(self, driver_id: str) -> Driver:
        return await self._mutate(driver_id, lambda d: d.complete_load(), "driver.load_completed")

    async def terminate_driver(self, driver_id: str, notes: str | None = None) -> Driver:
        return await self._mutate(driver_id, lambda d: d.terminate(notes), "driver.terminated")

    async def put_driver_on_leave(self, driver_id: str, notes: str | None = None) -> Driver:
        return await self._mutate(driver_id, lambda d: d.put_on_leave(notes), "driver.on_leave")

    async def return_driver_from_leave(self, driver_id: str) -> Driver:
        return await self._mutate(driver_id, lambda d: d.return_from_leave(), "driver.returned_from_leave")

    # --- hours of service ----------------------------------------------

    async def _update_hours(self, driver_id: str, apply: Callable[[HoursOfService], None],
                            event: str, **context: Any) -> HoursOfService:
        def _apply(driver: Driver) -> None:
            hos = driver.hours_of_service or HoursOfService.create_default(driver.id)
            apply(hos)
            driver.set_hours_of_service(hos)

        saved = await self._mutate(driver_id, _apply, event, **context)
        if saved.hours_of_service is None:
            raise InvalidStateError(f"Hours of service for driver {driver_id} were not saved")
        return saved.hours_of_service

    async def record_driving_time(self, driver_id: str, hours: float) -> HoursOfService:
        return await self._update_hours(driver_id, lambda h: h.add_driving_time(hours), "hos.driving_recorded", hours=hours)

    async def record_on_duty_time(self, driver_id: str, hours: float) -> HoursOfService:
        return await self._update_hours(driver_id, lambda h: h.add_on_duty_time(hours), "hos.on_duty_recorded", hours=hours)

    async def record_break(self, driver_id: str, hours: float) -> HoursOfService:
        return await self._update_hours(driver_id, lambda h: h.take_break(hours), "hos.break_recorded", hours=hours)

    async def reset_hours_for_new_day(self, driver_id: str) -> HoursOfService:
        return await self._update_hours(driver_id, lambda h: h.reset_for_new_day(), "hos.reset")

    # --- owned collections ---------------------------------------------

    async def add_emergency_contact(self, driver_id: str, *, name: str, relationship: str, phone: str) -> Driver:
        contact = EmergencyContact.create(name=name, relationship=relationship, phone=phone)
        return await self._mutate(driver_id, lambda d: d.add_emergency_contact(contact), "driver.contact_added")

    async def remove_emergency_contact(self, driver_id: str, contact_id: int) -> Driver:
        def _remove(d: Driver) -> None:
            if not d.remove_emergency_contact(contact_id):
                raise NotFoundError(f"Emergency contact {contact_id} not found for driver {driver_id}")
        return await self._mutate(driver_id, _remove, "driver.contact_removed", contact_id=contact_id)

    async def add_endorsement(self, driver_id: str, *, type: str, expiry_date=None) -> Driver:
        endorsement = Endorsement.create(type=type, expiry_date=expiry_date)
        return await self._mutate(driver_id, lambda d: d.add_endorsement(endorsement),
                                  "driver.endorsement_added", endorsement=endorsement.type)

    async def remove_endorsement(self, driver_id: str, endorsement_id: int) -> Driver:
        def _remove(d: Driver) -> None:
            if not d.remove_endorsement(endorsement_id):
                raise NotFoundError(f"Endorsement {endorsement_id} not found for driver {driver_id}")
        return await self._mutate(driver_id, _remove, "driver.endorsement_removed", endorsement_id=endorsement_id)

    async def attach_document(self, driver_id: str, *, file_name: str, file_url: str, file_type: str) -> Driver:
        document = Document.create(file_name=file_name, file_url=file_url, file_type=file_type, driver_id=driver_id)
        return await self._mutate(driver_id, lambda d: d.add_document(document),
                                  "driver.document_added", document_id=document.id, file_type=file_type)

    async def remove_document(self, driver_id: str, document_id: str) -> Document:
        driver = await self.get_driver(driver_id)
        document = next((doc for doc in driver.documents if doc.id == document_id), None)
        if document is None or not driver.remove_document(document_id):
            raise NotFoundError(f"Document {document_id} not found for driver {driver_id}")
        await self.repo.update(driver)
        logger.info("driver.document_removed", driver_id=driver_id, document_id=document_id)
        return document
