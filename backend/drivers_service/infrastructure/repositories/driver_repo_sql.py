from __future__ import annotations
import datetime as dt
from enum import Enum
from typing import Any, Callable, Optional, Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drivers_service.core.constants import DriverStatus, DriverType, EmploymentStatus
from drivers_service.domain.entities.document import Document
from drivers_service.domain.entities.driver import Driver
from drivers_service.domain.entities.emergency_contact import EmergencyContact
from drivers_service.domain.entities.endorsement import Endorsement
from drivers_service.domain.entities.hours_of_service import HoursOfService
from drivers_service.domain.exceptions import ConflictError, NotFoundError
from drivers_service.infrastructure.db.tables import (
    DocumentRow,
    DriverRow,
    EmergencyContactRow,
    EndorsementRow,
    HoursOfServiceRow,
)

logger = structlog.get_logger("drivers.repository")

OWNED = frozenset({"emergency_contacts", "endorsements", "documents", "hours_of_service"})
SCALAR_FIELDS = tuple(sorted(Driver.field_names() - OWNED))


def _aware(value: dt.datetime | None) -> dt.datetime | None:
    # SQLite hands back naive datetimes even for timezone=True columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _contact_row(c: EmergencyContact) -> EmergencyContactRow:
    return EmergencyContactRow(name=c.name, relationship=c.relationship, phone=c.phone)


def _endorsement_row(e: Endorsement) -> EndorsementRow:
    return EndorsementRow(type=e.type, expiry_date=e.expiry_date)


def _document_row(d: Document) -> DocumentRow:
    return DocumentRow(id=d.id, file_name=d.file_name, file_url=d.file_url,
                       file_type=d.file_type, created_at=d.created_at)


def _sync(rows: list, entities: Sequence[Any], make_row: Callable[[Any], Any], fields: Sequence[str]) -> list:
    """Match entities to existing rows by id; unmatched entities become new rows."""
    by_id = {r.id: r for r in rows}
    synced = []
    for ent in entities:
        row = by_id.get(ent.id) if ent.id is not None else None
        if row is None:
            row = make_row(ent)
        else:
            for name in fields:
                setattr(row, name, getattr(ent, name))
        synced.append(row)
    return synced


def to_entity(row: DriverRow) -> Driver:
    values = {name: getattr(row, name) for name in SCALAR_FIELDS}
    values.update(
        driver_type=DriverType(row.driver_type),
        employment_status=EmploymentStatus(row.employment_status),
        status=DriverStatus.parse(row.status),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )
    hos = row.hours_of_service
    # rows are trusted: no re-validation, a stored licence may have expired since
    return Driver(
        **values,
        emergency_contacts=[
            EmergencyContact(name=c.name, relationship=c.relationship, phone=c.phone, id=c.id, driver_id=c.driver_id)
            for c in row.emergency_contacts
        ],
        endorsements=[
            Endorsement(type=e.type, expiry_date=e.expiry_date, id=e.id, driver_id=e.driver_id)
            for e in row.endorsements
        ],
        documents=[
            Document(file_name=d.file_name, file_url=d.file_url, file_type=d.file_type,
                     id=d.id, driver_id=d.driver_id, created_at=_aware(d.created_at))
            for d in row.documents
        ],
        hours_of_service=HoursOfService(
            driving_hours_today=hos.driving_hours_today,
            duty_hours_today=hos.duty_hours_today,
            time_until_break_required=hos.time_until_break_required,
            id=hos.id,
            driver_id=hos.driver_id,
        ) if hos is not None else None,
    )


class SQLDriverRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_row(self, driver_id: str, *, refresh: bool = False) -> Optional[DriverRow]:
        stmt = select(DriverRow).where(DriverRow.id == driver_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        res = await self.session.execute(stmt)
        return res.scalar_one_or_none()

    async def _commit(self, driver: Driver) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("driver.integrity_error", driver_id=driver.id, error=str(exc.orig))
            message = str(exc.orig).lower()
            # only unique violations map to a conflict; other integrity errors propagate
            if "unique" not in message and "duplicate key" not in message:
                raise
            if "email" in message:
                raise ConflictError(f"A driver with email {driver.email} already exists") from exc
            raise ConflictError(f"Driver {driver.id} conflicts with an existing record") from exc

    async def _reload(self, driver_id: str) -> Driver:
        row = await self._get_row(driver_id, refresh=True)
        if row is None:
            raise NotFoundError(f"Driver with ID {driver_id} not found")
        return to_entity(row)

    def _apply(self, row: DriverRow, driver: Driver) -> None:
        for name in SCALAR_FIELDS:
            setattr(row, name, _db_value(getattr(driver, name)))

        row.emergency_contacts = _sync(
            list(row.emergency_contacts), driver.emergency_contacts, _contact_row, ("name", "relationship", "phone")
        )
        row.endorsements = _sync(
            list(row.endorsements), driver.endorsements, _endorsement_row, ("type", "expiry_date")
        )
        row.documents = _sync(
            list(row.documents), driver.documents, _document_row, ("file_name", "file_url", "file_type")
        )

        hos = driver.hours_of_service
        if hos is None:
            row.hours_of_service = None
        elif row.hours_of_service is None:
            row.hours_of_service = HoursOfServiceRow(
                driving_hours_today=hos.driving_hours_today,
                duty_hours_today=hos.duty_hours_today,
                time_until_break_required=hos.time_until_break_required,
            )
        else:
            row.hours_of_service.driving_hours_today = hos.driving_hours_today
            row.hours_of_service.duty_hours_today = hos.duty_hours_today
            row.hours_of_service.time_until_break_required = hos.time_until_break_required

    async def find_all(self) -> Sequence[Driver]:
        res = await self.session.execute(select(DriverRow).order_by(DriverRow.last_name, DriverRow.first_name))
        return [to_entity(r) for r in res.scalars().all()]

    async def find_by_id(self, driver_id: str) -> Optional[Driver]:
        row = await self._get_row(driver_id)
        return to_entity(row) if row else None

    async def find_by_email(self, email: str) -> Optional[Driver]:
        res = await self.session.execute(select(DriverRow).where(DriverRow.email == email))
        row = res.scalar_one_or_none()
        return to_entity(row) if row else None

    async def create(self, driver: Driver) -> Driver:
        row = DriverRow(emergency_contacts=[], endorsements=[], documents=[])
        self._apply(row, driver)
        self.session.add(row)
        await self._commit(driver)
        logger.debug("driver.row_created", driver_id=driver.id)
        return await self._reload(driver.id)

    async def update(self, driver: Driver) -> Driver:
        row = await self._get_row(driver.id)
        if row is None:
            raise NotFoundError(f"Driver with ID {driver.id} not found")
        self._apply(row, driver)
        await self._commit(driver)
        logger.debug("driver.row_updated", driver_id=driver.id)
        return await self._reload(driver.id)

    async def delete(self, driver_id: str) -> Optional[Driver]:
        row = await self._get_row(driver_id)
        if row is None:
            return None
        deleted = to_entity(row)
        await self.session.delete(row)
        await self.session.commit()
        logger.debug("driver.row_deleted", driver_id=driver_id)
        return deleted
