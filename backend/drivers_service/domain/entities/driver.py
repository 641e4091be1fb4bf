"""
Driver aggregate: identity, licensing and employment data plus the owned
emergency contacts, endorsements, documents and hours-of-service counter.

Mutations that can fail are applied to a candidate copy first; the candidate is
validated as a whole and only then copied onto the live record, so a rejected
update never leaves a half-applied driver behind.
"""
from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from drivers_service.core.constants import (
    DEFAULT_CREDENTIAL_THRESHOLD_DAYS,
    MAX_DRIVER_AGE,
    MIN_DRIVER_AGE,
    DriverStatus,
    DriverType,
    EmploymentStatus,
)
from drivers_service.domain import clock
from drivers_service.domain.entities.document import Document
from drivers_service.domain.entities.emergency_contact import EmergencyContact
from drivers_service.domain.entities.endorsement import Endorsement
from drivers_service.domain.entities.hours_of_service import HoursOfService
from drivers_service.domain.exceptions import (
    DriverUnavailableError,
    InvalidDataError,
    InvalidStateError,
)
from drivers_service.domain.validators import is_valid_email, is_valid_phone

REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "dob",
    "phone_primary",
    "email",
    "license_number",
    "license_state",
    "license_class",
    "license_expiry",
    "med_cert_expiry",
    "hire_date",
    "driver_type",
)
DATE_FIELDS = ("dob", "license_expiry", "med_cert_expiry", "twic_expiry", "hire_date")
# owned collections and bookkeeping are changed through dedicated operations only
NON_UPDATABLE_FIELDS = frozenset({
    "id", "created_at", "updated_at",
    "emergency_contacts", "endorsements", "documents", "hours_of_service",
})


@dataclass(frozen=True)
class CredentialStatus:
    license_expired: bool
    license_expiring_soon: bool
    med_cert_expired: bool
    med_cert_expiring_soon: bool
    twic_expired: bool
    twic_expiring_soon: bool

    def has_issues(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


def _as_date(name: str, value: Any) -> dt.date | None:
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidDataError(f"Invalid date for {name}: {value}") from None


def _as_enum(enum_cls: type[Enum], value: Any, label: str) -> Any:
    if value is None:
        return None
    try:
        if enum_cls is DriverStatus:
            return DriverStatus.parse(value)
        return enum_cls(value)
    except ValueError:
        raise InvalidDataError(f"Invalid {label}: {getattr(value, 'value', value)}") from None


def validate_driver(candidate: "Driver", today: dt.date | None = None) -> "Driver":
    """Validate a candidate record and return it with dates and enums normalized."""
    for name in REQUIRED_FIELDS:
        if not getattr(candidate, name):
            raise InvalidDataError(f"Missing required field: {name}")

    if not is_valid_email(candidate.email):
        raise InvalidDataError("Invalid email format")
    if not is_valid_phone(candidate.phone_primary):
        raise InvalidDataError("Invalid primary phone number format")
    if candidate.phone_secondary and not is_valid_phone(candidate.phone_secondary):
        raise InvalidDataError("Invalid secondary phone number format")

    dates = {name: _as_date(name, getattr(candidate, name)) for name in DATE_FIELDS}
    today = today or clock.today()

    birth_year = dates["dob"].year
    if birth_year < today.year - MAX_DRIVER_AGE or birth_year > today.year - MIN_DRIVER_AGE:
        raise InvalidDataError(
            f"Invalid date of birth (driver must be between {MIN_DRIVER_AGE} and {MAX_DRIVER_AGE} years old)"
        )
    if dates["license_expiry"] < today:
        raise InvalidDataError("License is already expired")
    if dates["med_cert_expiry"] < today:
        raise InvalidDataError("Medical certificate is already expired")

    return replace(
        candidate,
        **dates,
        driver_type=_as_enum(DriverType, candidate.driver_type, "driver type"),
        employment_status=_as_enum(EmploymentStatus, candidate.employment_status, "employment status"),
        status=_as_enum(DriverStatus, candidate.status, "driver status"),
    )


def _append_note(existing: str | None, label: str, note: str | None) -> str | None:
    if not note:
        return existing
    entry = f"{label}: {note}"
    return f"{existing}\n\n{entry}" if existing else entry


@dataclass(kw_only=True)
class Driver:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    first_name: str | None = None
    last_name: str | None = None
    employee_id: str | None = None
    dob: dt.date | None = None
    ssn: str | None = None

    phone_primary: str | None = None
    phone_secondary: str | None = None
    email: str | None = None

    street_number: str | None = None
    street_name: str | None = None
    city: str | None = None
    state_province: str | None = None
    country: str | None = None
    postal_code: str | None = None

    license_number: str | None = None
    license_state: str | None = None
    license_class: str | None = None
    license_class_other: str | None = None
    license_expiry: dt.date | None = None
    med_cert_expiry: dt.date | None = None
    twic_expiry: dt.date | None = None

    hire_date: dt.date | None = None
    driver_type: DriverType | None = None
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    operating_base_city: str | None = None
    operating_base_state: str | None = None
    assigned_vehicle: str | None = None

    status: DriverStatus = DriverStatus.AVAILABLE
    load_id: str | None = None
    notes: str | None = None
    avatar_url: str | None = None

    emergency_contacts: list[EmergencyContact] = field(default_factory=list)
    endorsements: list[Endorsement] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    hours_of_service: HoursOfService | None = None

    created_at: dt.datetime = field(default_factory=clock.utcnow)
    updated_at: dt.datetime = field(default_factory=clock.utcnow)

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def create(cls, **data: Any) -> "Driver":
        unknown = set(data) - cls.field_names()
        if unknown:
            raise InvalidDataError(f"Unknown field: {sorted(unknown)[0]}")
        data = {k: v for k, v in data.items() if v is not None}
        data.setdefault("employment_status", EmploymentStatus.ACTIVE)
        data.setdefault("status", DriverStatus.AVAILABLE)
        now = clock.utcnow()
        data.setdefault("created_at", now)
        data.setdefault("updated_at", now)
        return validate_driver(cls(**data))

    def _commit(self, candidate: "Driver") -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(candidate, f.name))

    def _touch(self) -> None:
        self.updated_at = clock.utcnow()

    # --- queries -------------------------------------------------------

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def full_address(self) -> str | None:
        parts = [
            self.street_number,
            self.street_name,
            self.city,
            self.state_province,
            self.postal_code,
            self.country,
        ]
        present = [p for p in parts if p]
        return ", ".join(present) if present else None

    def is_available(self) -> bool:
        return self.status is DriverStatus.AVAILABLE

    def is_license_expired(self, today: dt.date | None = None) -> bool:
        return (today or clock.today()) > self.license_expiry

    def is_med_cert_expired(self, today: dt.date | None = None) -> bool:
        return (today or clock.today()) > self.med_cert_expiry

    def check_credential_status(self, days_threshold: int = DEFAULT_CREDENTIAL_THRESHOLD_DAYS,
                                today: dt.date | None = None) -> CredentialStatus:
        now = today or clock.today()
        horizon = now + dt.timedelta(days=days_threshold)

        def expired(expiry: dt.date | None) -> bool:
            return expiry is not None and now > expiry

        def expiring_soon(expiry: dt.date | None) -> bool:
            return expiry is not None and now <= expiry <= horizon

        return CredentialStatus(
            license_expired=expired(self.license_expiry),
            license_expiring_soon=expiring_soon(self.license_expiry),
            med_cert_expired=expired(self.med_cert_expiry),
            med_cert_expiring_soon=expiring_soon(self.med_cert_expiry),
            twic_expired=expired(self.twic_expiry),
            twic_expiring_soon=expiring_soon(self.twic_expiry),
        )

    # --- field updates -------------------------------------------------

    def update(self, **changes: Any) -> None:
        """Merge ``changes`` onto a copy, validate the copy, then commit it."""
        unknown = set(changes) - self.field_names()
        if unknown:
            raise InvalidDataError(f"Unknown field: {sorted(unknown)[0]}")
        locked = set(changes) & NON_UPDATABLE_FIELDS
        if locked:
            raise InvalidDataError(f"Field cannot be updated directly: {sorted(locked)[0]}")

        candidate = validate_driver(replace(self, **changes))
        candidate.updated_at = clock.utcnow()
        self._commit(candidate)

    def update_status(self, status: DriverStatus | str) -> None:
        self.status = _as_enum(DriverStatus, status, "driver status")
        self._touch()

    # --- load assignment -----------------------------------------------

    def assign_load(self, load_id: str) -> None:
        if not self.is_available():
            raise DriverUnavailableError(f"Driver {self.full_name} is not available for assignment")
        if not load_id or not str(load_id).strip():
            raise InvalidDataError("Missing required field: load_id")
        self.load_id = str(load_id).strip()
        self.status = DriverStatus.DRIVING
        self._touch()

    def complete_load(self) -> None:
        if not self.load_id:
            raise InvalidStateError(f"Driver {self.full_name} does not have a load assigned")
        self.load_id = None
        self.status = DriverStatus.AVAILABLE
        self._touch()

    # --- employment ----------------------------------------------------

    def terminate(self, notes: str | None = None) -> None:
        self.employment_status = EmploymentStatus.TERMINATED
        self.status = DriverStatus.OFF_DUTY
        self.notes = _append_note(self.notes, "Termination", notes)
        self._touch()

    def put_on_leave(self, notes: str | None = None) -> None:
        self.employment_status = EmploymentStatus.LEAVE
        self.status = DriverStatus.AWAY
        self.notes = _append_note(self.notes, "Leave", notes)
        self._touch()

    def return_from_leave(self) -> None:
        if self.employment_status is not EmploymentStatus.LEAVE:
            raise InvalidStateError(f"Driver {self.full_name} is not on leave")
        self.employment_status = EmploymentStatus.ACTIVE
        self.status = DriverStatus.AVAILABLE
        self._touch()

    # --- owned collections ---------------------------------------------

    def add_emergency_contact(self, contact: EmergencyContact) -> None:
        if not contact.is_valid():
            raise InvalidDataError("Emergency contact requires name, relationship and a phone with at least 10 digits")
        self.emergency_contacts.append(contact)
        self._touch()

    def remove_emergency_contact(self, contact_id: int) -> bool:
        before = len(self.emergency_contacts)
        self.emergency_contacts = [c for c in self.emergency_contacts if c.id != contact_id]
        removed = len(self.emergency_contacts) < before
        if removed:
            self._touch()
        return removed

    def add_endorsement(self, endorsement: Endorsement) -> None:
        self.endorsements.append(endorsement)
        self._touch()

    def remove_endorsement(self, endorsement_id: int) -> bool:
        before = len(self.endorsements)
        self.endorsements = [e for e in self.endorsements if e.id != endorsement_id]
        removed = len(self.endorsements) < before
        if removed:
            self._touch()
        return removed

    def add_document(self, document: Document) -> None:
        self.documents.append(document)
        self._touch()

    def remove_document(self, document_id: str) -> bool:
        before = len(self.documents)
        self.documents = [d for d in self.documents if d.id != document_id]
        removed = len(self.documents) < before
        if removed:
            self._touch()
        return removed

    def set_hours_of_service(self, hours_of_service: HoursOfService) -> None:
        self.hours_of_service = hours_of_service
        self._touch()
