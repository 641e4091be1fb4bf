from __future__ import annotations
import datetime as dt
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from drivers_service.core.constants import DriverStatus, DriverType, EmploymentStatus


class EmergencyContactIn(BaseModel):
    name: str = Field(min_length=1)
    relationship: str = Field(min_length=1)
    phone: str = Field(min_length=1)


class EmergencyContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str
    relationship: str
    phone: str


class EndorsementIn(BaseModel):
    type: str = Field(min_length=1, description="One of H, N, P, S, T, X")
    expiry_date: Optional[dt.date] = None


class EndorsementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    type: str
    description: str
    expiry_date: Optional[dt.date] = None


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    file_name: str
    file_url: str
    file_type: str
    type_description: str
    created_at: dt.datetime


class HoursOfServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    driving_hours_today: float
    duty_hours_today: float
    time_until_break_required: float
    remaining_driving_hours: float
    remaining_duty_hours: float
    needs_break: bool

    @classmethod
    def from_entity(cls, hos) -> "HoursOfServiceOut":
        return cls(
            driving_hours_today=hos.driving_hours_today,
            duty_hours_today=hos.duty_hours_today,
            time_until_break_required=hos.time_until_break_required,
            remaining_driving_hours=hos.remaining_driving_hours,
            remaining_duty_hours=hos.remaining_duty_hours,
            needs_break=hos.needs_break(),
        )


class _StatusField(BaseModel):
    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def _normalize_status(cls, v):
        # older clients send "on-break" / "off-duty"
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_")
        return v


class DriverBase(_StatusField):
    employee_id: Optional[str] = None
    ssn: Optional[str] = None
    phone_secondary: Optional[str] = None
    street_number: Optional[str] = None
    street_name: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    license_class_other: Optional[str] = None
    twic_expiry: Optional[dt.date] = None
    employment_status: Optional[EmploymentStatus] = None
    operating_base_city: Optional[str] = None
    operating_base_state: Optional[str] = None
    assigned_vehicle: Optional[str] = None
    status: Optional[DriverStatus] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None


class DriverCreate(DriverBase):
    first_name: str
    last_name: str
    dob: dt.date
    phone_primary: str
    email: str
    license_number: str
    license_state: str
    license_class: str
    license_expiry: dt.date
    med_cert_expiry: dt.date
    hire_date: dt.date
    driver_type: DriverType
    emergency_contacts: List[EmergencyContactIn] = Field(default_factory=list)
    endorsements: List[EndorsementIn] = Field(default_factory=list)


class DriverUpdate(DriverBase):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[dt.date] = None
    phone_primary: Optional[str] = None
    email: Optional[str] = None
    license_number: Optional[str] = None
    license_state: Optional[str] = None
    license_class: Optional[str] = None
    license_expiry: Optional[dt.date] = None
    med_cert_expiry: Optional[dt.date] = None
    hire_date: Optional[dt.date] = None
    driver_type: Optional[DriverType] = None
    emergency_contacts: Optional[List[EmergencyContactIn]] = None
    endorsements: Optional[List[EndorsementIn]] = None


class ContactOut(BaseModel):
    phone: str
    email: str


class DriverOut(BaseModel):
    id: str
    name: str
    first_name: str
    last_name: str
    employee_id: Optional[str] = None
    dob: dt.date
    contact: ContactOut
    phone_secondary: Optional[str] = None
    address: Optional[str] = None
    street_number: Optional[str] = None
    street_name: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    license_number: str
    license_state: str
    license_class: str
    license_class_other: Optional[str] = None
    license_expiry: dt.date
    med_cert_expiry: dt.date
    twic_expiry: Optional[dt.date] = None
    hire_date: dt.date
    driver_type: DriverType
    employment_status: EmploymentStatus
    operating_base_city: Optional[str] = None
    operating_base_state: Optional[str] = None
    vehicle_id: Optional[str] = None
    status: DriverStatus
    status_description: str
    load_id: Optional[str] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None
    emergency_contacts: List[EmergencyContactOut] = Field(default_factory=list)
    endorsements: List[EndorsementOut] = Field(default_factory=list)
    documents: List[DocumentOut] = Field(default_factory=list)
    hours_of_service: Optional[HoursOfServiceOut] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_entity(cls, d) -> "DriverOut":
        # SSN is write-only
        return cls(
            id=d.id,
            name=d.full_name,
            first_name=d.first_name,
            last_name=d.last_name,
            employee_id=d.employee_id,
            dob=d.dob,
            contact=ContactOut(phone=d.phone_primary, email=d.email),
            phone_secondary=d.phone_secondary,
            address=d.full_address,
            street_number=d.street_number,
            street_name=d.street_name,
            city=d.city,
            state_province=d.state_province,
            country=d.country,
            postal_code=d.postal_code,
            license_number=d.license_number,
            license_state=d.license_state,
            license_class=d.license_class,
            license_class_other=d.license_class_other,
            license_expiry=d.license_expiry,
            med_cert_expiry=d.med_cert_expiry,
            twic_expiry=d.twic_expiry,
            hire_date=d.hire_date,
            driver_type=d.driver_type,
            employment_status=d.employment_status,
            operating_base_city=d.operating_base_city,
            operating_base_state=d.operating_base_state,
            vehicle_id=d.assigned_vehicle,
            status=d.status,
            status_description=d.status.description,
            load_id=d.load_id,
            notes=d.notes,
            avatar_url=d.avatar_url,
            emergency_contacts=[EmergencyContactOut.model_validate(c) for c in d.emergency_contacts],
            endorsements=[EndorsementOut.model_validate(e) for e in d.endorsements],
            documents=[DocumentOut.model_validate(doc) for doc in d.documents],
            hours_of_service=HoursOfServiceOut.from_entity(d.hours_of_service) if d.hours_of_service else None,
            created_at=d.created_at,
            updated_at=d.updated_at,
        )


class StatusIn(_StatusField):
    status: DriverStatus


class AssignLoadIn(BaseModel):
    load_id: str = Field(min_length=1)


class NotesIn(BaseModel):
    notes: Optional[str] = None


class HoursIn(BaseModel):
    # negative values reach the domain so it can report them in its own words
    hours: float = Field(allow_inf_nan=False)


class CredentialStatusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    license_expired: bool
    license_expiring_soon: bool
    med_cert_expired: bool
    med_cert_expiring_soon: bool
    twic_expired: bool
    twic_expiring_soon: bool
