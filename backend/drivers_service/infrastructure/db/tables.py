from __future__ import annotations
from datetime import date, datetime

from sqlalchemy import String, Integer, Float, Date, DateTime, Text, ForeignKey, func
from sqlalchemy import orm
from sqlalchemy.orm import Mapped, mapped_column, relationship
from drivers_service.infrastructure.db.base import Base


class DriverRow(Base):
    __tablename__ = "driver"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(120))
    last_name: Mapped[str] = mapped_column(String(120), index=True)
    employee_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    dob: Mapped[date] = mapped_column(Date)
    ssn: Mapped[str | None] = mapped_column(String(16), nullable=True)

    phone_primary: Mapped[str] = mapped_column(String(32))
    phone_secondary: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    street_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    street_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state_province: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    license_number: Mapped[str] = mapped_column(String(64))
    license_state: Mapped[str] = mapped_column(String(32))
    license_class: Mapped[str] = mapped_column(String(16))
    license_class_other: Mapped[str | None] = mapped_column(String(64), nullable=True)
    license_expiry: Mapped[date] = mapped_column(Date)
    med_cert_expiry: Mapped[date] = mapped_column(Date)
    twic_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)

    hire_date: Mapped[date] = mapped_column(Date)
    driver_type: Mapped[str] = mapped_column(String(32))
    employment_status: Mapped[str] = mapped_column(String(32), default="active", index=True)
    operating_base_city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    operating_base_state: Mapped[str | None] = mapped_column(String(64), nullable=True)
    assigned_vehicle: Mapped[str | None] = mapped_column(String(64), nullable=True)

    status: Mapped[str] = mapped_column(String(32), default="available", index=True)
    load_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    emergency_contacts: Mapped[list["EmergencyContactRow"]] = relationship(
        back_populates="driver", cascade="all, delete-orphan", lazy="selectin", order_by="EmergencyContactRow.id"
    )
    endorsements: Mapped[list["EndorsementRow"]] = relationship(
        back_populates="driver", cascade="all, delete-orphan", lazy="selectin", order_by="EndorsementRow.id"
    )
    documents: Mapped[list["DocumentRow"]] = relationship(
        back_populates="driver", cascade="all, delete-orphan", lazy="selectin", order_by="DocumentRow.created_at"
    )
    hours_of_service: Mapped["HoursOfServiceRow | None"] = relationship(
        back_populates="driver", cascade="all, delete-orphan", lazy="selectin", uselist=False
    )


class EmergencyContactRow(Base):
    __tablename__ = "emergency_contact"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(ForeignKey("driver.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120))
    relationship: Mapped[str] = mapped_column(String(64))
    phone: Mapped[str] = mapped_column(String(32))

    # the "relationship" column shadows the orm helper inside this class body
    driver: Mapped[DriverRow] = orm.relationship(back_populates="emergency_contacts")


class EndorsementRow(Base):
    __tablename__ = "endorsement"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(ForeignKey("driver.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(1))
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    driver: Mapped[DriverRow] = relationship(back_populates="endorsements")


class DocumentRow(Base):
    __tablename__ = "document"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    driver_id: Mapped[str] = mapped_column(ForeignKey("driver.id", ondelete="CASCADE"), index=True)
    file_name: Mapped[str] = mapped_column(String(255))
    file_url: Mapped[str] = mapped_column(String(1024))
    file_type: Mapped[str] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    driver: Mapped[DriverRow] = relationship(back_populates="documents")


class HoursOfServiceRow(Base):
    __tablename__ = "hours_of_service"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(ForeignKey("driver.id", ondelete="CASCADE"), unique=True)
    driving_hours_today: Mapped[float] = mapped_column(Float, default=0.0)
    duty_hours_today: Mapped[float] = mapped_column(Float, default=0.0)
    time_until_break_required: Mapped[float] = mapped_column(Float, default=0.5)

    driver: Mapped[DriverRow] = relationship(back_populates="hours_of_service")
