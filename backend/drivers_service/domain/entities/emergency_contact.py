from __future__ import annotations
from dataclasses import dataclass

from drivers_service.core.constants import PHONE_MIN_DIGITS
from drivers_service.domain.validators import digits_only


@dataclass
class EmergencyContact:
    name: str
    relationship: str
    phone: str
    id: int | None = None
    driver_id: str | None = None

    @classmethod
    def create(cls, *, name: str, relationship: str, phone: str,
               id: int | None = None, driver_id: str | None = None) -> "EmergencyContact":
        return cls(name=name, relationship=relationship, phone=phone, id=id, driver_id=driver_id)

    def is_valid(self) -> bool:
        return bool(
            self.name and self.relationship and self.phone
            and len(digits_only(self.phone)) >= PHONE_MIN_DIGITS
        )

    def update(self, *, name: str | None = None, relationship: str | None = None, phone: str | None = None) -> None:
        if name:
            self.name = name
        if relationship:
            self.relationship = relationship
        if phone:
            self.phone = phone
