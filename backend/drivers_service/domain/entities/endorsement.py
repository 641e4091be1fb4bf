from __future__ import annotations
import datetime as dt
from dataclasses import dataclass

from drivers_service.core.constants import ENDORSEMENT_TYPES, ENDORSEMENT_DESCRIPTIONS
from drivers_service.domain import clock
from drivers_service.domain.exceptions import InvalidEndorsementTypeError


def normalize_endorsement_type(type_: str) -> str:
    upper = (type_ or "").strip().upper()
    if upper not in ENDORSEMENT_TYPES:
        raise InvalidEndorsementTypeError(type_)
    return upper


@dataclass
class Endorsement:
    """A CDL endorsement (H, N, P, S, T or X), stored in uppercase."""

    type: str
    expiry_date: dt.date | None = None
    id: int | None = None
    driver_id: str | None = None

    @classmethod
    def create(cls, *, type: str, expiry_date: dt.date | None = None,
               id: int | None = None, driver_id: str | None = None) -> "Endorsement":
        return cls(type=normalize_endorsement_type(type), expiry_date=expiry_date, id=id, driver_id=driver_id)

    @property
    def description(self) -> str:
        return ENDORSEMENT_DESCRIPTIONS.get(self.type, f"Endorsement {self.type}")

    def is_expired(self, today: dt.date | None = None) -> bool:
        if self.expiry_date is None:
            return False
        return (today or clock.today()) > self.expiry_date

    def update(self, *, type: str | None = None, expiry_date: dt.date | None = None) -> None:
        if type:
            self.type = normalize_endorsement_type(type)
        if expiry_date:
            self.expiry_date = expiry_date
