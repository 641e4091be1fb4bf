from __future__ import annotations
import math
from dataclasses import dataclass, replace

from drivers_service.core.constants import (
    MAX_DRIVING_HOURS_PER_DAY,
    MAX_DUTY_HOURS_PER_DAY,
    REQUIRED_BREAK_HOURS,
)
from drivers_service.domain.exceptions import InvalidHoursOfServiceError


def _require_finite(value: float, label: str) -> None:
    if not math.isfinite(value):
        raise InvalidHoursOfServiceError(f"{label} must be a finite number")


def validate_hours(driving_hours: float, duty_hours: float, time_until_break: float) -> None:
    _require_finite(driving_hours, "Driving hours")
    _require_finite(duty_hours, "Duty hours")
    _require_finite(time_until_break, "Time until break")
    if driving_hours < 0:
        raise InvalidHoursOfServiceError("Driving hours cannot be negative")
    if duty_hours < 0:
        raise InvalidHoursOfServiceError("Duty hours cannot be negative")
    if time_until_break < 0:
        raise InvalidHoursOfServiceError("Time until break cannot be negative")
    if driving_hours > duty_hours:
        raise InvalidHoursOfServiceError("Driving hours cannot exceed duty hours")
    if driving_hours > MAX_DRIVING_HOURS_PER_DAY:
        raise InvalidHoursOfServiceError(
            f"Driving hours cannot exceed {MAX_DRIVING_HOURS_PER_DAY:g} hours per day"
        )
    if duty_hours > MAX_DUTY_HOURS_PER_DAY:
        raise InvalidHoursOfServiceError(
            f"Duty hours cannot exceed {MAX_DUTY_HOURS_PER_DAY:g} hours per day"
        )


@dataclass
class HoursOfService:
    """Daily hours-of-service counter for one driver.

    Every mutator computes a candidate, validates it with ``validate_hours`` and
    only then replaces the current values, so a rejected call leaves the
    counter exactly as it was.
    """

    driving_hours_today: float = 0.0
    duty_hours_today: float = 0.0
    time_until_break_required: float = REQUIRED_BREAK_HOURS
    id: int | None = None
    driver_id: str | None = None

    @classmethod
    def create(cls, *, driving_hours_today: float, duty_hours_today: float, time_until_break_required: float,
               id: int | None = None, driver_id: str | None = None) -> "HoursOfService":
        validate_hours(driving_hours_today, duty_hours_today, time_until_break_required)
        return cls(
            driving_hours_today=driving_hours_today,
            duty_hours_today=duty_hours_today,
            time_until_break_required=time_until_break_required,
            id=id,
            driver_id=driver_id,
        )

    @classmethod
    def create_default(cls, driver_id: str | None = None) -> "HoursOfService":
        return cls(0.0, 0.0, REQUIRED_BREAK_HOURS, driver_id=driver_id)

    def _commit(self, candidate: "HoursOfService") -> None:
        validate_hours(
            candidate.driving_hours_today,
            candidate.duty_hours_today,
            candidate.time_until_break_required,
        )
        self.driving_hours_today = candidate.driving_hours_today
        self.duty_hours_today = candidate.duty_hours_today
        self.time_until_break_required = candidate.time_until_break_required

    def has_reached_max_driving_hours(self) -> bool:
        return self.driving_hours_today >= MAX_DRIVING_HOURS_PER_DAY

    def has_reached_max_duty_hours(self) -> bool:
        return self.duty_hours_today >= MAX_DUTY_HOURS_PER_DAY

    def needs_break(self) -> bool:
        return self.time_until_break_required <= 0

    @property
    def remaining_driving_hours(self) -> float:
        return max(0.0, MAX_DRIVING_HOURS_PER_DAY - self.driving_hours_today)

    @property
    def remaining_duty_hours(self) -> float:
        return max(0.0, MAX_DUTY_HOURS_PER_DAY - self.duty_hours_today)

    def add_driving_time(self, hours: float) -> None:
        _require_finite(hours, "Hours")
        if hours < 0:
            raise InvalidHoursOfServiceError("Cannot add negative driving time")
        self._commit(replace(
            self,
            driving_hours_today=self.driving_hours_today + hours,
            duty_hours_today=self.duty_hours_today + hours,
            time_until_break_required=max(0.0, self.time_until_break_required - hours),
        ))

    def add_on_duty_time(self, hours: float) -> None:
        _require_finite(hours, "Hours")
        if hours < 0:
            raise InvalidHoursOfServiceError("Cannot add negative duty time")
        self._commit(replace(self, duty_hours_today=self.duty_hours_today + hours))

    def take_break(self, hours: float) -> None:
        # Break length is only checked to be finite and non-negative; the countdown always resets to the
        # required break constant.
        _require_finite(hours, "Hours")
        if hours < 0:
            raise InvalidHoursOfServiceError("Break time cannot be negative")
        self.time_until_break_required = REQUIRED_BREAK_HOURS

    def reset_for_new_day(self) -> None:
        self.driving_hours_today = 0.0
        self.duty_hours_today = 0.0
        self.time_until_break_required = REQUIRED_BREAK_HOURS
