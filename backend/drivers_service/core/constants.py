from __future__ import annotations
from enum import Enum


class DriverStatus(str, Enum):
    AVAILABLE = "available"
    DRIVING = "driving"
    ON_BREAK = "on_break"
    LOADING = "loading"
    UNLOADING = "unloading"
    MAINTENANCE = "maintenance"
    AWAY = "away"
    OFF_DUTY = "off_duty"

    @classmethod
    def parse(cls, value: "str | DriverStatus") -> "DriverStatus":
        """Accepts enum members and the hyphenated spellings used by older clients."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower().replace("-", "_"))

    @property
    def description(self) -> str:
        return STATUS_DESCRIPTIONS[self]

    @property
    def can_be_assigned(self) -> bool:
        return self is DriverStatus.AVAILABLE


class DriverType(str, Enum):
    COMPANY = "company"
    OWNER_OPERATOR = "owner_operator"
    LEASE_PURCHASE = "lease_purchase"


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    LEAVE = "leave"
    TERMINATED = "terminated"


STATUS_DESCRIPTIONS: dict[DriverStatus, str] = {
    DriverStatus.AVAILABLE: "Available for assignment",
    DriverStatus.DRIVING: "Currently driving",
    DriverStatus.ON_BREAK: "Taking a break",
    DriverStatus.LOADING: "Loading cargo",
    DriverStatus.UNLOADING: "Unloading cargo",
    DriverStatus.MAINTENANCE: "Handling maintenance",
    DriverStatus.AWAY: "Away (not working)",
    DriverStatus.OFF_DUTY: "Off duty",
}

ACTIVE_STATUSES = frozenset({
    DriverStatus.AVAILABLE,
    DriverStatus.DRIVING,
    DriverStatus.LOADING,
    DriverStatus.UNLOADING,
    DriverStatus.MAINTENANCE,
})
INACTIVE_STATUSES = frozenset({DriverStatus.ON_BREAK, DriverStatus.AWAY, DriverStatus.OFF_DUTY})

# Hours of service (FMCSA property-carrying limits)
MAX_DRIVING_HOURS_PER_DAY = 11.0
MAX_DUTY_HOURS_PER_DAY = 14.0
REQUIRED_BREAK_HOURS = 0.5

MIN_DRIVER_AGE = 21
MAX_DRIVER_AGE = 80
PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15
DEFAULT_CREDENTIAL_THRESHOLD_DAYS = 30

ENDORSEMENT_DESCRIPTIONS: dict[str, str] = {
    "H": "Hazardous Materials",
    "N": "Tank Vehicles",
    "P": "Passenger Transport",
    "S": "School Bus",
    "T": "Double/Triple Trailers",
    "X": "Combination of Tank Vehicle and Hazardous Materials",
}
ENDORSEMENT_TYPES = frozenset(ENDORSEMENT_DESCRIPTIONS)

DOCUMENT_DESCRIPTIONS: dict[str, str] = {
    "license": "Driver License",
    "medical_certificate": "Medical Certificate",
    "twic_card": "TWIC Card",
    "training_certificate": "Training Certificate",
    "employment_verification": "Employment Verification",
    "background_check": "Background Check",
    "drug_test": "Drug Test Results",
    "other": "Other Document",
}
DOCUMENT_TYPES = frozenset(DOCUMENT_DESCRIPTIONS)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp"})

ALLOWED_UPLOAD_CONTENT_TYPES = frozenset({
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})
