from __future__ import annotations
import re

from drivers_service.core.constants import PHONE_MIN_DIGITS, PHONE_MAX_DIGITS

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NON_DIGIT = re.compile(r"[^0-9]")


def digits_only(value: str | None) -> str:
    return _NON_DIGIT.sub("", value or "")


def is_valid_email(value: str | None) -> bool:
    return bool(value) and EMAIL_RE.match(value) is not None


def is_valid_phone(value: str | None) -> bool:
    return PHONE_MIN_DIGITS <= len(digits_only(value)) <= PHONE_MAX_DIGITS
