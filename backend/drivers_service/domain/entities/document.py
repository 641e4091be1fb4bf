from __future__ import annotations
import datetime as dt
import uuid
from dataclasses import dataclass, field

from drivers_service.core.constants import DOCUMENT_TYPES, DOCUMENT_DESCRIPTIONS, IMAGE_EXTENSIONS
from drivers_service.domain import clock
from drivers_service.domain.exceptions import InvalidDocumentTypeError


def validate_document_type(file_type: str) -> None:
    if file_type not in DOCUMENT_TYPES:
        raise InvalidDocumentTypeError(file_type)


@dataclass
class Document:
    file_name: str
    file_url: str
    file_type: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    driver_id: str | None = None
    created_at: dt.datetime = field(default_factory=clock.utcnow)

    @classmethod
    def create(cls, *, file_name: str, file_url: str, file_type: str, id: str | None = None,
               driver_id: str | None = None, created_at: dt.datetime | None = None) -> "Document":
        validate_document_type(file_type)
        return cls(
            file_name=file_name,
            file_url=file_url,
            file_type=file_type,
            id=id or str(uuid.uuid4()),
            driver_id=driver_id,
            created_at=created_at or clock.utcnow(),
        )

    @property
    def file_extension(self) -> str:
        parts = self.file_name.split(".")
        return parts[-1].lower() if len(parts) > 1 else ""

    def is_image(self) -> bool:
        return self.file_extension in IMAGE_EXTENSIONS

    def is_pdf(self) -> bool:
        return self.file_extension == "pdf"

    @property
    def type_description(self) -> str:
        return DOCUMENT_DESCRIPTIONS.get(self.file_type, "Document")

    def update(self, *, file_name: str | None = None, file_url: str | None = None, file_type: str | None = None) -> None:
        # type check first so a bad type leaves the document untouched
        if file_type:
            validate_document_type(file_type)
        if file_name:
            self.file_name = file_name
        if file_url:
            self.file_url = file_url
        if file_type:
            self.file_type = file_type
