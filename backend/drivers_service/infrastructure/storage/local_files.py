from __future__ import annotations
import uuid
from pathlib import Path

import structlog
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from drivers_service.core.config import settings
from drivers_service.core.constants import ALLOWED_UPLOAD_CONTENT_TYPES
from drivers_service.domain.exceptions import InvalidUploadError

logger = structlog.get_logger("drivers.storage")

CHUNK_SIZE = 1024 * 1024


class LocalDocumentStorage:
    """Writes uploaded driver documents under ``upload_dir/<driver_id>/``."""

    def __init__(self, root: str | Path | None = None, max_bytes: int | None = None):
        self.root = Path(root or settings.upload_dir)
        self.max_bytes = max_bytes or settings.max_upload_bytes

    async def save(self, driver_id: str, upload: UploadFile) -> str:
        if upload.content_type not in ALLOWED_UPLOAD_CONTENT_TYPES:
            raise InvalidUploadError(f"Invalid file type: {upload.content_type}")

        chunks: list[bytes] = []
        size = 0
        while chunk := await upload.read(CHUNK_SIZE):
            size += len(chunk)
            if size > self.max_bytes:
                raise InvalidUploadError(f"File exceeds the {self.max_bytes} byte upload limit")
            chunks.append(chunk)

        suffix = Path(upload.filename or "").suffix.lower()
        target = self.root / driver_id / f"{uuid.uuid4().hex}{suffix}"
        await run_in_threadpool(self._write, target, b"".join(chunks))
        logger.info("document.stored", driver_id=driver_id, path=str(target), size=size)
        return str(target)

    async def remove(self, path: str) -> None:
        await run_in_threadpool(Path(path).unlink, missing_ok=True)

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
