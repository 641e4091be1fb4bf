from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from drivers_service.infrastructure.db.session import get_session
from drivers_service.infrastructure.repositories.driver_repo_sql import SQLDriverRepository
from drivers_service.infrastructure.storage.local_files import LocalDocumentStorage
from drivers_service.services.driver_service import DriverService


def driver_service(session: AsyncSession = Depends(get_session)) -> DriverService:
    return DriverService(SQLDriverRepository(session))


def document_storage() -> LocalDocumentStorage:
    return LocalDocumentStorage()
