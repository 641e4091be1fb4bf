from typing import Protocol, Sequence, Optional
from drivers_service.domain.entities.driver import Driver


class DriverRepository(Protocol):
    async def find_all(self) -> Sequence[Driver]: ...
    async def find_by_id(self, driver_id: str) -> Optional[Driver]: ...
    async def find_by_email(self, email: str) -> Optional[Driver]: ...
    async def create(self, driver: Driver) -> Driver: ...
    async def update(self, driver: Driver) -> Driver: ...
    async def delete(self, driver_id: str) -> Optional[Driver]: ...
