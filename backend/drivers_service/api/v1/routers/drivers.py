from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from drivers_service.api.v1.dependencies import document_storage, driver_service
from drivers_service.core.config import settings
from drivers_service.domain.entities.document import validate_document_type
from drivers_service.infrastructure.storage.local_files import LocalDocumentStorage
from drivers_service.schemas.driver import (
    AssignLoadIn,
    CredentialStatusOut,
    DriverCreate,
    DriverOut,
    DriverUpdate,
    EmergencyContactIn,
    EndorsementIn,
    HoursIn,
    HoursOfServiceOut,
    NotesIn,
    StatusIn,
)
from drivers_service.services.driver_service import DriverService

router = APIRouter(prefix="/api/v1/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverOut])
async def list_drivers(svc: DriverService = Depends(driver_service)):
    return [DriverOut.from_entity(d) for d in await svc.list_drivers()]


@router.get("/available", response_model=list[DriverOut])
async def list_available_drivers(svc: DriverService = Depends(driver_service)):
    return [DriverOut.from_entity(d) for d in await svc.list_available_drivers()]


@router.get("/{driver_id}", response_model=DriverOut)
async def get_driver(driver_id: str, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.get_driver(driver_id))


@router.post("", response_model=DriverOut, status_code=status.HTTP_201_CREATED)
async def create_driver(payload: DriverCreate, svc: DriverService = Depends(driver_service)):
    obj = await svc.create_driver(**payload.model_dump(exclude_none=True))
    return DriverOut.from_entity(obj)


@router.put("/{driver_id}", response_model=DriverOut)
async def update_driver(driver_id: str, payload: DriverUpdate, svc: DriverService = Depends(driver_service)):
    obj = await svc.update_driver(driver_id, **payload.model_dump(exclude_unset=True))
    return DriverOut.from_entity(obj)


@router.delete("/{driver_id}", response_model=DriverOut)
async def delete_driver(driver_id: str, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.delete_driver(driver_id))


# --- lifecycle -------------------------------------------------------------

@router.put("/{driver_id}/status", response_model=DriverOut)
async def update_status(driver_id: str, payload: StatusIn, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.update_status(driver_id, payload.status))


@router.put("/{driver_id}/assign-load", response_model=DriverOut)
async def assign_load(driver_id: str, payload: AssignLoadIn, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.assign_load(driver_id, payload.load_id))


@router.put("/{driver_id}/complete-load", response_model=DriverOut)
async def complete_load(driver_id: str, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.complete_load(driver_id))


@router.put("/{driver_id}/terminate", response_model=DriverOut)
async def terminate_driver(driver_id: str, payload: NotesIn | None = None,
                           svc: DriverService = Depends(driver_service)):
    notes = payload.notes if payload else None
    return DriverOut.from_entity(await svc.terminate_driver(driver_id, notes))


@router.put("/{driver_id}/leave", response_model=DriverOut)
async def put_driver_on_leave(driver_id: str, payload: NotesIn | None = None,
                              svc: DriverService = Depends(driver_service)):
    notes = payload.notes if payload else None
    return DriverOut.from_entity(await svc.put_driver_on_leave(driver_id, notes))


@router.put("/{driver_id}/return-from-leave", response_model=DriverOut)
async def return_driver_from_leave(driver_id: str, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.return_driver_from_leave(driver_id))


@router.get("/{driver_id}/credential-status", response_model=CredentialStatusOut)
async def credential_status(driver_id: str, days_threshold: int | None = Query(default=None, ge=0),
                            svc: DriverService = Depends(driver_service)):
    days = settings.credential_warning_days if days_threshold is None else days_threshold
    result = await svc.check_credential_status(driver_id, days)
    return CredentialStatusOut.model_validate(result)


# --- hours of service ------------------------------------------------------

@router.get("/{driver_id}/hours-of-service", response_model=HoursOfServiceOut)
async def get_hours_of_service(driver_id: str, svc: DriverService = Depends(driver_service)):
    return HoursOfServiceOut.from_entity(await svc.get_hours_of_service(driver_id))


@router.post("/{driver_id}/hours-of-service/driving", response_model=HoursOfServiceOut)
async def record_driving_time(driver_id: str, payload: HoursIn, svc: DriverService = Depends(driver_service)):
    return HoursOfServiceOut.from_entity(await svc.record_driving_time(driver_id, payload.hours))


@router.post("/{driver_id}/hours-of-service/on-duty", response_model=HoursOfServiceOut)
async def record_on_duty_time(driver_id: str, payload: HoursIn, svc: DriverService = Depends(driver_service)):
    return HoursOfServiceOut.from_entity(await svc.record_on_duty_time(driver_id, payload.hours))


@router.post("/{driver_id}/hours-of-service/break", response_model=HoursOfServiceOut)
async def record_break(driver_id: str, payload: HoursIn, svc: DriverService = Depends(driver_service)):
    return HoursOfServiceOut.from_entity(await svc.record_break(driver_id, payload.hours))


@router.post("/{driver_id}/hours-of-service/reset", response_model=HoursOfServiceOut)
async def reset_hours(driver_id: str, svc: DriverService = Depends(driver_service)):
    return HoursOfServiceOut.from_entity(await svc.reset_hours_for_new_day(driver_id))


# --- owned collections -----------------------------------------------------

@router.post("/{driver_id}/emergency-contacts", response_model=DriverOut, status_code=status.HTTP_201_CREATED)
async def add_emergency_contact(driver_id: str, payload: EmergencyContactIn,
                                svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.add_emergency_contact(driver_id, **payload.model_dump()))


@router.delete("/{driver_id}/emergency-contacts/{contact_id}", response_model=DriverOut)
async def remove_emergency_contact(driver_id: str, contact_id: int, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.remove_emergency_contact(driver_id, contact_id))


@router.post("/{driver_id}/endorsements", response_model=DriverOut, status_code=status.HTTP_201_CREATED)
async def add_endorsement(driver_id: str, payload: EndorsementIn, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.add_endorsement(driver_id, **payload.model_dump()))


@router.delete("/{driver_id}/endorsements/{endorsement_id}", response_model=DriverOut)
async def remove_endorsement(driver_id: str, endorsement_id: int, svc: DriverService = Depends(driver_service)):
    return DriverOut.from_entity(await svc.remove_endorsement(driver_id, endorsement_id))


@router.post("/{driver_id}/documents", response_model=DriverOut, status_code=status.HTTP_201_CREATED)
async def upload_document(
    driver_id: str,
    file: UploadFile = File(...),
    file_type: str = Form("other"),
    svc: DriverService = Depends(driver_service),
    storage: LocalDocumentStorage = Depends(document_storage),
):
    """
    Stores the uploaded file and attaches it to the driver as a document.
    Accepts PDF, PNG, JPEG and DOCX files up to the configured size limit.
    """
    validate_document_type(file_type)
    await svc.get_driver(driver_id)
    path = await storage.save(driver_id, file)
    try:
        obj = await svc.attach_document(
            driver_id, file_name=file.filename or "upload", file_url=path, file_type=file_type
        )
    except Exception:
        await storage.remove(path)
        raise
    return DriverOut.from_entity(obj)


@router.delete("/{driver_id}/documents/{document_id}", response_model=DriverOut)
async def remove_document(
    driver_id: str,
    document_id: str,
    svc: DriverService = Depends(driver_service),
    storage: LocalDocumentStorage = Depends(document_storage),
):
    removed = await svc.remove_document(driver_id, document_id)
    await storage.remove(removed.file_url)
    return DriverOut.from_entity(await svc.get_driver(driver_id))
