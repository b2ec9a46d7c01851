# app/modules/employees/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_registration_service
from app.modules.employees.errors import ValidationFailure
from app.modules.employees.service import RegistrationService
from .schemas import ErrorOut, PinAvailabilityOut, RegistrationIn, RegistrationOut

router = APIRouter()

_ERRORS = {400: {"model": ErrorOut}, 409: {"model": ErrorOut}, 500: {"model": ErrorOut}}


@router.post("", response_model=RegistrationOut, responses=_ERRORS)
async def create_employee(
    payload: RegistrationIn,
    service: RegistrationService = Depends(get_registration_service),
):
    result = await service.register(payload)
    return RegistrationOut(
        matricule=result.matricule,
        qr_id=result.qr_id,
        employee_id=result.employee_id,
        photo_url=result.photo_url,
    )


@router.get("", response_model=PinAvailabilityOut, responses=_ERRORS)
async def check_pin(
    pin: Optional[str] = Query(default=None),
    service: RegistrationService = Depends(get_registration_service),
):
    if not (pin or "").strip():
        raise ValidationFailure({"pin": "Le PIN est requis"})
    return PinAvailabilityOut(available=await service.check_pin_available(pin))
