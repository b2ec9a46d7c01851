# app/modules/employees/schemas.py
from __future__ import annotations
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


# Entrée du formulaire. Tout est optionnel ici: les champs manquants
# doivent donner un 400 avec le message du champ, pas un 422 générique.
class RegistrationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    nom: Optional[str] = None
    prenom: Optional[str] = None
    poste: Optional[str] = None
    date_naissance: Optional[str] = Field(default=None, alias="dateNaissance")
    pin: Optional[str] = None
    confirm_pin: Optional[str] = Field(default=None, alias="confirmPin")
    email: Optional[str] = None
    telephone: Optional[str] = None
    photo: Optional[str] = None   # data URI / base64


class RegistrationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    matricule: str
    qr_id: Optional[str] = Field(default=None, alias="qrId")
    employee_id: str = Field(alias="employeeId")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")


class PinAvailabilityOut(BaseModel):
    available: bool


class ErrorOut(BaseModel):
    success: bool = False
    error: str
    errors: Optional[Dict[str, str]] = None
