# app/modules/employees/service.py
"""Inscription d'un employé.

Enchaînement strictement linéaire:
valider -> vérifier l'unicité du PIN -> allouer le matricule
-> créer l'enregistrement -> (photo, rattachée après coup) -> notifier (sans attendre).

La vérification d'unicité et l'insertion ne sont pas atomiques: deux
inscriptions simultanées avec le même PIN peuvent passer toutes les deux.
Seule une contrainte d'unicité côté Airtable fermerait cette fenêtre.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Optional

from app.integrations.airtable_client import EmployeeStore
from app.integrations.cloudinary_client import CloudinaryUploader
from app.modules.employees.emails import render_confirmation_email
from app.modules.employees.errors import (
    ConflictFailure,
    DependencyFailure,
    LookupFailure,
    PhotoUploadError,
    StoreError,
    ValidationFailure,
)
from app.modules.employees.matricule import MatriculeAllocator
from app.modules.employees.schemas import RegistrationIn
from app.modules.employees.validators import validate_registration
from app.services.notifications import EmailMessage, NotificationDispatcher
from app.utils.text import clean_optional, normalize_phone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    matricule: str
    employee_id: str
    qr_id: Optional[str] = None
    photo_url: Optional[str] = None


class RegistrationService:
    def __init__(
        self,
        store: EmployeeStore,
        allocator: Optional[MatriculeAllocator] = None,
        *,
        uploader: Optional[CloudinaryUploader] = None,
        notifier: Optional[NotificationDispatcher] = None,
        require_contact: bool = False,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store
        self.allocator = allocator or MatriculeAllocator()
        self.uploader = uploader
        self.notifier = notifier
        self.require_contact = require_contact
        self.clock = clock

    async def _pin_taken(self, pin: str) -> bool:
        try:
            return await self.store.pin_exists(pin)
        except LookupFailure as e:
            logger.error("Vérification du PIN impossible: %s status=%s data=%s", e.code, e.status_code, e.data)
            raise DependencyFailure("Erreur lors de la vérification du PIN") from e

    async def check_pin_available(self, pin: str) -> bool:
        return not await self._pin_taken(pin)

    async def _attach_photo(self, record_id: str, photo: Optional[str], matricule: str) -> Optional[str]:
        """Après création: upload puis mise à jour de l'enregistrement. Sans effet sur l'inscription."""
        if not photo or self.uploader is None:
            return None
        try:
            photo_url = await self.uploader.upload(photo, public_id=matricule)
        except PhotoUploadError as e:
            logger.warning("Upload photo échoué pour %s: %s status=%s", matricule, e.code, e.status_code)
            return None
        try:
            await self.store.update_employee(record_id, {"photo_url": photo_url})
        except StoreError as e:
            logger.warning("Photo de %s non rattachée (%s): %s status=%s", matricule, photo_url, e.code, e.status_code)
            return None
        return photo_url

    def _record_fields(self, req: RegistrationIn, matricule: str, qr_id: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "nom": req.nom.strip(),
            "prenom": req.prenom.strip(),
            "poste": req.poste.strip(),
            "date_naissance": req.date_naissance.strip(),
            "pin": req.pin,
            "matricule": matricule,
            "qr_id": qr_id,
            "actif": True,
            "date_inscription": self.clock().isoformat(),
        }
        optional = {
            "email": clean_optional(req.email),
            "telephone": normalize_phone(req.telephone),
        }
        fields |= {k: v for k, v in optional.items() if v}
        return fields

    def _notify(self, fields: Dict[str, Any]) -> None:
        to = fields.get("email")
        if not to or self.notifier is None:
            return
        subject, html = render_confirmation_email(
            nom=fields["nom"], prenom=fields["prenom"], poste=fields["poste"], matricule=fields["matricule"]
        )
        try:
            self.notifier.submit(EmailMessage(to=to, subject=subject, html=html))
        except Exception:
            logger.warning("Notification non planifiée pour %s", fields["matricule"], exc_info=True)

    async def register(self, req: RegistrationIn) -> RegistrationResult:
        errors = validate_registration(req, require_contact=self.require_contact, today=self.clock())
        if errors:
            raise ValidationFailure(errors)

        if await self._pin_taken(req.pin):
            raise ConflictFailure()

        matricule = self.allocator.allocate(req.nom, req.prenom)
        qr_id = self.allocator.qr_id()
        fields = self._record_fields(req, matricule, qr_id)

        try:
            record = await self.store.create_employee(fields)
        except StoreError as e:
            # le matricule alloué est simplement abandonné
            logger.error("Création Airtable échouée (%s): %s status=%s data=%s",
                         matricule, e.code, e.status_code, e.data)
            raise DependencyFailure("Erreur lors de la création de l'employé dans Airtable") from e

        employee_id = record.get("id", "")
        logger.info("Employé inscrit: matricule=%s id=%s", matricule, employee_id)
        photo_url = await self._attach_photo(employee_id, req.photo, matricule)
        self._notify(fields)
        return RegistrationResult(
            matricule=matricule,
            employee_id=employee_id,
            qr_id=qr_id,
            photo_url=photo_url,
        )
