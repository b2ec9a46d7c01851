# app/modules/employees/validators.py
"""Validation des champs du formulaire d'inscription.

Sans effet de bord: appelée pour le retour en direct côté formulaire
et de nouveau à la soumission.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Dict, Optional

from app.modules.employees.schemas import RegistrationIn
from app.utils.text import only_digits

PIN_RE = re.compile(r"^\d{4,6}$", re.ASCII)
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_CHARS_RE = re.compile(r"^\+?[\d\s().-]+$")
ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

MSG_PIN_FORMAT = "Le PIN doit contenir entre 4 et 6 chiffres"
MSG_PIN_MISMATCH = "Les codes PIN ne correspondent pas"


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def is_valid_pin(pin: Optional[str]) -> bool:
    # fullmatch: "$" accepterait un "\n" final
    return bool(pin) and PIN_RE.fullmatch(pin) is not None


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and EMAIL_RE.fullmatch(value.strip()) is not None


def is_valid_phone(value: Optional[str]) -> bool:
    if not value or not PHONE_CHARS_RE.fullmatch(value.strip()):
        return False
    return 8 <= len(only_digits(value)) <= 15


def parse_birth_date(value: Optional[str]) -> Optional[date]:
    # uniquement YYYY-MM-DD: fromisoformat accepte aussi 19900101 et 1990-W01-1
    v = (value or "").strip()
    if not ISO_DATE_RE.fullmatch(v):
        return None
    try:
        return date.fromisoformat(v)
    except ValueError:
        return None


def validate_registration(
    req: RegistrationIn,
    require_contact: bool = False,
    today: Optional[date] = None,
) -> Dict[str, str]:
    """Retourne {champ: message}; un dict vide signifie valide."""
    errors: Dict[str, str] = {}

    if _blank(req.nom):
        errors["nom"] = "Le nom est requis"
    if _blank(req.prenom):
        errors["prenom"] = "Le prénom est requis"
    if _blank(req.poste):
        errors["poste"] = "Le poste est requis"

    if _blank(req.date_naissance):
        errors["dateNaissance"] = "La date de naissance est requise"
    else:
        born = parse_birth_date(req.date_naissance)
        if born is None or born > (today or date.today()):
            errors["dateNaissance"] = "Date de naissance invalide"

    if _blank(req.pin):
        errors["pin"] = "Le code PIN est requis"
    elif not is_valid_pin(req.pin):
        errors["pin"] = MSG_PIN_FORMAT

    if not req.confirm_pin:
        errors["confirmPin"] = "La confirmation du PIN est requise"
    elif req.pin != req.confirm_pin:
        errors["confirmPin"] = MSG_PIN_MISMATCH

    if _blank(req.email):
        if require_contact:
            errors["email"] = "L'email est requis"
    elif not is_valid_email(req.email):
        errors["email"] = "Adresse email invalide"

    if _blank(req.telephone):
        if require_contact:
            errors["telephone"] = "Le téléphone est requis"
    elif not is_valid_phone(req.telephone):
        errors["telephone"] = "Numéro de téléphone invalide"

    return errors
