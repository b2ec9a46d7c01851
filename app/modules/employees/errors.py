# app/modules/employees/errors.py
from __future__ import annotations
from typing import Any, Dict, Optional

GENERIC_ERROR = "Une erreur est survenue lors de l'enregistrement"
PIN_CONFLICT = "Ce code PIN est déjà utilisé. Veuillez en choisir un autre."


class RegistrationError(Exception):
    """Erreur remontée au client HTTP (message générique, jamais de détail interne)."""

    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class ValidationFailure(RegistrationError):
    status_code = 400

    def __init__(self, errors: Dict[str, str]):
        first = next(iter(errors.values()), "Requête invalide")
        super().__init__(first)
        self.errors = dict(errors)

    def to_body(self) -> Dict[str, Any]:
        return {**super().to_body(), "errors": self.errors}


class ConflictFailure(RegistrationError):
    status_code = 409

    def __init__(self, message: str = PIN_CONFLICT):
        super().__init__(message)


class DependencyFailure(RegistrationError):
    status_code = 500


class ConfigurationError(DependencyFailure):
    pass


# ---------- Erreurs internes des collaborateurs (jamais renvoyées telles quelles) ----------
class UpstreamError(RuntimeError):
    def __init__(self, code: str, data: Any = None, status_code: Optional[int] = None):
        super().__init__(code)
        self.code = code
        self.data = data
        self.status_code = status_code


class LookupFailure(UpstreamError):
    pass


class StoreError(UpstreamError):
    pass


class PhotoUploadError(UpstreamError):
    pass


class NotificationFailure(UpstreamError):
    pass
