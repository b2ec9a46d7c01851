# app/core/dependencies.py
from typing import Optional
from fastapi import Depends, Request

from app.core.config import Settings
from app.integrations.airtable_client import AirtableClient, EmployeeStore
from app.integrations.cloudinary_client import CloudinaryUploader
from app.integrations.email import EmailSender, FallbackEmailSender, ResendSender, SmtpSender
from app.modules.employees.errors import ConfigurationError
from app.modules.employees.matricule import MatriculeAllocator
from app.modules.employees.service import RegistrationService
from app.services.notifications import NotificationDispatcher


def build_email_sender(settings: Settings) -> Optional[EmailSender]:
    """Resend puis SMTP, dans cet ordre; None si aucun des deux n'est configuré."""
    senders = []
    if settings.resend_configured:
        senders.append(ResendSender(settings.RESEND_API_KEY, settings.EMAIL_FROM, api_base=settings.RESEND_API_BASE))
    if settings.smtp_configured:
        senders.append(SmtpSender(
            settings.SMTP_HOST,
            settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            sender=settings.EMAIL_FROM,
            starttls=settings.SMTP_STARTTLS,
        ))
    if not senders:
        return None
    return FallbackEmailSender(senders)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request) -> NotificationDispatcher:
    return request.app.state.notifier


def get_employee_store(settings: Settings = Depends(get_app_settings)) -> EmployeeStore:
    if not settings.airtable_configured:
        raise ConfigurationError("Configuration Airtable manquante")
    return AirtableClient.from_settings(settings)


def get_photo_uploader(settings: Settings = Depends(get_app_settings)) -> Optional[CloudinaryUploader]:
    if not settings.cloudinary_configured:
        return None
    return CloudinaryUploader.from_settings(settings)


def get_allocator(settings: Settings = Depends(get_app_settings)) -> MatriculeAllocator:
    return MatriculeAllocator(prefix=settings.MATRICULE_PREFIX)


def get_registration_service(
    settings: Settings = Depends(get_app_settings),
    store: EmployeeStore = Depends(get_employee_store),
    allocator: MatriculeAllocator = Depends(get_allocator),
    uploader: Optional[CloudinaryUploader] = Depends(get_photo_uploader),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> RegistrationService:
    return RegistrationService(
        store,
        allocator,
        uploader=uploader,
        notifier=notifier,
        require_contact=settings.REQUIRE_CONTACT_FIELDS,
    )
