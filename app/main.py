# app/main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router
from app.core.config import Settings, get_settings
from app.core.dependencies import build_email_sender
from app.core.logging import configure_logging
from app.integrations.email import EmailSender
from app.modules.employees.errors import GENERIC_ERROR, RegistrationError, ValidationFailure
from app.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


async def registration_error_handler(request: Request, exc: RegistrationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # corps absent / JSON invalide / type inattendu -> 400 comme un champ manquant
    errors = {}
    for err in exc.errors():
        fields = [p for p in err.get("loc", ())[1:] if isinstance(p, str)]
        errors.setdefault(fields[0] if fields else "body", "Requête invalide")
    return await registration_error_handler(request, ValidationFailure(errors))


async def catch_unhandled_errors(request: Request, call_next):
    # répond ici au lieu de laisser ServerErrorMiddleware relancer (double log)
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Erreur non gérée sur %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"success": False, "error": GENERIC_ERROR})


def create_app(settings: Optional[Settings] = None, *, email_sender: Optional[EmailSender] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    sender = email_sender if email_sender is not None else build_email_sender(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        notifier = NotificationDispatcher(sender, shutdown_timeout=settings.NOTIFY_SHUTDOWN_TIMEOUT)
        notifier.start()
        app.state.notifier = notifier
        if not settings.airtable_configured:
            logger.warning("AIRTABLE_API_KEY / AIRTABLE_BASE_ID absents: les inscriptions renverront 500")
        yield
        await notifier.shutdown()

    app = FastAPI(title="Inscription employés", lifespan=lifespan)
    app.state.settings = settings
    app.state.notifier = None

    app.middleware("http")(catch_unhandled_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["http://localhost:3000"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RegistrationError, registration_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
