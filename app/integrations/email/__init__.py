from app.integrations.email.base import EmailSender, FallbackEmailSender
from app.integrations.email.resend import ResendSender
from app.integrations.email.smtp import SmtpSender

__all__ = ["EmailSender", "FallbackEmailSender", "ResendSender", "SmtpSender"]
