import asyncio
import logging
import smtplib
from email.message import EmailMessage
from app.config import settings
from app.utils.errors import MailerError

logger = logging.getLogger(__name__)


def _send_sync(to: str, subject: str, html: str) -> None:
    message = EmailMessage()
    message["From"] = f"{settings.MAIL_FROM_NAME} <{settings.SMTP_USER}>"
    message["To"] = to
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable email client.")
    message.add_alternative(html, subtype="html")

    with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
        smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        smtp.send_message(message)


async def send_html(to: str, subject: str, html: str) -> None:
    """
    Send an HTML email through the configured SMTP account.
    Raises MailerError when SMTP is not configured or delivery fails.
    """
    if not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        raise MailerError("Mailer configuration missing. Set SMTP_USER and SMTP_PASSWORD.")

    try:
        # smtplib is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _send_sync, to, subject, html)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ Failed to send '{subject}' to {to}: {e}")
        raise MailerError(f"Failed to send email: {e}")

    logger.info(f"✅ Email '{subject}' sent to {to}")
