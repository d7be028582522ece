"""Email delivery for tenant notifications (Resend).

EMAIL_FROM must be an address at a domain verified in Resend to reach
arbitrary recipients.
"""

import html
import logging

import resend

from billmate.config import settings

logger = logging.getLogger(__name__)


def _should_skip_email(to_email: str) -> bool:
    """Skip sending in test env or to test domains (Resend sandbox restricts recipients)."""
    if settings.ENVIRONMENT == "test":
        return True
    test_domains = ("@test.com", "@test.example.com", "@resend.dev")
    return any(to_email.lower().endswith(d) for d in test_domains)


def render_html(title: str, body: str) -> str:
    paragraphs = "".join(
        f"<p>{html.escape(line)}</p>" for line in body.splitlines() if line.strip()
    )
    return f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{html.escape(title)}</title></head>
<body style="font-family: sans-serif; line-height: 1.6; color: #333; max-width: 560px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #0d6efd;">{html.escape(title)}</h2>
  {paragraphs}
  <hr style="border: none; border-top: 1px solid #e2e8f0; margin: 24px 0;">
  <p style="color: #94a3b8; font-size: 12px;">Bill Mate</p>
</body>
</html>
"""


def send_email(to_email: str, subject: str, body: str) -> bool:
    """
    Send a plain notification email.
    Returns True if sent (or deliberately skipped for a test recipient),
    False if no API key is configured or delivery failed.
    """
    if not settings.RESEND_API_KEY:
        logger.info("Email skipped (RESEND_API_KEY not set): '%s' to %s", subject, to_email)
        return False
    if _should_skip_email(to_email):
        logger.info("Email skipped (test env or test domain): '%s' to %s", subject, to_email)
        return True

    try:
        resend.api_key = settings.RESEND_API_KEY
        resend.Emails.send(
            {
                "from": settings.EMAIL_FROM,
                "to": [to_email],
                "subject": subject,
                "html": render_html(subject, body),
            }
        )
        logger.info("Notification email sent to %s", to_email)
        return True
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)
        return False
