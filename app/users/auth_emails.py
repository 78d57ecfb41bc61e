# app/users/auth_emails.py

import logging

import resend

from config.appconfig import settings


logger = logging.getLogger(__name__)

resend.api_key = settings.RESEND_API_KEY


def _send(to: str, subject: str, html: str) -> bool:
    """Send through Resend; failures are logged and reported as False."""
    if not settings.RESEND_API_KEY:
        logger.warning(f"⚠️ RESEND_API_KEY not configured. Skipping '{subject}' email to {to}")
        return False

    try:
        logger.info(f"📧 Sending '{subject}' email to: {to}")
        r = resend.Emails.send(
            {
                "from": settings.EMAIL_FROM,
                "to": [to],
                "subject": subject,
                "html": html,
            }
        )
        logger.info(f"✅ Email sent successfully. ID: {r.get('id') if isinstance(r, dict) else r}")
        return True
    except Exception as e:
        logger.error(f"❌ Failed to send '{subject}' email to {to}: {e}")
        return False


# =================================================
# ✅ send 6-digit password reset code
# =================================================
def send_reset_code_email(email, reset_code, first_name="User", expiry_minutes=10):
    if not first_name:
        first_name = "User"

    return _send(
        email,
        "🔐 Your Afyascribe Password Reset Code",
        f"<p>Hello {first_name}.</p>"
        "<p>We received a request to reset your Afyascribe password. "
        "Enter the code below in the app to continue.</p>"
        f"<p style='font-size:28px;letter-spacing:6px'><strong>{reset_code}</strong></p>"
        f"<p>This code expires in {expiry_minutes} minutes. Do not share it with anyone.</p>"
        "<p>If you did not request a reset, you can ignore this email.</p>"
        "<p><strong> Afyascribe </strong></p>",
    )


# =================================================
# ✅ send reset password link with token in email
# =================================================
def send_reset_password_link_with_token_in_email(email, reset_link, first_name="User"):
    if not first_name:
        first_name = "User"

    return _send(
        email,
        "Reset your password!",
        f"<p> Hello {first_name}. We are sorry to hear that you have been having trouble logging in on your Afyascribe account. \
          To reset your password, click the link below</p>"
        f"<p><a href='{reset_link}'>{reset_link}</a></p>"
        "<p>You can only use this link once, not to be shared to anyone</p>"
        "<p><strong> Afyascribe </strong></p>",
    )


# =================================================
# ✅ send welcome email after registration
# =================================================
def send_welcome_email(email, first_name="User"):
    if not first_name:
        first_name = "User"

    return _send(
        email,
        "👋 Welcome to Afyascribe!",
        f"<p>Hello {first_name}. Welcome to Afyascribe.</p>"
        "<p>You can now record consultations, review transcriptions and manage SOAP notes "
        "for your patients.</p>"
        "<p><strong> Afyascribe </strong></p>",
    )
