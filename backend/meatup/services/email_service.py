"""Invite emails delivered through the Resend HTTP API."""
import logging
from typing import Optional

import httpx

from meatup.config import settings

logger = logging.getLogger(__name__)

INVITE_SUBJECT = "You're invited to join Meatup.Club"
INVITE_TEXT = (
    "Hi {invitee_name},\n\n"
    "{inviter_name} has invited you to Meatup.Club, where members vote on "
    "restaurants and dates for our quarterly dinners.\n\n"
    "Sign in and accept your invitation here: {accept_link}\n"
)


def accept_link() -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/accept-invite"


def send_invite_email(to: str, invitee_name: Optional[str], inviter_name: Optional[str]) -> bool:
    """Send the invitation. Returns False when delivery is disabled or fails."""
    if not settings.RESEND_API_KEY:
        logger.info("RESEND_API_KEY not configured; skipping invite email to %s", to)
        return False

    text = INVITE_TEXT.format(
        invitee_name=invitee_name or "there",
        inviter_name=inviter_name or "A member",
        accept_link=accept_link(),
    )
    try:
        with httpx.Client(timeout=10.0) as client:
            response = client.post(
                settings.RESEND_API_URL,
                headers={
                    "Authorization": f"Bearer {settings.RESEND_API_KEY}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": settings.EMAIL_FROM,
                    "to": [to],
                    "subject": INVITE_SUBJECT,
                    "text": text,
                    "tags": [{"name": "category", "value": "invite"}],
                },
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Failed to send invite email to %s: %s", to, e)
        return False

    logger.info("Invite email sent to %s", to)
    return True
