from __future__ import annotations
import json
from typing import Any, Optional

from ..domain.schemas.otp import EmailMessage, OtpRequest

OTP_SUBJECT = "Your OTP Code"


def render_code(value: Any) -> str:
    """Text form of whatever arrived as the code.

    Strings pass through; absent is empty; other JSON values use their JSON
    spelling (``true``, ``12``, ``{"x": 1}``).
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def build_otp_message(payload: OtpRequest, sender: Optional[str]) -> EmailMessage:
    # code goes in verbatim (no escaping) in both bodies
    code = render_code(payload.otp)
    return EmailMessage(
        to=payload.recipient,
        sender=sender,
        subject=OTP_SUBJECT,
        text=f"Your one-time password is: {code}",
        html=f"<strong>Your OTP code is: {code}</strong>",
    )
