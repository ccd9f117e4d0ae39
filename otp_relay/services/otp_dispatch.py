from __future__ import annotations

import logging
from typing import Optional

from ..domain.errors import UpstreamDeliveryFailure
from ..domain.schemas.otp import DispatchResult, OtpRequest
from ..observability.metrics import OTP_DISPATCH
from .mailer import Mailer
from .otp_message import build_otp_message

logger = logging.getLogger(__name__)


async def dispatch_otp(mailer: Mailer, payload: OtpRequest, *, sender: Optional[str]) -> DispatchResult:
    """Render the OTP email and hand it to the provider, once.

    Never raises for provider failures; those come back as an unsuccessful
    ``DispatchResult`` carrying the provider's detail unchanged.
    """
    message = build_otp_message(payload, sender)
    try:
        await mailer.send(message)
    except UpstreamDeliveryFailure as exc:
        logger.error("SendGrid error: %s", exc.detail)
        OTP_DISPATCH.labels(outcome="failed").inc()
        return DispatchResult(success=False, error=exc.detail)

    logger.info("otp_dispatched")
    OTP_DISPATCH.labels(outcome="sent").inc()
    return DispatchResult(success=True)
