from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Protocol

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from ..domain.errors import UpstreamDeliveryFailure
from ..domain.schemas.otp import EmailMessage

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    async def send(self, message: EmailMessage) -> None: ...


def to_sendgrid_mail(message: EmailMessage) -> Mail:
    return Mail(
        from_email=message.sender,
        to_emails=message.to,
        subject=message.subject,
        plain_text_content=message.text,
        html_content=message.html,
    )


def provider_error_detail(exc: BaseException) -> Any:
    """Best description of a failed send: the provider's error body if it sent one."""
    body = getattr(exc, "body", None)
    if body:
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8", errors="replace")
        if isinstance(body, str):
            try:
                return json.loads(body)
            except ValueError:
                return body
        return body
    return str(exc)


class SendGridMailer:
    """Thin wrapper around the SendGrid client with async-friendly send."""

    def __init__(self, api_key: Optional[str], *, timeout_sec: Optional[float] = None,
                 client: Optional[SendGridAPIClient] = None) -> None:
        self._client = client if client is not None else SendGridAPIClient(api_key)
        self._timeout_sec = timeout_sec

    async def send(self, message: EmailMessage) -> None:
        loop = asyncio.get_running_loop()
        # Mail conversion errors count as send errors
        future = loop.run_in_executor(None, lambda: self._client.send(to_sendgrid_mail(message)))
        if self._timeout_sec is not None:
            done, _ = await asyncio.wait({future}, timeout=self._timeout_sec)
            if not done:
                # the worker thread cannot be stopped; the send may still go through
                future.add_done_callback(_log_late_outcome)
                logger.warning("SendGrid call exceeded %ss; reporting failure", self._timeout_sec)
                raise UpstreamDeliveryFailure(
                    f"mail provider did not respond within {self._timeout_sec}s"
                )
        try:
            response = await future
        except Exception as exc:
            raise UpstreamDeliveryFailure(provider_error_detail(exc)) from exc
        logger.debug("SendGrid accepted message (status=%s)", getattr(response, "status_code", None))


def _log_late_outcome(future: asyncio.Future) -> None:
    exc = future.exception()
    if exc is None:
        logger.warning("SendGrid call finished after timeout; message was sent")
    else:
        logger.warning("SendGrid call failed after timeout: %s", provider_error_detail(exc))
