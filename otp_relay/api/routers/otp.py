from __future__ import annotations
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ...config import Settings
from ...domain.schemas.otp import OtpRequest
from ...services.mailer import Mailer
from ...services.otp_dispatch import dispatch_otp
from ..deps import get_app_settings, get_mailer

router = APIRouter(tags=["otp"])


async def _read_body(request: Request) -> dict[str, Any]:
    # anything that is not a JSON object reads as an empty one
    if "json" not in request.headers.get("content-type", ""):
        return {}
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@router.post("/send-otp")
async def send_otp(
    request: Request,
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
):
    # forwarded unvalidated
    payload = OtpRequest.model_validate(await _read_body(request))
    result = await dispatch_otp(mailer, payload, sender=settings.SENDGRID_SENDER)
    code = status.HTTP_200_OK if result.success else status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=code, content=result.to_payload())
