from __future__ import annotations
from fastapi import Request
from ..config import Settings
from ..services.mailer import Mailer


def get_mailer(request: Request) -> Mailer:
    # built once in create_app(); tests hand in a fake
    return request.app.state.mailer


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
