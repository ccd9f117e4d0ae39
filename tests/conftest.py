import asyncio

import pytest
from fastapi.testclient import TestClient

from otp_relay.config import Settings
from otp_relay.main import create_app


class FakeMailer:
    """Stands in for SendGridMailer; records messages, optionally fails."""

    def __init__(self, error: Exception | None = None, delay: float = 0.0):
        self.error = error
        self.delay = delay
        self.sent = []

    async def send(self, message):
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append(message)
        if self.error is not None:
            raise self.error


class ProviderHTTPError(Exception):
    """Shape of the SDK's HTTP error: a message plus the raw response body."""

    def __init__(self, message: str, body: bytes | None = None):
        super().__init__(message)
        self.body = body


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENV="test",
        SENDGRID_API_KEY="SG.test-key",
        SENDGRID_SENDER="noreply@example.test",
    )


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def client(settings, mailer):
    with TestClient(create_app(settings, mailer)) as c:
        yield c
