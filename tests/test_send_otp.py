import logging

from fastapi.testclient import TestClient

from otp_relay.domain.errors import UpstreamDeliveryFailure
from otp_relay.main import create_app
from otp_relay.services.mailer import SendGridMailer
from tests.conftest import FakeMailer, ProviderHTTPError


def test_success_returns_200_and_sends_rendered_message(client, mailer):
    r = client.post("/send-otp", json={"recipient": "a@b.com", "otp": "482913"})
    assert r.status_code == 200
    assert r.json() == {"success": True}

    assert len(mailer.sent) == 1
    msg = mailer.sent[0]
    assert msg.to == "a@b.com"
    assert msg.sender == "noreply@example.test"
    assert msg.subject == "Your OTP Code"
    assert msg.text == "Your one-time password is: 482913"


def test_structured_provider_error_is_returned_verbatim(settings, caplog):
    detail = {"errors": [{"message": "Does not contain a valid address.", "field": "personalizations.0.to.0.email"}]}
    app = create_app(settings, FakeMailer(error=UpstreamDeliveryFailure(detail)))
    with TestClient(app) as c, caplog.at_level(logging.ERROR):
        r = c.post("/send-otp", json={"recipient": "not-an-email", "otp": "1"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": detail}
    assert any(rec.getMessage().startswith("SendGrid error:") for rec in caplog.records)


def test_plain_provider_error_uses_message(settings):
    app = create_app(settings, FakeMailer(error=UpstreamDeliveryFailure("getaddrinfo ENOTFOUND api.sendgrid.com")))
    with TestClient(app) as c:
        r = c.post("/send-otp", json={"recipient": "a@b.com", "otp": "1"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "getaddrinfo ENOTFOUND api.sendgrid.com"}


def test_sdk_error_body_flows_through_to_response(settings):
    class FailingClient:
        def send(self, mail):
            raise ProviderHTTPError("HTTP Error 403: Forbidden",
                                    body=b'{"errors":[{"message":"sender identity not verified"}]}')

    app = create_app(settings, SendGridMailer("SG.x", client=FailingClient()))
    with TestClient(app) as c:
        r = c.post("/send-otp", json={"recipient": "a@b.com", "otp": "1"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": {"errors": [{"message": "sender identity not verified"}]}}


def test_missing_fields_are_forwarded(client, mailer):
    r = client.post("/send-otp", json={})
    assert r.status_code == 200
    assert mailer.sent[0].to is None

    r = client.post("/send-otp")
    assert r.status_code == 200
    assert len(mailer.sent) == 2


def test_recipient_list_is_forwarded(client, mailer):
    r = client.post("/send-otp", json={"recipient": ["a@b.com", "c@d.com"], "otp": "1"})
    assert r.status_code == 200
    assert mailer.sent[0].to == ["a@b.com", "c@d.com"]


def test_non_string_codes_are_forwarded(client, mailer):
    assert client.post("/send-otp", json={"recipient": "a@b.com", "otp": True}).status_code == 200
    assert client.post("/send-otp", json={"recipient": "a@b.com", "otp": {"x": 1}}).status_code == 200
    assert [m.text for m in mailer.sent] == [
        "Your one-time password is: true",
        'Your one-time password is: {"x": 1}',
    ]


def test_top_level_array_reads_as_empty_body(client, mailer):
    r = client.post("/send-otp", json=[])
    assert r.status_code == 200
    assert mailer.sent[0].to is None
    assert mailer.sent[0].text == "Your one-time password is: "


def test_non_json_bodies_read_as_empty(client, mailer):
    r = client.post("/send-otp", content=b"hello", headers={"Content-Type": "text/plain"})
    assert r.status_code == 200
    r = client.post("/send-otp", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 200
    assert [m.to for m in mailer.sent] == [None, None]


def test_sdk_refusing_to_build_mail_becomes_500(settings, monkeypatch):
    import otp_relay.services.mailer as mailer_module

    class AcceptingClient:
        def send(self, mail):
            return None

    def _refuse(message):
        raise TypeError("Please use a To, Cc, Bcc, or Email object.")

    monkeypatch.setattr(mailer_module, "to_sendgrid_mail", _refuse)
    app = create_app(settings, SendGridMailer("SG.x", client=AcceptingClient()))
    with TestClient(app) as c:
        r = c.post("/send-otp", json={"recipient": {"email": 5}, "otp": "1"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Please use a To, Cc, Bcc, or Email object."}


def test_extra_fields_ignored(client, mailer):
    r = client.post("/send-otp", json={"recipient": "a@b.com", "otp": "9", "code": "ignored"})
    assert r.status_code == 200
    assert mailer.sent[0].text == "Your one-time password is: 9"


def test_other_methods_not_allowed(client, mailer):
    assert client.get("/send-otp").status_code == 405
    assert client.put("/send-otp", json={}).status_code == 405
    assert mailer.sent == []


def test_unknown_paths_not_found(client):
    assert client.post("/send-code", json={"recipient": "a@b.com", "otp": "1"}).status_code == 404
    assert client.post("/api/create-meeting", json={}).status_code == 404
