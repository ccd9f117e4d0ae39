from pydantic import BaseModel, ConfigDict, Field
from typing import Any


class OtpRequest(BaseModel):
    # any JSON value is accepted; the provider does any rejecting
    model_config = ConfigDict(extra="ignore")

    recipient: Any = None
    otp: Any = None


class EmailMessage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: Any  # a single address, a list of addresses, or whatever arrived
    sender: Any = Field(alias="from")
    subject: str
    text: str
    html: str


class DispatchResult(BaseModel):
    success: bool
    error: Any = None  # provider detail: parsed JSON body or message string

    def to_payload(self) -> dict:
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error}
