from __future__ import annotations
from typing import Any


class UpstreamDeliveryFailure(Exception):
    """The mail provider did not accept the message.

    ``detail`` is whatever the provider told us: its parsed error body when
    there was one, otherwise the error message string.
    """

    def __init__(self, detail: Any) -> None:
        super().__init__(detail if isinstance(detail, str) else "upstream delivery failed")
        self.detail = detail
