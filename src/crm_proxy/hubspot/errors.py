"""HubSpot API error type and conflict helpers.

HubSpot reports a duplicate contact with HTTP 409 and a body like::

    {"status": "error",
     "message": "Contact already exists. Existing ID: 179556362935",
     "category": "CONFLICT", ...}

The existing record id is only available inside the human-readable message,
so recovering it is a text match. If HubSpot changes the wording, the match
fails and callers fall back to reporting the conflict.
"""

from __future__ import annotations

import re
from typing import Any

EXISTING_ID_PATTERN = re.compile(r"Existing ID:\s*(\d+)")

CONFLICT_CATEGORY = "CONFLICT"


class HubSpotError(Exception):
    """A failed call to the HubSpot API.

    Raised for non-2xx responses and for transport failures (no response).

    Args:
        message: Short description of the failure.
        status_code: Upstream HTTP status, or None when no response arrived.
        payload: Decoded upstream body (JSON object or raw text), if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def category(self) -> str | None:
        if isinstance(self.payload, dict):
            return self.payload.get("category")
        return None

    @property
    def upstream_message(self) -> str:
        """The ``message`` field of the upstream error body, or empty string."""
        if isinstance(self.payload, dict):
            return self.payload.get("message") or ""
        return ""

    @property
    def details(self) -> Any:
        """What to forward to the caller: the upstream body if present, else our message."""
        if self.payload is not None and self.payload != "":
            return self.payload
        return self.message

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409 or self.category == CONFLICT_CATEGORY


def extract_existing_id(message: str | None) -> str | None:
    """Pull the duplicate record id out of a HubSpot conflict message.

    >>> extract_existing_id("Contact already exists. Existing ID: 179556362935")
    '179556362935'
    >>> extract_existing_id("Something else went wrong") is None
    True
    """
    if not message:
        return None
    match = EXISTING_ID_PATTERN.search(message)
    if match is None:
        return None
    return match.group(1)
