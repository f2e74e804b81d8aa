"""Errors raised by the media type parser."""

from __future__ import annotations

from typing import Any


class InvalidMediaType(ValueError):
    """Raised when a string does not follow the media type grammar."""

    def __init__(self, value: Any, reason: str | None = None) -> None:
        super().__init__(f"Invalid MediaType: {value}")
        self.value = value
        self.reason = reason
