"""Canonical media type serialization."""

from __future__ import annotations

import re

from mediatype.model import MediaType

_NEEDS_QUOTING = re.compile(r"[^a-z0-9\-']")


def quote_value(value: str) -> str:
    """Quote a parameter value unless it is a non-empty run of ``[a-z0-9-']``."""
    if value and _NEEDS_QUOTING.search(value) is None:
        return value
    escaped = value.replace('"', '\\"')
    return f'"{escaped}"'


def serialize(media_type: MediaType) -> str:
    """Render ``media_type`` as ``essence;key=value;...``."""
    essence = media_type.essence or ""
    if not media_type.parameters:
        return essence
    rendered = ";".join(
        f"{key}={quote_value(value)}" for key, value in media_type.parameters.items()
    )
    return f"{essence};{rendered}"
