"""Parse, classify and serialize Internet media type strings."""

from __future__ import annotations

from mediatype.errors import InvalidMediaType
from mediatype.model import MediaType, ParseResult
from mediatype.parser import analyze, parse, parse_parameters
from mediatype.serializer import serialize

__all__ = [
    "InvalidMediaType",
    "MediaType",
    "ParseResult",
    "analyze",
    "parse",
    "parse_parameters",
    "serialize",
]

__version__ = "0.1.0"
