"""Media type parsing: type/subtype splitting and the parameter scanner."""

from __future__ import annotations

import re
from typing import Any

import structlog

from mediatype import metrics
from mediatype.model import MediaType, ParseResult
from mediatype.settings import Settings, get_settings

LOGGER = structlog.get_logger(__name__)

TOP_LEVEL_TYPES: frozenset[str] = frozenset(
    {
        "*",
        "application",
        "audio",
        "font",
        "image",
        "haptics",
        "message",
        "model",
        "multipart",
        "text",
        "video",
    }
)

# Characters trimmed from the input, names and unquoted values. Control characters
# such as \x1c-\x1f are not whitespace here, so they still fail validation.
WHITESPACE = (
    "\t\n\x0b\x0c\r \xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

MAX_SUBTYPE_LENGTH = 127
RESERVED_SUBTYPE = "example"

_INVALID_SUBTYPE_CHARS = re.compile(r"[^a-z0-9!#$%^&*_\-+{}|'.`~]")
_INVALID_PARAMETER_NAME_CHARS = re.compile(r"[^a-z0-9\-]")

_CHARSET_UTF8 = "charset=utf-8"


def parse(value: Any, *, settings: Settings | None = None) -> MediaType | None:
    """Return the parsed media type, or None when ``value`` is invalid."""
    return analyze(value, settings=settings).media_type


def analyze(value: Any, *, settings: Settings | None = None) -> ParseResult:
    """Parse ``value`` and report why it was rejected or which parameters were dropped."""

    settings = settings or get_settings()
    result = ParseResult(value=value)
    result.media_type, result.reason = _parse(value, settings=settings, anomalies=result.anomalies)

    if result.reason is not None:
        LOGGER.debug("mediatype.rejected", value=value, reason=result.reason)
    if settings.metrics_enabled:
        metrics.observe_parse(reason=result.reason, anomalies=result.anomalies)
    return result


def _parse(
    value: Any, *, settings: Settings, anomalies: list[str]
) -> tuple[MediaType | None, str | None]:
    if not isinstance(value, str):
        return None, "not_a_string"

    # Case folding happens once, so parameter values end up lowercase as well.
    trimmed = value.strip(WHITESPACE).lower()
    if not trimmed:
        return None, "empty"

    slash_index = trimmed.find("/")
    if slash_index == -1:
        return None, "missing_slash"

    type_ = trimmed[:slash_index]
    remaining = trimmed[slash_index + 1 :]
    semicolon_index = remaining.find(";")
    if semicolon_index == -1:
        subtype = remaining
        raw_parameters = ""
    else:
        subtype = remaining[:semicolon_index].strip(WHITESPACE)
        raw_parameters = remaining[semicolon_index:]

    if type_ not in TOP_LEVEL_TYPES:
        return None, "invalid_type"
    if not is_valid_subtype(subtype):
        return None, "invalid_subtype"
    if type_ == "*" and subtype != "*":
        return None, "wildcard_mismatch"

    base_subtype, suffix = split_suffix(subtype)
    parameters = parse_parameters(
        raw_parameters, fast_path=settings.charset_fast_path, anomalies=anomalies
    )

    media_type = MediaType(
        type=type_,
        subtype=base_subtype,
        subtype_facets=tuple(base_subtype.split(".")),
        suffix=suffix,
        parameters=parameters,
    )
    return media_type, None


def is_valid_subtype(subtype: str) -> bool:
    if not subtype or len(subtype) > MAX_SUBTYPE_LENGTH:
        return False
    if subtype == RESERVED_SUBTYPE:
        return False
    return _INVALID_SUBTYPE_CHARS.search(subtype) is None


def split_suffix(subtype: str) -> tuple[str, str | None]:
    """Split ``subtype`` at the first ``+`` unless it is the last character."""
    plus_index = subtype.find("+")
    if plus_index == -1 or plus_index == len(subtype) - 1:
        return subtype, None
    return subtype[:plus_index], subtype[plus_index + 1 :]


def parse_parameters(
    raw: str,
    *,
    fast_path: bool = True,
    anomalies: list[str] | None = None,
) -> dict[str, str]:
    """Scan ``;name=value`` pairs into an insertion-ordered dict.

    Malformed tokens are never fatal. Tokens without ``=`` are skipped, a
    missing name or value ends the scan, and duplicate names or names and
    values with disallowed characters are dropped. The first occurrence of a
    name wins.

    Args:
        raw: Parameter substring, with or without its leading ``;``
        fast_path: Short-circuit the common ``charset=utf-8`` case
        anomalies: Optional list collecting a reason for each dropped token

    Returns:
        Mapping of parameter names to values in discovery order
    """
    if anomalies is None:
        anomalies = []
    parameters: dict[str, str] = {}
    text = raw[1:] if raw.startswith(";") else raw

    if fast_path and text.strip(WHITESPACE) == _CHARSET_UTF8:
        parameters["charset"] = "utf-8"
        return parameters

    length = len(text)
    i = 0
    while i < length:
        while i < length and text[i] in " ;":
            i += 1
        if i >= length:
            break

        key_start = i
        while i < length and text[i] not in "=;":
            i += 1
        if i >= length:
            _drop(anomalies, "unterminated_parameter")
            break
        if text[i] == ";":
            # bare token without "=", resume the name after the separator
            _drop(anomalies, "malformed_parameter")
            key_start = i + 1
            while i < length and text[i] != "=":
                i += 1

        key = text[key_start:i].strip(WHITESPACE)
        if not key:
            _drop(anomalies, "empty_parameter_name")
            break
        i += 1

        while i < length and text[i] == " ":
            i += 1
        if i >= length:
            _drop(anomalies, "missing_parameter_value", key)
            break

        if text[i] == '"':
            i += 1
            value_start = i
            while i < length and text[i] != '"':
                i += 1
            value = text[value_start:i]
            if i < length:
                i += 1
        else:
            value_start = i
            while i < length and text[i] != ";":
                i += 1
            value = text[value_start:i].strip(WHITESPACE)

        if key in parameters:
            _drop(anomalies, "duplicate_parameter", key)
            continue
        if not _is_valid_parameter(key, value):
            _drop(anomalies, "invalid_parameter", key)
            continue
        parameters[key] = value

    return parameters


def _is_valid_parameter(key: str, value: str) -> bool:
    if _INVALID_PARAMETER_NAME_CHARS.search(key):
        return False
    return all(ord(char) >= 32 and ord(char) != 127 for char in value)


def _drop(anomalies: list[str], reason: str, key: str | None = None) -> None:
    anomaly = f"{reason}:{key}" if key is not None else reason
    anomalies.append(anomaly)
    LOGGER.debug("mediatype.parameter_dropped", reason=reason, key=key)
