"""Media type value object and parse outcome containers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from mediatype.errors import InvalidMediaType

JAVASCRIPT_SUBTYPES = frozenset({"javascript", "x-javascript", "ecmascript", "x-ecmascript"})
HTML_APPLICATION_SUBTYPES = frozenset({"xhtml+xml", "html+xml"})


@dataclass(frozen=True, slots=True, eq=False)
class MediaType:
    """A parsed ``type/subtype[+suffix];parameters`` value.

    Instances are built by :func:`mediatype.parse` or :meth:`from_string`.
    Calling ``MediaType()`` without arguments gives an empty placeholder.
    ``essence`` is always derived from ``type``, ``subtype`` and ``suffix``.
    """

    type: str | None = None
    subtype: str | None = None
    subtype_facets: tuple[str, ...] = ()
    suffix: str | None = None
    parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        facets = tuple(self.subtype_facets)
        if not facets and self.subtype is not None:
            facets = tuple(self.subtype.split("."))
        object.__setattr__(self, "subtype_facets", facets)
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @classmethod
    def from_string(cls, value: Any) -> MediaType:
        """Parse ``value`` or raise :class:`InvalidMediaType`."""
        from mediatype.parser import analyze  # imported lazily to avoid circular imports

        return analyze(value).unwrap()

    def _key(self) -> tuple[Any, ...]:
        return (self.type, self.subtype, self.suffix, tuple(self.parameters.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MediaType):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        from mediatype.serializer import serialize

        return serialize(self)

    @property
    def essence(self) -> str | None:
        """``type/subtype`` plus ``+suffix`` when present; None for the placeholder."""
        if self.type is None or self.subtype is None:
            return None
        if self.suffix:
            return f"{self.type}/{self.subtype}+{self.suffix}"
        return f"{self.type}/{self.subtype}"

    @property
    def has_suffix(self) -> bool:
        return bool(self.suffix)

    @property
    def is_html(self) -> bool:
        if self.type == "text" and self.subtype == "html":
            return True
        return self.type == "application" and self.subtype in HTML_APPLICATION_SUBTYPES

    @property
    def is_xml(self) -> bool:
        return self.subtype == "xml" or self.suffix == "xml"

    @property
    def is_javascript(self) -> bool:
        return self.type in ("application", "text") and self.subtype in JAVASCRIPT_SUBTYPES

    @property
    def is_vendor(self) -> bool:
        return bool(self.subtype_facets) and self.subtype_facets[0] == "vnd"

    @property
    def is_personal(self) -> bool:
        return bool(self.subtype_facets) and self.subtype_facets[0] == "prs"

    @property
    def is_experimental(self) -> bool:
        # "x.foo" matches on the facet, "x-foo" on the raw prefix
        if self.subtype_facets and self.subtype_facets[0] == "x":
            return True
        return bool(self.subtype) and self.subtype.startswith("x-")

    def asdict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "subtype": self.subtype,
            "subtype_facets": list(self.subtype_facets),
            "suffix": self.suffix,
            "essence": self.essence,
            "parameters": dict(self.parameters),
        }


@dataclass(slots=True)
class ParseResult:
    """Outcome of parsing a single string."""

    value: Any
    media_type: MediaType | None = None
    reason: str | None = None
    anomalies: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.media_type is not None

    def unwrap(self) -> MediaType:
        if self.media_type is None:
            raise InvalidMediaType(self.value, self.reason)
        return self.media_type

    def asdict(self) -> dict[str, Any]:
        return {
            "input": self.value,
            "valid": self.ok,
            "media_type": self.media_type.asdict() if self.media_type else None,
            "canonical": str(self.media_type) if self.media_type else None,
            "reason": self.reason,
            "anomalies": list(self.anomalies),
        }
