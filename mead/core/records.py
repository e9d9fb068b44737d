"""Collection items and detail records returned by the MeAd services.

Records are immutable snapshots of what the remote service returned. The
conditions and regions services describe their records differently (regions
carry an ``identifier`` next to ``id``, conditions may send a single ``image``
instead of ``images``), so each has its own detail type. Both satisfy the
DetailRecord protocol that the selection and carousel logic rely on.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import unquote

SCHEMA_ORG_VOCAB = "https://schema.org/"


class MalformedRecordError(ValueError):
    """Raised when a JSON payload does not have the shape of a record."""


@dataclass(frozen=True)
class CollectionItem:
    """One entry of a list endpoint.

    Attributes:
        id: Identity of the item, always the string form of the producer's id.
        name: Human readable name.
        type: Region kind (city, country, continent) when the service sends one.
        extra: Remaining fields of the list entry, untouched.
    """

    id: str
    name: str
    type: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WikidocInfo:
    """Sections of the WikiDoc article attached to a condition."""

    overview: str | None = None
    causes: str | None = None
    pathophysiology: str | None = None
    diagnosis: str | None = None
    treatment: str | None = None
    prevention: str | None = None
    prognosis: str | None = None
    epidemiology: str | None = None
    source_url: str | None = None
    source_type: str | None = None


class DetailRecord(Protocol):
    """Fields shared by every detail record."""

    id: str
    name: str
    images: tuple[str, ...]
    context: str | None
    type: str | None


@dataclass(frozen=True)
class ConditionDetail:
    """Detail record of ``/api/v1/conditions/{id}``."""

    id: str
    name: str
    identifier: str | None = None
    description: str | None = None
    images: tuple[str, ...] = ()
    symptoms: tuple[str, ...] = ()
    risk_factors: tuple[str, ...] = ()
    same_as: tuple[str, ...] = ()
    wikidoc_snippet: str | None = None
    wikidoc: WikidocInfo | None = None
    context: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class RegionDetail:
    """Detail record of ``/api/v1/regions/{id}``."""

    id: str
    name: str
    identifier: str | None = None
    description: str | None = None
    images: tuple[str, ...] = ()
    population_total: str | float | int | None = None
    population_density: str | float | int | None = None
    cultural_factors: tuple[str, ...] = ()
    climates: tuple[str, ...] = ()
    industrial_development: tuple[str, ...] = ()
    wikipedia_snippet: str | None = None
    same_as: tuple[str, ...] = ()
    contained_in_place: tuple[str, ...] = ()
    context: str | None = None
    type: str | None = None


# =============================================================================
# Image keys
# =============================================================================

_UPLOAD_MARKER = "upload.wikimedia.org/"
_KEY_MARKERS = ("special:filepath/", "special:redirect/file/", "/wiki/file:")
_FILE_PREFIX = "file:"


def normalize_image_key(url: str | None) -> str:
    """Reduce an image URL to a key that identifies the underlying file.

    Wikimedia serves the same file under several URL forms (direct upload
    paths, Special:FilePath, Special:Redirect, File: pages). All of them map
    to the lower-cased, percent-decoded file name. Other URLs map to
    themselves, lower-cased, without query string or fragment.

    Returns:
        The key, or an empty string for a blank URL.
    """
    if not url:
        return ""
    trimmed = url.strip()
    if not trimmed:
        return ""

    cut = trimmed.split("?", 1)[0].split("#", 1)[0]
    lower = cut.lower()

    if _UPLOAD_MARKER in lower:
        return unquote(cut.rsplit("/", 1)[-1]).lower()

    for marker in _KEY_MARKERS:
        idx = lower.find(marker)
        if idx >= 0:
            return unquote(cut[idx + len(marker):]).lower()

    if lower.startswith(_FILE_PREFIX):
        return unquote(cut[len(_FILE_PREFIX):]).lower()

    return lower


def dedupe_images(urls: Iterable[str]) -> tuple[str, ...]:
    """Drop blank URLs and later URLs that point at an already seen file."""
    seen: dict[str, str] = {}
    for url in urls:
        key = normalize_image_key(url)
        if key and key not in seen:
            seen[key] = url
    return tuple(seen.values())


# =============================================================================
# Parsing
# =============================================================================


def _text(payload: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def _strings(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, Sequence):
        return tuple(str(v) for v in value if v is not None and v != "")
    raise MalformedRecordError(f"Expected a list of strings, got {type(value).__name__}")


def _require_object(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise MalformedRecordError(
            f"Expected a JSON object for {what}, got {type(payload).__name__}"
        )
    return payload


def parse_collection(payload: Any) -> list[CollectionItem]:
    """Parse the array returned by a list endpoint.

    Raises:
        MalformedRecordError: If the payload is not an array of objects.
    """
    if not isinstance(payload, list):
        raise MalformedRecordError(
            f"Expected a JSON array of items, got {type(payload).__name__}"
        )

    items: list[CollectionItem] = []
    for entry in payload:
        entry = _require_object(entry, "a collection item")
        raw_id = entry.get("id")
        extra = {k: v for k, v in entry.items() if k not in ("id", "name", "type")}
        items.append(
            CollectionItem(
                id="" if raw_id is None else str(raw_id),
                name=str(entry.get("name") or ""),
                type=_text(entry, "type"),
                extra=extra,
            )
        )
    return items


def _condition_images(payload: Mapping[str, Any]) -> tuple[str, ...]:
    images = _strings(payload.get("images"))
    if not images:
        images = _strings(payload.get("image"))
    return dedupe_images(images)


def _parse_wikidoc(value: Any) -> WikidocInfo | None:
    if value is None:
        return None
    data = _require_object(value, "wikidoc")
    return WikidocInfo(
        overview=_text(data, "overview"),
        causes=_text(data, "causes"),
        pathophysiology=_text(data, "pathophysiology"),
        diagnosis=_text(data, "diagnosis"),
        treatment=_text(data, "treatment"),
        prevention=_text(data, "prevention"),
        prognosis=_text(data, "prognosis"),
        epidemiology=_text(data, "epidemiology"),
        source_url=_text(data, "sourceUrl"),
        source_type=_text(data, "sourceType"),
    )


def parse_condition_detail(payload: Any) -> ConditionDetail:
    """Parse the body of ``/api/v1/conditions/{id}``."""
    data = _require_object(payload, "a condition")
    wikidoc = _parse_wikidoc(data.get("wikidoc"))
    snippet = _text(data, "wikidocSnippet")
    if snippet is None and wikidoc is not None:
        snippet = wikidoc.overview
    return ConditionDetail(
        id=_text(data, "id") or "",
        name=_text(data, "name") or "",
        identifier=_text(data, "identifier"),
        description=_text(data, "description"),
        images=_condition_images(data),
        symptoms=_strings(data.get("symptoms")),
        risk_factors=_strings(data.get("riskFactors")),
        same_as=_strings(data.get("sameAs")),
        wikidoc_snippet=snippet,
        wikidoc=wikidoc,
        context=_text(data, "@context", "context"),
        type=_text(data, "@type", "type"),
    )


def parse_region_detail(payload: Any) -> RegionDetail:
    """Parse the body of ``/api/v1/regions/{id}``."""
    data = _require_object(payload, "a region")
    return RegionDetail(
        id=_text(data, "id", "identifier") or "",
        name=_text(data, "name") or "",
        identifier=_text(data, "identifier"),
        description=_text(data, "description"),
        images=dedupe_images(_strings(data.get("images"))),
        population_total=data.get("populationTotal"),
        population_density=data.get("populationDensity"),
        cultural_factors=_strings(data.get("culturalFactors")),
        climates=_strings(data.get("climates")),
        industrial_development=_strings(data.get("industrialDevelopment")),
        wikipedia_snippet=_text(data, "wikipediaSnippet", "wikidocSnippet"),
        same_as=_strings(data.get("sameAs")),
        contained_in_place=_strings(data.get("containedInPlace")),
        context=_text(data, "@context", "context"),
        type=_text(data, "@type", "type"),
    )
