"""The two collections MeAd can browse.

A CollectionKind bundles everything that differs between the conditions and
regions explorers: the service endpoints, the environment variable holding
the base URL, how a detail body is parsed, and presentation defaults.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mead.core.pagination import RegionType
from mead.core.records import (
    DetailRecord,
    parse_condition_detail,
    parse_region_detail,
)


@dataclass(frozen=True)
class CollectionKind:
    """Description of one browsable collection.

    Attributes:
        name: Path segment used by the HTTP API ("conditions", "regions").
        list_path: Path of the list endpoint on the upstream service.
        detail_path: Path template of the detail endpoint ({id} placeholder).
        base_url_env: Environment variable holding the service base URL.
        parse_detail: Turns a decoded detail body into a record.
        default_type: schema.org type used when a record carries none.
        max_images: Cap on the carousel images, None for no cap.
        type_filters: Type filters offered on the list, empty for none.
    """

    name: str
    list_path: str
    detail_path: str
    base_url_env: str
    parse_detail: Callable[[Any], DetailRecord]
    default_type: str
    max_images: int | None = None
    type_filters: tuple[RegionType, ...] = ()


CONDITIONS = CollectionKind(
    name="conditions",
    list_path="/api/v1/conditions",
    detail_path="/api/v1/conditions/{id}",
    base_url_env="CONDITIONS_API_BASE_URL",
    parse_detail=parse_condition_detail,
    default_type="MedicalCondition",
)

REGIONS = CollectionKind(
    name="regions",
    list_path="/api/v1/regions",
    detail_path="/api/v1/regions/{id}",
    base_url_env="GEOGRAPHY_API_BASE_URL",
    parse_detail=parse_region_detail,
    default_type="Place",
    max_images=6,
    type_filters=tuple(RegionType),
)

KINDS: dict[str, CollectionKind] = {kind.name: kind for kind in (CONDITIONS, REGIONS)}


def get_kind(name: str) -> CollectionKind:
    """Look up a collection kind by name.

    Raises:
        ValueError: If no collection has that name.
    """
    try:
        return KINDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown collection: {name!r}. Supported collections: "
            + ", ".join(repr(k) for k in KINDS)
        ) from None
