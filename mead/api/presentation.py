"""View models for the explorer API.

Turns explorer state and detail records into the JSON a front end renders.
Detail views carry the RDFa attributes (vocab, typeof, resource, property)
the MeAd pages have always emitted, so scrapers and UI tests keep working
against any front end that renders these view models verbatim.
"""

from typing import Any

from mead.api.schemas import (
    CarouselView,
    CollectionName,
    ExplorerView,
    ItemSummary,
    ListView,
    PaginationView,
    QueryView,
    SelectionView,
    TypeFilterOption,
)
from mead.core.carousel_logic import CarouselState
from mead.core.explorer import ExplorerPage
from mead.core.formatting import build_wikipedia_url, format_number
from mead.core.kinds import CollectionKind
from mead.core.records import SCHEMA_ORG_VOCAB, ConditionDetail, RegionDetail

NO_DESCRIPTION = "No description available."
NO_SYMPTOMS = "No symptoms documented."
NO_RISK_FACTORS = "No risk factors documented."
NO_CLINICAL_SNIPPET = "No clinical snippet available."
NO_CULTURAL_DATA = "No cultural data available."
NO_WIKIPEDIA_SUMMARY = "No Wikipedia summary available."
NO_IMAGES = "No images available."
UNKNOWN_VALUE = "Unknown"

CONDITION_PROPERTIES = {
    "name": "name",
    "description": "description",
    "image": "image",
    "symptoms": "signOrSymptom",
    "risk_factors": "riskFactor",
}
REGION_PROPERTIES = {
    "name": "name",
    "description": "description",
}


def rdfa_attributes(detail: Any, default_type: str) -> dict[str, str | None]:
    return {
        "vocab": detail.context or SCHEMA_ORG_VOCAB,
        "typeof": detail.type or default_type,
        "resource": detail.id or None,
    }


def condition_view(detail: ConditionDetail, kind: CollectionKind) -> dict[str, Any]:
    notes: dict[str, str] = {}
    if not detail.symptoms:
        notes["symptoms"] = NO_SYMPTOMS
    if not detail.risk_factors:
        notes["risk_factors"] = NO_RISK_FACTORS
    if not detail.images:
        notes["images"] = NO_IMAGES

    wikidoc = None
    if detail.wikidoc is not None:
        wikidoc = {
            "overview": detail.wikidoc.overview,
            "causes": detail.wikidoc.causes,
            "pathophysiology": detail.wikidoc.pathophysiology,
            "diagnosis": detail.wikidoc.diagnosis,
            "treatment": detail.wikidoc.treatment,
            "prevention": detail.wikidoc.prevention,
            "prognosis": detail.wikidoc.prognosis,
            "epidemiology": detail.wikidoc.epidemiology,
            "source_url": detail.wikidoc.source_url,
            "source_type": detail.wikidoc.source_type,
        }

    return {
        "rdfa": rdfa_attributes(detail, kind.default_type),
        "properties": CONDITION_PROPERTIES,
        "id": detail.id,
        "identifier": detail.identifier,
        "name": detail.name,
        "description": detail.description or NO_DESCRIPTION,
        "symptoms": list(detail.symptoms),
        "risk_factors": list(detail.risk_factors),
        "wikidoc_snippet": detail.wikidoc_snippet or NO_CLINICAL_SNIPPET,
        "wikidoc": wikidoc,
        "same_as": list(detail.same_as),
        "notes": notes,
    }


def region_view(detail: RegionDetail, kind: CollectionKind) -> dict[str, Any]:
    notes: dict[str, str] = {}
    if not detail.cultural_factors:
        notes["cultural_factors"] = NO_CULTURAL_DATA
    if not detail.images:
        notes["images"] = NO_IMAGES

    references: list[str] = []
    wikipedia_url = build_wikipedia_url(detail.name, detail.identifier, detail.id)
    if wikipedia_url:
        references.append(wikipedia_url)
    references.extend(detail.same_as)

    return {
        "rdfa": rdfa_attributes(detail, kind.default_type),
        "properties": REGION_PROPERTIES,
        "id": detail.id,
        "identifier": detail.identifier,
        "name": detail.name,
        "description": detail.description or NO_DESCRIPTION,
        "population_total": format_number(detail.population_total, 0) or UNKNOWN_VALUE,
        "population_density": format_number(detail.population_density, 2)
        or UNKNOWN_VALUE,
        "cultural_factors": list(detail.cultural_factors),
        "climates": list(detail.climates),
        "industrial_development": list(detail.industrial_development),
        "wikipedia_snippet": detail.wikipedia_snippet or NO_WIKIPEDIA_SUMMARY,
        "wikipedia_url": wikipedia_url,
        "same_as": list(detail.same_as),
        "contained_in_place": list(detail.contained_in_place),
        "references": references,
        "notes": notes,
    }


def detail_view(detail: Any, kind: CollectionKind) -> dict[str, Any]:
    """Render a detail record of either collection."""
    if isinstance(detail, ConditionDetail):
        return condition_view(detail, kind)
    if isinstance(detail, RegionDetail):
        return region_view(detail, kind)
    raise TypeError(f"Unsupported detail record: {type(detail).__name__}")


def carousel_view(state: CarouselState) -> CarouselView:
    return CarouselView(
        images=state.images,
        current_index=state.current_index,
        current_image=state.current_item,
        total=state.total_items,
        has_multiple=state.has_multiple,
    )


def explorer_view(session_id: str, page: ExplorerPage[Any]) -> ExplorerView:
    """Render the whole explorer page of a session."""
    kind = page.kind
    view = page.view
    selection = page.selection

    empty_message = None
    if not page.is_list_loading and page.list_error is None and not view.filtered:
        empty_message = f"No {kind.name} match your search."

    type_filters = [
        TypeFilterOption(
            key=option.value,
            label=option.label,
            active=(page.query.type_filter or "all") == option.value,
        )
        for option in kind.type_filters
    ]

    return ExplorerView(
        session_id=session_id,
        kind=CollectionName(kind.name),
        listing=ListView(
            is_loading=page.is_list_loading,
            error=page.list_error,
            items=[
                ItemSummary(
                    id=item.id,
                    name=item.name,
                    type=item.type,
                    active=item.id == selection.active_id,
                )
                for item in view.page
            ],
            empty_message=empty_message,
        ),
        query=QueryView(
            search=page.query.search_term,
            type_filter=page.query.type_filter,
            type_filters=type_filters,
        ),
        pagination=PaginationView(
            page_number=view.page_number,
            total_pages=view.total_pages,
            page_size=page.query.page_size,
            filtered_count=len(view.filtered),
            has_prev=view.has_prev,
            has_next=view.has_next,
            adaptive=page.adaptive_page_size,
        ),
        selection=SelectionView(
            phase=selection.phase.value,
            active_id=selection.active_id,
            is_loading=selection.is_loading,
            error=selection.error_message,
            detail=(
                detail_view(selection.detail, kind)
                if selection.detail is not None
                else None
            ),
            carousel=carousel_view(page.carousel),
        ),
    )
