"""Shared pytest fixtures for MeAd explorer tests."""

import pytest

from mead.core.kinds import REGIONS
from mead.core.records import CollectionItem, ConditionDetail, RegionDetail
from tests.mocks.sources import MockCollectionSource


@pytest.fixture
def condition_items() -> list[CollectionItem]:
    """Provide the conditions list used across explorer tests.

    Returns:
        list[CollectionItem]: Three conditions, in service order.
    """
    return [
        CollectionItem(id="asthma", name="Asthma"),
        CollectionItem(id="flu", name="Influenza"),
        CollectionItem(id="measles", name="Measles"),
    ]


@pytest.fixture
def condition_details() -> dict[str, ConditionDetail]:
    """Provide a detail record for every condition in condition_items."""
    return {
        "asthma": ConditionDetail(
            id="asthma",
            name="Asthma",
            description="Chronic inflammation of the airways.",
            images=("https://img/a1.jpg", "https://img/a2.jpg", "https://img/a3.jpg"),
            symptoms=("Wheezing", "Shortness of breath"),
        ),
        "flu": ConditionDetail(
            id="flu",
            name="Influenza",
            images=("https://img/f1.jpg",),
        ),
        "measles": ConditionDetail(id="measles", name="Measles"),
    }


@pytest.fixture
def conditions_source(
    condition_items: list[CollectionItem],
    condition_details: dict[str, ConditionDetail],
) -> MockCollectionSource:
    """Provide a mock conditions source serving the fixtures above."""
    return MockCollectionSource(condition_items, condition_details)


@pytest.fixture
def region_items() -> list[CollectionItem]:
    return [
        CollectionItem(id="paris", name="Paris", type="city"),
        CollectionItem(id="france", name="France", type="Country"),
        CollectionItem(id="europe", name="Europe", type="continent"),
        CollectionItem(id="lyon", name="Lyon", type="city"),
    ]


@pytest.fixture
def regions_source(region_items: list[CollectionItem]) -> MockCollectionSource:
    """Provide a mock regions source; only paris and france have details."""
    details = {
        "paris": RegionDetail(
            id="paris",
            name="Paris",
            images=tuple(f"https://img/p{i}.jpg" for i in range(8)),
            population_total="2161000",
        ),
        "france": RegionDetail(id="france", name="France"),
    }
    return MockCollectionSource(region_items, details, kind=REGIONS)
