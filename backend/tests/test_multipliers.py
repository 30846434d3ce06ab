import logging
from decimal import Decimal

import pytest

from app.domain.pricing.catalog import InMemoryRegionalAdjustmentProvider
from app.domain.pricing.models import PropertySnapshot, RegionalAdjustment
from app.domain.pricing.multipliers import (
    COMPLEXITY_FALLBACK_MULTIPLIER,
    ServiceArea,
    complexity_multiplier,
    distance_multiplier,
    haversine_miles,
    regional_multiplier,
    resolve_multipliers,
)
from app.domain.pricing.normalize import DEFAULT_CONDITION_SCORE, normalize_snapshot

CENTER_LAT = 39.1031
CENTER_LNG = -84.5120

MILES_PER_DEGREE = 3959 * 3.141592653589793 / 180


@pytest.mark.parametrize(
    "score,expected",
    [(1, "0.90"), (2, "1.00"), (3, "1.10"), (4, "1.25"), (5, "1.50")],
)
def test_complexity_table(score, expected):
    assert complexity_multiplier(score) == Decimal(expected)


@pytest.mark.parametrize("score", [0, 6, -1, 42])
def test_complexity_fallback_for_scores_outside_table(score):
    assert complexity_multiplier(score) == COMPLEXITY_FALLBACK_MULTIPLIER == Decimal("1.0")


def test_absent_score_is_priced_as_default_score():
    prop = normalize_snapshot(PropertySnapshot())
    assert prop.condition_score == DEFAULT_CONDITION_SCORE
    assert complexity_multiplier(prop.condition_score) == Decimal("1.10")


@pytest.mark.parametrize(
    "miles,expected",
    [
        (0, "1.00"),
        (10, "1.00"),
        (10.0, "1.00"),
        (10.01, "1.05"),
        (20, "1.05"),
        (20.0, "1.05"),
        (20.01, "1.10"),
        (25, "1.10"),
        (25.0, "1.10"),
        (25.01, "1.20"),
        (120, "1.20"),
    ],
)
def test_distance_bands(miles, expected):
    assert distance_multiplier(miles) == Decimal(expected)


def test_distance_band_respects_configured_radius():
    assert distance_multiplier(28, max_radius_miles=30) == Decimal("1.10")
    assert distance_multiplier(30.5, max_radius_miles=30) == Decimal("1.20")


def test_haversine_zero_at_center():
    assert haversine_miles(CENTER_LAT, CENTER_LNG, CENTER_LAT, CENTER_LNG) == 0


def test_haversine_one_degree_of_latitude():
    assert haversine_miles(39.0, -84.5, 40.0, -84.5) == pytest.approx(MILES_PER_DEGREE)


def test_regional_multiplier_lookup_and_fallbacks(caplog):
    provider = InMemoryRegionalAdjustmentProvider(
        [
            RegionalAdjustment(zip_code="45247", multiplier=Decimal("1.05")),
            RegionalAdjustment(zip_code="45999", multiplier=Decimal("1.30"), active=False),
        ]
    )
    assert regional_multiplier("45247", provider) == Decimal("1.05")
    assert regional_multiplier(None, provider) == Decimal("1.0")
    assert regional_multiplier("", provider, default=Decimal("1.1")) == Decimal("1.1")

    caplog.set_level(logging.WARNING)
    assert regional_multiplier("45999", provider) == Decimal("1.0")
    assert any(record.message == "regional_adjustment_missing" for record in caplog.records)


def test_resolve_without_coordinates_uses_neutral_distance():
    prop = normalize_snapshot(PropertySnapshot(condition_score=2))
    area = ServiceArea(center_lat=CENTER_LAT, center_lng=CENTER_LNG)
    result = resolve_multipliers(prop, InMemoryRegionalAdjustmentProvider(), area)

    assert result.distance_miles is None
    assert result.distance == Decimal("1.00")
    assert result.combined == Decimal("1.00")


def test_resolve_combines_all_three(service_area):
    lat = CENTER_LAT + 15 / MILES_PER_DEGREE
    prop = normalize_snapshot(
        PropertySnapshot(zip_code="45247", lat=lat, lng=CENTER_LNG, condition_score=5)
    )
    provider = InMemoryRegionalAdjustmentProvider(
        [RegionalAdjustment(zip_code="45247", multiplier=Decimal("1.05"))]
    )
    result = resolve_multipliers(prop, provider, service_area)

    assert result.distance_miles == 15.0
    assert result.distance == Decimal("1.05")
    assert result.combined == Decimal("1.05") * Decimal("1.50") * Decimal("1.05")


def test_band_uses_unrounded_distance(service_area):
    # About 10.04 miles out: reported as 10.0 but priced in the 10-20 band.
    lat = CENTER_LAT + 0.1453
    prop = normalize_snapshot(PropertySnapshot(lat=lat, lng=CENTER_LNG))
    result = resolve_multipliers(prop, InMemoryRegionalAdjustmentProvider(), service_area)

    assert result.distance_miles == 10.0
    assert result.distance == Decimal("1.05")
