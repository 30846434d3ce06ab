from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from app.domain.pricing.catalog import RegionalAdjustmentProvider
from app.domain.pricing.models import MultiplierBreakdown, NormalizedProperty

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959.0

COMPLEXITY_MULTIPLIERS: dict[int, Decimal] = {
    1: Decimal("0.90"),
    2: Decimal("1.00"),
    3: Decimal("1.10"),
    4: Decimal("1.25"),
    5: Decimal("1.50"),
}
# Returned for any score missing from the table. This does not match the
# multiplier of the default score (3 -> 1.10); both are kept until product
# decides which one wins.
COMPLEXITY_FALLBACK_MULTIPLIER = Decimal("1.0")

NEAR_BAND_MILES = 10.0
MID_BAND_MILES = 20.0
NEAR_MULTIPLIER = Decimal("1.00")
MID_MULTIPLIER = Decimal("1.05")
EDGE_MULTIPLIER = Decimal("1.10")
OUTSIDE_MULTIPLIER = Decimal("1.20")
# Used when the property has no coordinates.
UNKNOWN_DISTANCE_MULTIPLIER = Decimal("1.00")


@dataclass(frozen=True)
class ServiceArea:
    center_lat: float
    center_lng: float
    radius_miles: float = 25.0

    @classmethod
    def from_settings(cls, app_settings) -> "ServiceArea":
        return cls(
            center_lat=app_settings.service_area_center_lat,
            center_lng=app_settings.service_area_center_lng,
            radius_miles=app_settings.service_area_radius_miles,
        )


def complexity_multiplier(condition_score: int) -> Decimal:
    return COMPLEXITY_MULTIPLIERS.get(condition_score, COMPLEXITY_FALLBACK_MULTIPLIER)


def regional_multiplier(
    zip_code: str | None,
    provider: RegionalAdjustmentProvider,
    default: Decimal = Decimal("1.0"),
) -> Decimal:
    if not zip_code:
        return default
    multiplier = provider.get_regional_multiplier(zip_code)
    if multiplier is None:
        logger.warning("regional_adjustment_missing", extra={"extra": {"zip_code": zip_code}})
        return default
    return multiplier


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_from_center(lat: float, lng: float, area: ServiceArea) -> float:
    return haversine_miles(area.center_lat, area.center_lng, lat, lng)


def distance_multiplier(distance_miles: float, max_radius_miles: float = 25.0) -> Decimal:
    # Each band includes its upper boundary.
    if distance_miles <= NEAR_BAND_MILES:
        return NEAR_MULTIPLIER
    if distance_miles <= MID_BAND_MILES:
        return MID_MULTIPLIER
    if distance_miles <= max_radius_miles:
        return EDGE_MULTIPLIER
    return OUTSIDE_MULTIPLIER


def resolve_multipliers(
    prop: NormalizedProperty,
    regional_provider: RegionalAdjustmentProvider,
    area: ServiceArea,
    default_regional: Decimal = Decimal("1.0"),
) -> MultiplierBreakdown:
    """Resolve the three multipliers for a normalized property.

    The distance band is chosen from the unrounded great-circle distance; the
    reported ``distance_miles`` is rounded to one decimal.
    """
    if prop.lat is None or prop.lng is None:
        distance_miles = None
        distance = UNKNOWN_DISTANCE_MULTIPLIER
    else:
        raw_distance = distance_from_center(prop.lat, prop.lng, area)
        distance = distance_multiplier(raw_distance, area.radius_miles)
        distance_miles = round(raw_distance, 1)

    return MultiplierBreakdown(
        regional=regional_multiplier(prop.zip_code, regional_provider, default_regional),
        complexity=complexity_multiplier(prop.condition_score),
        distance=distance,
        distance_miles=distance_miles,
    )
