from __future__ import annotations

from app.domain.errors import InvalidPricingInputError
from app.domain.pricing.models import (
    NormalizedProperty,
    PropertySnapshot,
    ServiceType,
    SlopeGrade,
    TierType,
)

DEFAULT_CONDITION_SCORE = 3
DEFAULT_SLOPE_GRADE = SlopeGrade.flat
MIN_CONDITION_SCORE = 1
MAX_CONDITION_SCORE = 5

_MEASUREMENT_FIELDS = ("lot_size_sqft", "lawn_sqft", "bed_sqft", "roofline_ft", "bush_count")


def normalize_snapshot(snapshot: PropertySnapshot) -> NormalizedProperty:
    """Apply every pricing default in one place and reject invalid values.

    Absent measurements contribute zero, an absent condition score is treated
    as an average property and unknown condition enums stay ``None``.
    """
    errors = []
    for field in _MEASUREMENT_FIELDS:
        value = getattr(snapshot, field)
        if value is not None and value < 0:
            errors.append({"field": field, "value": value, "reason": "must not be negative"})

    score = snapshot.condition_score
    if score is not None and not MIN_CONDITION_SCORE <= score <= MAX_CONDITION_SCORE:
        errors.append({"field": "condition_score", "value": score, "reason": "must be between 1 and 5"})

    if errors:
        raise InvalidPricingInputError(detail="Property snapshot failed validation", errors=errors)

    return NormalizedProperty(
        id=snapshot.id,
        address=snapshot.formatted_address or snapshot.address,
        zip_code=(snapshot.zip_code or "").strip() or None,
        lat=snapshot.lat,
        lng=snapshot.lng,
        lot_size_sqft=snapshot.lot_size_sqft or 0,
        lawn_sqft=snapshot.lawn_sqft or 0,
        bed_sqft=snapshot.bed_sqft or 0,
        roofline_ft=snapshot.roofline_ft or 0,
        slope_grade=snapshot.slope_grade or DEFAULT_SLOPE_GRADE,
        condition_score=score if score is not None else DEFAULT_CONDITION_SCORE,
        grass_height=snapshot.grass_height,
        bush_count=snapshot.bush_count or 0,
        tree_coverage=snapshot.tree_coverage,
        debris_level=snapshot.debris_level,
        leaf_volume=snapshot.leaf_volume,
        bed_condition=snapshot.bed_condition,
    )


def parse_tier(value: TierType | str) -> TierType:
    try:
        return TierType(value)
    except ValueError as exc:
        raise InvalidPricingInputError(
            detail=f"Unknown tier {value!r}",
            errors=[{"field": "tier", "allowed": [tier.value for tier in TierType]}],
        ) from exc


def parse_service_type(value: ServiceType | str) -> ServiceType:
    try:
        return ServiceType(value)
    except ValueError as exc:
        raise InvalidPricingInputError(
            detail=f"Unknown service type {value!r}",
            errors=[{"field": "service_type", "allowed": [service.value for service in ServiceType]}],
        ) from exc
