import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List

from app.domain.errors import InvalidPricingInputError
from app.domain.pricing.catalog import (
    LEAF_CLEANUP,
    LIGHTS_INSTALL,
    MOWING_BASE,
    SEASONAL_PACKAGE,
    TIER_SERVICE_CODES,
    RateCatalog,
)
from app.domain.pricing.models import (
    TIER_NAMES,
    NormalizedProperty,
    RateCardEntry,
    TierQuote,
    TierType,
)

logger = logging.getLogger(__name__)

AREA_UNIT_SQFT = Decimal("1000")
BASIC_LEAF_CLEANUP_FRACTION = Decimal("0.25")
PREMIUM_MARKUP_RATE = Decimal("0.15")
MONTHS_PER_YEAR = Decimal("12")

_CENT = Decimal("0.01")
_WHOLE = Decimal("1")


def round_currency(value: Decimal) -> Decimal:
    """Round half-up to a whole currency unit."""
    return value.quantize(_WHOLE, rounding=ROUND_HALF_UP)


def _round_cents(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ComponentCosts:
    mowing: Decimal
    full_leaf_cleanup: Decimal
    basic_leaf_cleanup: Decimal
    seasonal: Decimal
    lights: Decimal


def mowing_cost(lawn_sqft: int, card: RateCardEntry, multiplier: Decimal) -> Decimal:
    visits = Decimal(card.factor)
    return _round_cents(Decimal(lawn_sqft) / AREA_UNIT_SQFT * card.base_rate * visits * multiplier)


def leaf_cleanup_cost(lawn_sqft: int, card: RateCardEntry, multiplier: Decimal) -> Decimal:
    cleanups = Decimal(card.factor)
    return _round_cents(Decimal(lawn_sqft) / AREA_UNIT_SQFT * card.base_rate * cleanups * multiplier)


def seasonal_package_cost(card: RateCardEntry, multiplier: Decimal) -> Decimal:
    return _round_cents(card.base_rate * multiplier)


def lights_cost(roofline_ft: int, card: RateCardEntry, multiplier: Decimal) -> Decimal:
    return _round_cents(Decimal(roofline_ft) * card.base_rate * multiplier)


def component_costs(prop: NormalizedProperty, catalog: RateCatalog, multiplier: Decimal) -> ComponentCosts:
    catalog.require_all(TIER_SERVICE_CODES)
    if multiplier <= 0:
        raise InvalidPricingInputError(detail=f"Combined multiplier must be positive, got {multiplier}")

    full_leaf = leaf_cleanup_cost(prop.lawn_sqft, catalog[LEAF_CLEANUP], multiplier)
    return ComponentCosts(
        mowing=mowing_cost(prop.lawn_sqft, catalog[MOWING_BASE], multiplier),
        full_leaf_cleanup=full_leaf,
        basic_leaf_cleanup=_round_cents(full_leaf * BASIC_LEAF_CLEANUP_FRACTION),
        seasonal=seasonal_package_cost(catalog[SEASONAL_PACKAGE], multiplier),
        lights=lights_cost(prop.roofline_ft, catalog[LIGHTS_INSTALL], multiplier),
    )


def _tier_quote(
    tier: TierType,
    total: Decimal,
    breakdown: Dict[str, Decimal],
    balance_line: str | None = None,
) -> TierQuote:
    annual_price = round_currency(total)
    lines = {name: round_currency(value) for name, value in breakdown.items()}
    if balance_line is not None:
        # The balancing line absorbs per-line rounding so the lines add up to the price.
        lines[balance_line] = annual_price - sum(
            (value for name, value in lines.items() if name != balance_line), Decimal("0")
        )
    return TierQuote(
        tier=tier,
        tier_name=TIER_NAMES[tier],
        annual_price=annual_price,
        monthly_price=round_currency(total / MONTHS_PER_YEAR),
        breakdown=lines,
    )


def calculate_all_tiers(
    prop: NormalizedProperty, catalog: RateCatalog, multiplier: Decimal
) -> List[TierQuote]:
    """Price the three nested tiers for one property.

    Each tier contains the previous one: grass roots is mowing plus a quarter
    of the full leaf cleanup, premier swaps in the full cleanup and adds the
    seasonal package, and total landscape adds lights before marking the whole
    bundle up by 15%.
    """
    costs = component_costs(prop, catalog, multiplier)

    grass_roots_total = costs.mowing + costs.basic_leaf_cleanup
    premier_total = costs.mowing + costs.full_leaf_cleanup + costs.seasonal
    total_landscape_base = premier_total + costs.lights
    premium_markup = total_landscape_base * PREMIUM_MARKUP_RATE
    total_landscape_total = total_landscape_base + premium_markup

    tiers = [
        _tier_quote(
            TierType.grass_roots,
            grass_roots_total,
            {"mowing": costs.mowing, "leaf_cleanup": costs.basic_leaf_cleanup},
        ),
        _tier_quote(
            TierType.premier,
            premier_total,
            {
                "mowing": costs.mowing,
                "leaf_cleanup": costs.full_leaf_cleanup,
                "seasonal": costs.seasonal,
            },
        ),
        _tier_quote(
            TierType.total_landscape,
            total_landscape_total,
            {
                "mowing": costs.mowing,
                "leaf_cleanup": costs.full_leaf_cleanup,
                "seasonal": costs.seasonal,
                "lights": costs.lights,
                "premium_markup": premium_markup,
            },
            balance_line="premium_markup",
        ),
    ]

    logger.info(
        "pricing_tiers_calculated",
        extra={
            "extra": {
                "property_id": prop.id,
                "lawn_sqft": prop.lawn_sqft,
                "roofline_ft": prop.roofline_ft,
                "multiplier": str(multiplier),
                "annual_prices": {tier.tier.value: str(tier.annual_price) for tier in tiers},
            }
        },
    )
    return tiers


def select_tier(tiers: List[TierQuote], tier: TierType) -> TierQuote:
    for candidate in tiers:
        if candidate.tier == tier:
            return candidate
    raise InvalidPricingInputError(detail=f"Tier {tier.value} was not priced")
