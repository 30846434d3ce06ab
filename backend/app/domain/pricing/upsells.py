from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable

from app.domain.pricing.catalog import (
    BED_MAINTENANCE,
    BUSH_TRIMMING,
    EDGING,
    LEAF_CLEANUP,
    LIGHTS_INSTALL,
    MULCH_INSTALL,
    SEASONAL_PACKAGE,
    RateCatalog,
)
from app.domain.pricing.estimator import round_currency
from app.domain.pricing.models import (
    BedCondition,
    CoverageLevel,
    GrassHeight,
    MaterialItem,
    NormalizedProperty,
    RateCardEntry,
    ServiceType,
    TierType,
    Upsell,
)

logger = logging.getLogger(__name__)

LEAF_CLEANUP_UPGRADE = "LEAF_CLEANUP_UPGRADE"

DEFAULT_MULCH_DEPTH_INCHES = 3
# cubic feet per cubic yard (27) times inches per foot (12)
SQFT_INCHES_PER_CUBIC_YARD = 324
HEAVY_COVERAGE_LEAF_FACTOR = Decimal("1.5")
BED_MAINTENANCE_UNIT_SQFT = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")
BUSH_TRIMMING_MIN_COUNT = 5
MULCH_MIN_BED_SQFT = 200
BED_MAINTENANCE_RECOMMEND_SQFT = 500

# Fallback measurements for material estimates when the property lacks one.
MATERIALS_DEFAULT_LAWN_SQFT = 5000
MATERIALS_DEFAULT_BED_SQFT = 500
MATERIALS_DEFAULT_ROOFLINE_FT = 100
LEAF_BAGS_PER_1000_SQFT = 10
LIGHT_STRAND_FT = 25


def mulch_yardage(bed_sqft: float, depth_inches: float = DEFAULT_MULCH_DEPTH_INCHES) -> float:
    """Cubic yards needed to cover ``bed_sqft``, rounded up to the next half yard."""
    cubic_yards = (bed_sqft * depth_inches) / SQFT_INCHES_PER_CUBIC_YARD
    return math.ceil(cubic_yards * 2) / 2


@dataclass(frozen=True)
class UpsellContext:
    prop: NormalizedProperty
    service_type: ServiceType
    tier: TierType


@dataclass(frozen=True)
class UpsellRule:
    service_code: str
    rate_code: str
    service_name: str
    applies: Callable[[UpsellContext], bool]
    price: Callable[[UpsellContext, RateCardEntry], Decimal]
    recommended: Callable[[UpsellContext], bool]
    describe: Callable[[UpsellContext], str]


def _beds_need_work(ctx: UpsellContext) -> bool:
    return ctx.prop.bed_condition != BedCondition.good


def _beds_overgrown(ctx: UpsellContext) -> bool:
    return ctx.prop.bed_condition == BedCondition.overgrown


def _always(ctx: UpsellContext) -> bool:
    return True


def _never(ctx: UpsellContext) -> bool:
    return False


def _edging_price(ctx: UpsellContext, card: RateCardEntry) -> Decimal:
    # Perimeter of a square bed with the measured area.
    perimeter = Decimal(ctx.prop.bed_sqft).sqrt() * 4
    return perimeter * card.base_rate


def _mulch_price(ctx: UpsellContext, card: RateCardEntry) -> Decimal:
    return Decimal(str(mulch_yardage(ctx.prop.bed_sqft))) * card.base_rate


def _bed_maintenance_price(ctx: UpsellContext, card: RateCardEntry) -> Decimal:
    monthly = Decimal(ctx.prop.bed_sqft) / BED_MAINTENANCE_UNIT_SQFT * card.base_rate
    return monthly * MONTHS_PER_YEAR


def _leaf_upgrade_price(ctx: UpsellContext, card: RateCardEntry) -> Decimal:
    return Decimal(ctx.prop.lawn_sqft) / Decimal("1000") * card.base_rate * HEAVY_COVERAGE_LEAF_FACTOR


UPSELL_RULES: tuple[UpsellRule, ...] = (
    UpsellRule(
        service_code=EDGING,
        rate_code=EDGING,
        service_name="Professional Bed Edging",
        applies=lambda ctx: ctx.prop.bed_sqft > 0 and _beds_need_work(ctx),
        price=_edging_price,
        recommended=_always,
        describe=lambda ctx: "Create crisp, clean borders around landscape beds for a polished look",
    ),
    UpsellRule(
        service_code=BUSH_TRIMMING,
        rate_code=BUSH_TRIMMING,
        service_name="Seasonal Bush Trimming",
        applies=lambda ctx: ctx.prop.bush_count > BUSH_TRIMMING_MIN_COUNT,
        price=lambda ctx, card: Decimal(ctx.prop.bush_count) * card.base_rate,
        recommended=_beds_overgrown,
        describe=lambda ctx: f"Professional shaping and trimming for {ctx.prop.bush_count} bushes/shrubs",
    ),
    UpsellRule(
        service_code=MULCH_INSTALL,
        rate_code=MULCH_INSTALL,
        service_name="Fresh Mulch Installation",
        applies=lambda ctx: ctx.prop.bed_sqft > MULCH_MIN_BED_SQFT and _beds_need_work(ctx),
        price=_mulch_price,
        recommended=_beds_overgrown,
        describe=lambda ctx: (
            f"{mulch_yardage(ctx.prop.bed_sqft):g} cubic yards of premium mulch to refresh landscape beds"
        ),
    ),
    UpsellRule(
        service_code=BED_MAINTENANCE,
        rate_code=BED_MAINTENANCE,
        service_name="Monthly Bed Maintenance",
        applies=lambda ctx: ctx.tier in (TierType.premier, TierType.total_landscape)
        and ctx.prop.bed_sqft > 0,
        price=_bed_maintenance_price,
        recommended=lambda ctx: ctx.prop.bed_sqft > BED_MAINTENANCE_RECOMMEND_SQFT,
        describe=lambda ctx: "Year-round weeding, mulch touch-ups, and bed care (12 visits/year)",
    ),
    UpsellRule(
        service_code=LEAF_CLEANUP_UPGRADE,
        rate_code=LEAF_CLEANUP,
        service_name="Full Fall Cleanup Package",
        applies=lambda ctx: ctx.tier == TierType.grass_roots
        and ctx.prop.tree_coverage == CoverageLevel.heavy
        and ctx.prop.lawn_sqft > 0,
        price=_leaf_upgrade_price,
        recommended=_always,
        describe=lambda ctx: "Upgrade to 2 complete fall cleanups (recommended for heavy tree coverage)",
    ),
    UpsellRule(
        service_code=SEASONAL_PACKAGE,
        rate_code=SEASONAL_PACKAGE,
        service_name="Seasonal Care Package",
        applies=lambda ctx: ctx.tier == TierType.grass_roots,
        price=lambda ctx, card: card.base_rate,
        recommended=lambda ctx: ctx.prop.grass_height == GrassHeight.overgrown,
        describe=lambda ctx: "Add lawn aeration (1x) and fertilization (4x) for a healthier lawn",
    ),
    UpsellRule(
        service_code=LIGHTS_INSTALL,
        rate_code=LIGHTS_INSTALL,
        service_name="Holiday Lights Installation",
        applies=lambda ctx: ctx.tier != TierType.total_landscape and ctx.prop.roofline_ft > 0,
        price=lambda ctx, card: Decimal(ctx.prop.roofline_ft) * card.base_rate,
        recommended=_never,
        describe=lambda ctx: (
            "Professional installation and removal of Christmas lights "
            f"({ctx.prop.roofline_ft}ft roofline)"
        ),
    ),
)


def generate_upsells(
    prop: NormalizedProperty,
    service_type: ServiceType,
    tier: TierType,
    catalog: RateCatalog,
    rules: Iterable[UpsellRule] = UPSELL_RULES,
) -> list[Upsell]:
    ctx = UpsellContext(prop=prop, service_type=service_type, tier=tier)
    upsells: list[Upsell] = []
    for rule in rules:
        if not rule.applies(ctx):
            continue
        card = catalog.get(rule.rate_code)
        if card is None:
            logger.warning(
                "upsell_rate_missing",
                extra={"extra": {"service_code": rule.service_code, "rate_code": rule.rate_code}},
            )
            continue
        upsells.append(
            Upsell(
                service_code=rule.service_code,
                service_name=rule.service_name,
                description=rule.describe(ctx),
                price=round_currency(rule.price(ctx, card)),
                recommended=rule.recommended(ctx),
            )
        )

    logger.info(
        "upsells_generated",
        extra={
            "extra": {
                "property_id": prop.id,
                "service_type": service_type.value,
                "tier": tier.value,
                "upsell_count": len(upsells),
                "recommended_count": sum(1 for upsell in upsells if upsell.recommended),
            }
        },
    )
    return upsells


def generate_materials_list(
    prop: NormalizedProperty,
    service_type: ServiceType,
    selected_codes: Iterable[str] = (),
) -> list[MaterialItem]:
    """Estimate consumables for display; quantities never feed into pricing."""
    selected = set(selected_codes)
    materials: list[MaterialItem] = []

    if service_type == ServiceType.mowing:
        materials += [
            MaterialItem(item="Premium Gasoline", quantity=5, unit="gallons"),
            MaterialItem(item="Trimmer Line", quantity=1, unit="spool"),
            MaterialItem(item="Mower Blades (replacement)", quantity=2, unit="blades"),
        ]

    if service_type == ServiceType.cleanup:
        lawn_sqft = prop.lawn_sqft or MATERIALS_DEFAULT_LAWN_SQFT
        leaf_bags = math.ceil(lawn_sqft / 1000) * LEAF_BAGS_PER_1000_SQFT
        materials += [
            MaterialItem(item="Heavy-duty Leaf Bags", quantity=leaf_bags, unit="bags"),
            MaterialItem(item="Debris Tarps", quantity=2, unit="tarps"),
        ]

    if service_type == ServiceType.mulch or MULCH_INSTALL in selected:
        cubic_yards = mulch_yardage(prop.bed_sqft or MATERIALS_DEFAULT_BED_SQFT)
        materials += [
            MaterialItem(item="Premium Hardwood Mulch", quantity=cubic_yards, unit="cubic yards"),
            MaterialItem(item="Landscape Fabric (optional)", quantity=1, unit="roll"),
            MaterialItem(item="Bed Edging Material", quantity=50, unit="linear feet"),
        ]

    if BUSH_TRIMMING in selected:
        materials.append(MaterialItem(item="Hedge Trimmer Fuel Mix", quantity=2, unit="quarts"))

    if SEASONAL_PACKAGE in selected:
        materials += [
            MaterialItem(item="Lawn Fertilizer (22-0-10)", quantity=4, unit="bags"),
            MaterialItem(item="Core Aeration (equipment rental)", quantity=1, unit="day"),
        ]

    if LIGHTS_INSTALL in selected:
        roofline_ft = prop.roofline_ft or MATERIALS_DEFAULT_ROOFLINE_FT
        materials += [
            MaterialItem(
                item="LED Christmas Lights",
                quantity=math.ceil(roofline_ft / LIGHT_STRAND_FT),
                unit=f"strands ({LIGHT_STRAND_FT}ft)",
            ),
            MaterialItem(item="Light Clips", quantity=roofline_ft, unit="clips"),
            MaterialItem(item="Extension Cords", quantity=3, unit="cords"),
            MaterialItem(item="Outdoor Timers", quantity=2, unit="timers"),
        ]

    logger.info(
        "materials_generated",
        extra={
            "extra": {
                "property_id": prop.id,
                "service_type": service_type.value,
                "materials_count": len(materials),
            }
        },
    )
    return materials
