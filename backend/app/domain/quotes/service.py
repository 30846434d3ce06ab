from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable

from app.domain.errors import InvalidPricingInputError
from app.domain.pricing.catalog import RateCatalog
from app.domain.pricing.description import generate_job_description
from app.domain.pricing.estimator import calculate_all_tiers, select_tier
from app.domain.pricing.labor import determine_crew_size, estimate_labor_hours
from app.domain.pricing.models import (
    MultiplierBreakdown,
    NormalizedProperty,
    PricingCalculation,
    PropertySnapshot,
    Quote,
    QuoteStatus,
    ServiceType,
    TierQuote,
    TierType,
    Upsell,
)
from app.domain.pricing.multipliers import resolve_multipliers
from app.domain.pricing.normalize import normalize_snapshot, parse_service_type, parse_tier
from app.domain.pricing.upsells import generate_materials_list, generate_upsells
from app.infra.logging import log_context
from app.services import PricingServices

logger = logging.getLogger(__name__)

DEFAULT_TIER = TierType.premier


@dataclass(frozen=True)
class TierPricingResult:
    prop: NormalizedProperty
    catalog: RateCatalog
    multipliers: MultiplierBreakdown
    tiers: list[TierQuote]


def price_tiers(snapshot: PropertySnapshot, services: PricingServices) -> TierPricingResult:
    """Normalize the snapshot, read reference data once and price every tier."""
    prop = normalize_snapshot(snapshot)
    catalog = services.rate_catalog.load_rate_catalog()
    multipliers = resolve_multipliers(
        prop,
        services.regional_adjustments,
        services.service_area,
        services.default_regional_multiplier,
    )
    tiers = calculate_all_tiers(prop, catalog, multipliers.combined)
    return TierPricingResult(prop=prop, catalog=catalog, multipliers=multipliers, tiers=tiers)


def _pricing_summary(multipliers: MultiplierBreakdown, tier_quote: TierQuote) -> PricingCalculation:
    return PricingCalculation(
        base_price=tier_quote.annual_price,
        complexity_multiplier=multipliers.complexity,
        regional_multiplier=multipliers.regional,
        distance_multiplier=multipliers.distance,
        combined_multiplier=multipliers.combined,
        distance_miles=multipliers.distance_miles,
        final_annual_price=tier_quote.annual_price,
        final_monthly_price=tier_quote.monthly_price,
    )


def _total_price(upsells: Iterable[Upsell]) -> Decimal:
    return sum((upsell.price for upsell in upsells), Decimal("0"))


def assemble_quote(
    snapshot: PropertySnapshot,
    service_type: ServiceType | str,
    services: PricingServices,
    tier: TierType | str | None = None,
    *,
    now: datetime | None = None,
) -> Quote:
    """Build a draft quote for one property.

    The recommended upsells start out selected; a person can change the
    selection later with ``reselect_upsells``.
    """
    service = parse_service_type(service_type)
    selected_tier = parse_tier(tier) if tier is not None else DEFAULT_TIER

    with log_context(property_id=snapshot.id):
        result = price_tiers(snapshot, services)
        prop = result.prop
        tier_quote = select_tier(result.tiers, selected_tier)

        upsells = generate_upsells(prop, service, selected_tier, result.catalog)
        selected_upsells = [upsell for upsell in upsells if upsell.recommended]
        created_at = now or datetime.now(tz=timezone.utc)

        quote = Quote(
            property_id=prop.id,
            service_type=service,
            tier=selected_tier,
            status=QuoteStatus.draft,
            pricing=_pricing_summary(result.multipliers, tier_quote),
            tiers=result.tiers,
            breakdown=tier_quote.breakdown,
            recommended_upsells=upsells,
            selected_upsells=selected_upsells,
            total_upsells_price=_total_price(selected_upsells),
            materials_list=generate_materials_list(
                prop, service, [upsell.service_code for upsell in selected_upsells]
            ),
            estimated_labor_hours=estimate_labor_hours(service, prop.lawn_sqft, prop.condition_score),
            crew_size=determine_crew_size(prop.lawn_sqft),
            job_description=generate_job_description(prop, service, selected_tier, selected_upsells),
            created_at=created_at,
            valid_until=created_at + timedelta(days=services.quote_valid_days),
        )

        logger.info(
            "quote_assembled",
            extra={
                "extra": {
                    "service_type": service.value,
                    "tier": selected_tier.value,
                    "annual_price": str(tier_quote.annual_price),
                    "upsell_count": len(upsells),
                    "selected_upsell_count": len(selected_upsells),
                }
            },
        )
    return quote


def reselect_upsells(
    quote: Quote, service_codes: Iterable[str], snapshot: PropertySnapshot
) -> Quote:
    """Replace the upsell selection on a draft quote.

    Only upsells offered on the quote can be selected. Tier pricing is left
    as it was; the materials list and job description follow the new
    selection.
    """
    if quote.status != QuoteStatus.draft:
        raise InvalidPricingInputError(
            detail=f"Upsells can only be changed on draft quotes, quote is {quote.status.value}"
        )

    codes = list(dict.fromkeys(service_codes))
    offered = {upsell.service_code for upsell in quote.recommended_upsells}
    unknown = [code for code in codes if code not in offered]
    if unknown:
        raise InvalidPricingInputError(
            detail="Selected upsells were not offered on this quote",
            errors=[{"service_code": code} for code in unknown],
        )

    prop = normalize_snapshot(snapshot)
    chosen = set(codes)
    selected = [upsell for upsell in quote.recommended_upsells if upsell.service_code in chosen]

    updated = quote.model_copy(
        update={
            "selected_upsells": selected,
            "total_upsells_price": _total_price(selected),
            "materials_list": generate_materials_list(
                prop, quote.service_type, [upsell.service_code for upsell in selected]
            ),
            "job_description": generate_job_description(prop, quote.service_type, quote.tier, selected),
        }
    )
    with log_context(property_id=prop.id):
        logger.info(
            "quote_upsells_reselected",
            extra={
                "extra": {
                    "selected_codes": [upsell.service_code for upsell in selected],
                    "total_upsells_price": str(updated.total_upsells_price),
                }
            },
        )
    return updated
