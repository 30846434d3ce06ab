from typing import Iterable

from app.domain.pricing.models import TIER_NAMES, NormalizedProperty, ServiceType, TierType, Upsell

SERVICE_DESCRIPTIONS = {
    ServiceType.mowing: "Weekly lawn mowing and trimming",
    ServiceType.cleanup: "Seasonal property cleanup",
    ServiceType.mulch: "Fresh mulch installation",
    ServiceType.softscape: "Softscape installation and planting",
    ServiceType.maintenance: "Ongoing landscape maintenance",
}

_MOWING_LINE = "30 weekly mowing visits (April - October)"
_FULL_LEAF_LINE = "Full fall leaf cleanup (2 visits)"
_SEASONAL_LINE = "Seasonal care package (aeration + fertilization)"

# Must stay in step with the tier composition in estimator.calculate_all_tiers.
TIER_INCLUDED_SERVICES = {
    TierType.grass_roots: [_MOWING_LINE, "Basic fall leaf cleanup (1 visit)"],
    TierType.premier: [_MOWING_LINE, _FULL_LEAF_LINE, _SEASONAL_LINE],
    TierType.total_landscape: [
        _MOWING_LINE,
        _FULL_LEAF_LINE,
        _SEASONAL_LINE,
        "Holiday lights installation and removal",
    ],
}

HIGH_CONDITION_SCORE = 4
CONDITION_NOTE = (
    "Note: Property requires additional care due to current condition. "
    "Pricing reflects extra effort needed."
)


def generate_job_description(
    prop: NormalizedProperty,
    service_type: ServiceType,
    tier: TierType,
    selected_upsells: Iterable[Upsell] = (),
) -> str:
    lines = [f"{TIER_NAMES[tier]} Package - {SERVICE_DESCRIPTIONS[service_type]}", ""]

    lines.append("Property Details:")
    lines.append(f"- Address: {prop.address or 'Not provided'}")
    lines.append(f"- Lawn Area: {prop.lawn_sqft:,} sq ft")
    if prop.bed_sqft:
        lines.append(f"- Landscape Beds: {prop.bed_sqft:,} sq ft")
    if prop.bush_count:
        lines.append(f"- Bushes/Shrubs: {prop.bush_count}")

    lines += ["", "Services Included:"]
    lines += [f"- {service}" for service in TIER_INCLUDED_SERVICES[tier]]

    upsell_names = [upsell.service_name for upsell in selected_upsells]
    if upsell_names:
        lines += ["", "Additional Services:"]
        lines += [f"- {name}" for name in upsell_names]

    if prop.condition_score >= HIGH_CONDITION_SCORE:
        lines += ["", CONDITION_NOTE]

    return "\n".join(lines) + "\n"
