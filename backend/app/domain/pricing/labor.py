import math

from app.domain.pricing.models import ServiceType

SQFT_PER_HOUR = {
    ServiceType.mowing: 5000,
    ServiceType.cleanup: 2000,
    ServiceType.mulch: 1000,
    ServiceType.softscape: 500,
    ServiceType.maintenance: 3000,
}
# Used when there is no lawn measurement to scale from.
DEFAULT_BASE_HOURS = 2.0
BASELINE_CONDITION_SCORE = 3

SMALL_PROPERTY_SQFT = 5000
MEDIUM_PROPERTY_SQFT = 15000


def _round_up_half_hour(hours: float) -> float:
    return math.ceil(hours * 2) / 2


def estimate_labor_hours(service_type: ServiceType, lawn_sqft: int, condition_score: int) -> float:
    base_hours = lawn_sqft / SQFT_PER_HOUR[service_type] or DEFAULT_BASE_HOURS
    return _round_up_half_hour(base_hours * (condition_score / BASELINE_CONDITION_SCORE))


def determine_crew_size(lawn_sqft: int) -> int:
    if lawn_sqft < SMALL_PROPERTY_SQFT:
        return 2
    if lawn_sqft < MEDIUM_PROPERTY_SQFT:
        return 3
    return 4
