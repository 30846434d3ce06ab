import pytest

from app.domain.pricing.description import CONDITION_NOTE, generate_job_description
from app.domain.pricing.labor import determine_crew_size, estimate_labor_hours
from app.domain.pricing.models import PropertySnapshot, ServiceType, TierType, Upsell
from app.domain.pricing.normalize import normalize_snapshot


@pytest.mark.parametrize(
    "lawn_sqft,crew",
    [(0, 2), (4999, 2), (5000, 3), (14999, 3), (15000, 4), (60000, 4)],
)
def test_crew_size_thresholds(lawn_sqft, crew):
    assert determine_crew_size(lawn_sqft) == crew


@pytest.mark.parametrize(
    "service_type,lawn_sqft,score,hours",
    [
        (ServiceType.mowing, 10000, 4, 3.0),
        (ServiceType.mowing, 10000, 1, 1.0),
        (ServiceType.cleanup, 0, 3, 2.0),
        (ServiceType.mulch, 3000, 3, 3.0),
        (ServiceType.softscape, 1200, 3, 2.5),
        (ServiceType.maintenance, 9000, 3, 3.0),
    ],
)
def test_labor_hours_round_up_to_half_hour(service_type, lawn_sqft, score, hours):
    assert estimate_labor_hours(service_type, lawn_sqft, score) == hours


def test_job_description_for_scenario(scenario_snapshot):
    prop = normalize_snapshot(scenario_snapshot)
    upsells = [
        Upsell(service_code="EDGING", service_name="Professional Bed Edging", description="", price=245, recommended=True),
    ]
    lines = generate_job_description(prop, ServiceType.mowing, TierType.premier, upsells).splitlines()

    assert lines[0] == "Premier Lawn Package - Weekly lawn mowing and trimming"
    assert "- Address: 123 Main St, Cincinnati, OH 45247" in lines
    assert "- Lawn Area: 10,000 sq ft" in lines
    assert "- Landscape Beds: 600 sq ft" in lines
    assert "- Bushes/Shrubs: 8" in lines
    assert "- Seasonal care package (aeration + fertilization)" in lines
    assert lines[lines.index("Additional Services:") + 1] == "- Professional Bed Edging"
    assert lines[-1] == CONDITION_NOTE


def test_job_description_for_sparse_property():
    prop = normalize_snapshot(PropertySnapshot(condition_score=2))
    text = generate_job_description(prop, ServiceType.cleanup, TierType.grass_roots)

    assert "- Address: Not provided" in text
    assert "- Lawn Area: 0 sq ft" in text
    assert "Landscape Beds" not in text
    assert "Additional Services:" not in text
    assert CONDITION_NOTE not in text
    assert "- Basic fall leaf cleanup (1 visit)" in text
    assert text.endswith("\n")


def test_total_landscape_lists_lights():
    prop = normalize_snapshot(PropertySnapshot(lawn_sqft=5000))
    text = generate_job_description(prop, ServiceType.maintenance, TierType.total_landscape)

    assert text.startswith("Total Landscape Package - Ongoing landscape maintenance")
    assert "- Holiday lights installation and removal" in text
