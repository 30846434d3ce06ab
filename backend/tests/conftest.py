import logging
import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from app.domain.pricing.catalog import (
    InMemoryRateCatalogProvider,
    InMemoryRegionalAdjustmentProvider,
    RateCatalog,
)
from app.domain.pricing.config_loader import load_pricing_config
from app.domain.pricing.models import PropertySnapshot
from app.domain.pricing.multipliers import ServiceArea
from app.services import PricingServices

PRICING_CONFIG_PATH = "pricing/landscape_v1.json"
CENTER_LAT = 39.1031
CENTER_LNG = -84.5120


@pytest.fixture(scope="session")
def pricing_config():
    return load_pricing_config(PRICING_CONFIG_PATH)


@pytest.fixture()
def rate_catalog(pricing_config) -> RateCatalog:
    return RateCatalog(pricing_config.rate_cards)


@pytest.fixture()
def service_area() -> ServiceArea:
    return ServiceArea(center_lat=CENTER_LAT, center_lng=CENTER_LNG, radius_miles=25.0)


@pytest.fixture()
def pricing_services(pricing_config, service_area) -> PricingServices:
    return PricingServices(
        rate_catalog=InMemoryRateCatalogProvider(pricing_config.rate_cards),
        regional_adjustments=InMemoryRegionalAdjustmentProvider(pricing_config.regional_adjustments),
        service_area=service_area,
        default_regional_multiplier=Decimal("1.0"),
        quote_valid_days=30,
    )


@pytest.fixture()
def scenario_snapshot() -> PropertySnapshot:
    return PropertySnapshot(
        id="prop-1",
        formatted_address="123 Main St, Cincinnati, OH 45247",
        zip_code="45247",
        lat=CENTER_LAT,
        lng=CENTER_LNG,
        lawn_sqft=10000,
        bed_sqft=600,
        roofline_ft=150,
        condition_score=4,
        bush_count=8,
        bed_condition="overgrown",
    )


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
