from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.domain.pricing.catalog import (
    FilePricingProvider,
    RateCatalogProvider,
    RegionalAdjustmentProvider,
)
from app.domain.pricing.multipliers import ServiceArea


@dataclass
class PricingServices:
    """Collaborators the pricing core reads from, passed in explicitly by callers."""

    rate_catalog: RateCatalogProvider
    regional_adjustments: RegionalAdjustmentProvider
    service_area: ServiceArea
    default_regional_multiplier: Decimal = Decimal("1.0")
    quote_valid_days: int = 30


def build_pricing_services(
    app_settings,
    *,
    rate_catalog: RateCatalogProvider | None = None,
    regional_adjustments: RegionalAdjustmentProvider | None = None,
) -> PricingServices:
    file_provider = FilePricingProvider(app_settings.pricing_config_path)
    return PricingServices(
        rate_catalog=rate_catalog or file_provider,
        regional_adjustments=regional_adjustments or file_provider,
        service_area=ServiceArea.from_settings(app_settings),
        default_regional_multiplier=Decimal(str(app_settings.default_regional_multiplier)),
        quote_valid_days=app_settings.quote_valid_days,
    )
