from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from typing import Protocol

from app.domain.errors import PricingConfigurationError
from app.domain.pricing.config_loader import load_pricing_config
from app.domain.pricing.models import RateCardEntry, RegionalAdjustment

logger = logging.getLogger(__name__)

MOWING_BASE = "MOWING_BASE"
LEAF_CLEANUP = "LEAF_CLEANUP"
SEASONAL_PACKAGE = "SEASONAL_PACKAGE"
LIGHTS_INSTALL = "LIGHTS_INSTALL"
MULCH_INSTALL = "MULCH_INSTALL"
EDGING = "EDGING"
BUSH_TRIMMING = "BUSH_TRIMMING"
BED_MAINTENANCE = "BED_MAINTENANCE"

TIER_SERVICE_CODES = (MOWING_BASE, LEAF_CLEANUP, SEASONAL_PACKAGE, LIGHTS_INSTALL)


class RateCatalog(Mapping[str, RateCardEntry]):
    """Active rate cards keyed by service code, read-only for one calculation."""

    def __init__(self, entries: Iterable[RateCardEntry]):
        self._entries: dict[str, RateCardEntry] = {}
        for entry in entries:
            if not entry.active:
                continue
            if entry.service_code in self._entries:
                raise PricingConfigurationError(
                    detail=f"Duplicate rate card for service code {entry.service_code}"
                )
            self._entries[entry.service_code] = entry

    def __getitem__(self, service_code: str) -> RateCardEntry:
        return self._entries[service_code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def require(self, service_code: str) -> RateCardEntry:
        entry = self._entries.get(service_code)
        if entry is None:
            raise PricingConfigurationError(
                detail=f"No active rate card for service code {service_code}",
                errors=[{"service_code": service_code}],
            )
        return entry

    def require_all(self, service_codes: Iterable[str]) -> None:
        missing = [code for code in service_codes if code not in self._entries]
        if missing:
            raise PricingConfigurationError(
                detail=f"No active rate card for service codes {', '.join(missing)}",
                errors=[{"service_code": code} for code in missing],
            )


def list_rate_cards(catalog: RateCatalog) -> list[RateCardEntry]:
    return sorted(catalog.values(), key=lambda entry: (entry.category or "", entry.service_code))


class RateCatalogProvider(Protocol):
    def load_rate_catalog(self) -> RateCatalog: ...


class RegionalAdjustmentProvider(Protocol):
    def get_regional_multiplier(self, zip_code: str) -> Decimal | None: ...


class InMemoryRateCatalogProvider:
    def __init__(self, entries: Iterable[RateCardEntry]):
        self._entries = list(entries)

    def load_rate_catalog(self) -> RateCatalog:
        return RateCatalog(self._entries)


class InMemoryRegionalAdjustmentProvider:
    def __init__(self, adjustments: Iterable[RegionalAdjustment] = ()):
        self._adjustments = {
            adjustment.zip_code: adjustment for adjustment in adjustments if adjustment.active
        }

    def get_regional_multiplier(self, zip_code: str) -> Decimal | None:
        adjustment = self._adjustments.get(zip_code.strip())
        return adjustment.multiplier if adjustment else None


class FilePricingProvider:
    """Serves rate cards and regional adjustments from the pricing JSON file.

    The file is re-read on each call so edits are picked up by the next
    calculation without a restart.
    """

    def __init__(self, path: str):
        self._path = path

    def load_rate_catalog(self) -> RateCatalog:
        config = load_pricing_config(self._path)
        logger.debug(
            "rate_catalog_loaded",
            extra={
                "extra": {
                    "pricing_config_id": config.pricing_config_id,
                    "config_hash": config.config_hash,
                    "rate_card_count": len(config.rate_cards),
                }
            },
        )
        return RateCatalog(config.rate_cards)

    def get_regional_multiplier(self, zip_code: str) -> Decimal | None:
        config = load_pricing_config(self._path)
        return InMemoryRegionalAdjustmentProvider(config.regional_adjustments).get_regional_multiplier(
            zip_code
        )
