import json
from decimal import Decimal

import pytest

from app.domain.errors import PricingConfigurationError
from app.domain.pricing.catalog import FilePricingProvider, RateCatalog, list_rate_cards
from app.domain.pricing.config_loader import load_pricing_config
from app.domain.pricing.models import RateCardEntry


def _write_config(tmp_path, rate_cards, regional_adjustments=()):
    path = tmp_path / "pricing.json"
    path.write_text(
        json.dumps(
            {
                "pricing_config_id": "test",
                "pricing_config_version": 2,
                "rate_cards": list(rate_cards),
                "regional_adjustments": list(regional_adjustments),
            }
        ),
        encoding="utf-8",
    )
    return path


def test_seed_config_loads(pricing_config):
    assert pricing_config.pricing_config_id == "landscape"
    assert pricing_config.config_hash.startswith("sha256:")
    assert len(pricing_config.rate_cards) == 8
    mowing = next(card for card in pricing_config.rate_cards if card.service_code == "MOWING_BASE")
    assert mowing.base_rate == Decimal("4.50")
    assert mowing.factor == 30


def test_hash_ignores_key_order(tmp_path):
    first = tmp_path / "a.json"
    second = tmp_path / "b.json"
    first.write_text('{"pricing_config_id": "x", "pricing_config_version": "1", "rate_cards": []}')
    second.write_text('{"rate_cards": [], "pricing_config_version": "1", "pricing_config_id": "x"}')

    assert load_pricing_config(str(first)).config_hash == load_pricing_config(str(second)).config_hash


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_pricing_config("pricing/does_not_exist.json")


def test_catalog_skips_inactive_and_rejects_duplicates():
    active = RateCardEntry(service_code="EDGING", unit_measure="Per Linear Foot", base_rate=Decimal("2.5"))
    inactive = RateCardEntry(
        service_code="EDGING", unit_measure="Per Linear Foot", base_rate=Decimal("9"), active=False
    )

    catalog = RateCatalog([inactive, active])
    assert catalog["EDGING"].base_rate == Decimal("2.5")
    assert catalog.get("MULCH_INSTALL") is None

    with pytest.raises(PricingConfigurationError):
        RateCatalog([active, active])


def test_require_missing_code(rate_catalog):
    assert rate_catalog.require("EDGING").service_code == "EDGING"
    with pytest.raises(PricingConfigurationError) as exc_info:
        rate_catalog.require("POOL_CLEANING")
    assert exc_info.value.errors == [{"service_code": "POOL_CLEANING"}]


def test_list_rate_cards_orders_by_category_then_code(rate_catalog):
    assert [card.service_code for card in list_rate_cards(rate_catalog)] == [
        "LEAF_CLEANUP",
        "LIGHTS_INSTALL",
        "MULCH_INSTALL",
        "BED_MAINTENANCE",
        "BUSH_TRIMMING",
        "EDGING",
        "SEASONAL_PACKAGE",
        "MOWING_BASE",
    ]


def test_file_provider_picks_up_edits(tmp_path):
    card = {"service_code": "EDGING", "unit_measure": "Per Linear Foot", "base_rate": "2.50"}
    path = _write_config(
        tmp_path,
        [card],
        [
            {"zip_code": "45247", "multiplier": "1.05"},
            {"zip_code": "45999", "multiplier": "1.40", "active": False},
        ],
    )
    provider = FilePricingProvider(str(path))

    assert provider.load_rate_catalog()["EDGING"].base_rate == Decimal("2.50")
    assert provider.get_regional_multiplier(" 45247 ") == Decimal("1.05")
    assert provider.get_regional_multiplier("45999") is None

    _write_config(tmp_path, [{**card, "base_rate": "3.00"}])
    assert provider.load_rate_catalog()["EDGING"].base_rate == Decimal("3.00")
    assert provider.get_regional_multiplier("45247") is None
