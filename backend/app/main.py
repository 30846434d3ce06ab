import logging

from app.infra.logging import configure_logging
from app.services import PricingServices, build_pricing_services
from app.settings import settings

logger = logging.getLogger(__name__)


def create_pricing_services(app_settings=settings) -> PricingServices:
    """Configure logging and wire the pricing collaborators for a host process."""
    configure_logging(app_settings.log_level)
    services = build_pricing_services(app_settings)
    logger.info(
        "pricing_services_ready",
        extra={
            "extra": {
                "app_name": app_settings.app_name,
                "app_env": app_settings.app_env,
                "pricing_config_path": app_settings.pricing_config_path,
                "service_area_radius_miles": app_settings.service_area_radius_miles,
            }
        },
    )
    return services
