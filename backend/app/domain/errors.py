from dataclasses import dataclass
from typing import Any, List


@dataclass
class DomainError(Exception):
    detail: str
    title: str = "Domain Error"
    type: str = "https://example.com/problems/domain-error"
    errors: List[dict] | None = None

    def to_problem(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "errors": self.errors or [],
        }


@dataclass
class PricingConfigurationError(DomainError):
    """A rate the tier calculator depends on is missing or inactive."""

    title: str = "Pricing Configuration Error"
    type: str = "https://example.com/problems/pricing-configuration"


@dataclass
class InvalidPricingInputError(DomainError):
    """Caller supplied input the pricing core refuses to price."""

    title: str = "Invalid Pricing Input"
    type: str = "https://example.com/problems/invalid-pricing-input"
