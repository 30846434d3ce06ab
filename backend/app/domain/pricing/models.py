from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, conint, confloat


class TierType(str, Enum):
    grass_roots = "grass_roots"
    premier = "premier"
    total_landscape = "total_landscape"


TIER_NAMES: Dict[TierType, str] = {
    TierType.grass_roots: "Grass Roots",
    TierType.premier: "Premier Lawn",
    TierType.total_landscape: "Total Landscape",
}


class ServiceType(str, Enum):
    mowing = "mowing"
    cleanup = "cleanup"
    mulch = "mulch"
    softscape = "softscape"
    maintenance = "maintenance"


class CoverageLevel(str, Enum):
    light = "light"
    moderate = "moderate"
    heavy = "heavy"


class VolumeLevel(str, Enum):
    minimal = "minimal"
    moderate = "moderate"
    heavy = "heavy"


class BedCondition(str, Enum):
    good = "good"
    needs_work = "needs_work"
    overgrown = "overgrown"


class GrassHeight(str, Enum):
    normal = "normal"
    overgrown = "overgrown"
    very_overgrown = "very_overgrown"


class SlopeGrade(str, Enum):
    flat = "flat"
    moderate = "moderate"
    steep = "steep"


class QuoteStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"


class RateCardEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_code: str = Field(min_length=1, max_length=50)
    service_name: str = ""
    category: Optional[str] = None
    unit_measure: str
    base_rate: Decimal = Field(ge=0)
    factor: conint(ge=1) = 1
    notes: Optional[str] = None
    active: bool = True


class RegionalAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    zip_code: str = Field(min_length=1, max_length=10)
    multiplier: Decimal = Field(gt=0)
    area_name: Optional[str] = None
    active: bool = True


class PropertySnapshot(BaseModel):
    """Resolved property record handed over by lookup and image analysis.

    Measurements are left unchecked here so that the pricing core can reject
    them with its own error kind; see ``normalize_snapshot``.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    address: Optional[str] = None
    formatted_address: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    lat: Optional[confloat(ge=-90, le=90)] = None
    lng: Optional[confloat(ge=-180, le=180)] = None
    property_type: Optional[str] = None
    lot_size_sqft: Optional[int] = None
    lawn_sqft: Optional[int] = None
    bed_sqft: Optional[int] = None
    driveway_sqft: Optional[int] = None
    walkway_linear_ft: Optional[int] = None
    roofline_ft: Optional[int] = None
    slope_grade: Optional[SlopeGrade] = None
    condition_score: Optional[int] = None
    grass_height: Optional[GrassHeight] = None
    bush_count: Optional[int] = None
    tree_coverage: Optional[CoverageLevel] = None
    debris_level: Optional[VolumeLevel] = None
    leaf_volume: Optional[VolumeLevel] = None
    bed_condition: Optional[BedCondition] = None


class NormalizedProperty(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    address: Optional[str] = None
    zip_code: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    lot_size_sqft: int = 0
    lawn_sqft: int = 0
    bed_sqft: int = 0
    roofline_ft: int = 0
    slope_grade: SlopeGrade = SlopeGrade.flat
    condition_score: int = 3
    grass_height: Optional[GrassHeight] = None
    bush_count: int = 0
    tree_coverage: Optional[CoverageLevel] = None
    debris_level: Optional[VolumeLevel] = None
    leaf_volume: Optional[VolumeLevel] = None
    bed_condition: Optional[BedCondition] = None


class MultiplierBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    regional: Decimal
    complexity: Decimal
    distance: Decimal
    distance_miles: Optional[float] = None

    @property
    def combined(self) -> Decimal:
        return self.regional * self.complexity * self.distance


class TierQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: TierType
    tier_name: str
    annual_price: Decimal
    monthly_price: Decimal
    breakdown: Dict[str, Decimal]


class Upsell(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_code: str
    service_name: str
    description: str
    price: Decimal
    recommended: bool


class MaterialItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: str
    quantity: float
    unit: str


class PricingCalculation(BaseModel):
    base_price: Decimal
    complexity_multiplier: Decimal
    regional_multiplier: Decimal
    distance_multiplier: Decimal
    combined_multiplier: Decimal
    distance_miles: Optional[float] = None
    final_annual_price: Decimal
    final_monthly_price: Decimal


class Quote(BaseModel):
    property_id: Optional[str] = None
    service_type: ServiceType
    tier: TierType
    status: QuoteStatus = QuoteStatus.draft
    pricing: PricingCalculation
    tiers: List[TierQuote]
    breakdown: Dict[str, Decimal]
    recommended_upsells: List[Upsell] = Field(default_factory=list)
    selected_upsells: List[Upsell] = Field(default_factory=list)
    total_upsells_price: Decimal = Decimal("0")
    materials_list: List[MaterialItem] = Field(default_factory=list)
    estimated_labor_hours: float
    crew_size: int
    job_description: str
    created_at: datetime
    valid_until: datetime
