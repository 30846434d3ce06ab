from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "landscape-pricing"
    app_env: Literal["dev", "prod"] = Field("prod")
    log_level: str = Field("INFO")
    pricing_config_path: str = Field("pricing/landscape_v1.json")
    default_regional_multiplier: float = Field(1.0)
    service_area_center_lat: float = Field(39.1031)
    service_area_center_lng: float = Field(-84.5120)
    service_area_radius_miles: float = Field(25.0)
    quote_valid_days: int = Field(30)

    model_config = SettingsConfigDict(env_file=".env", enable_decoding=False)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        normalized = str(value or "INFO").strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {value}")
        return normalized

    @field_validator("default_regional_multiplier")
    @classmethod
    def validate_regional_multiplier(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("default_regional_multiplier must be positive")
        return value

    @field_validator("service_area_center_lat")
    @classmethod
    def validate_center_lat(cls, value: float) -> float:
        if value < -90 or value > 90:
            raise ValueError("service_area_center_lat must be between -90 and 90")
        return value

    @field_validator("service_area_center_lng")
    @classmethod
    def validate_center_lng(cls, value: float) -> float:
        if value < -180 or value > 180:
            raise ValueError("service_area_center_lng must be between -180 and 180")
        return value

    @field_validator("quote_valid_days")
    @classmethod
    def validate_quote_valid_days(cls, value: int) -> int:
        if value < 1:
            raise ValueError("quote_valid_days must be at least 1")
        return value

    @model_validator(mode="after")
    def validate_service_area(self) -> "Settings":
        # The 1.10 band sits between 20 miles and the configured radius.
        if self.service_area_radius_miles <= 20:
            raise ValueError("service_area_radius_miles must be greater than 20")
        return self


settings = Settings()
