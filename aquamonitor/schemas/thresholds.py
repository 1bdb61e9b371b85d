"""
Pydantic schemas for threshold endpoints
"""

from pydantic import BaseModel, Field

from aquamonitor.core.thresholds import ThresholdConfig


class ThresholdUpdate(BaseModel):
    """
    New values for all eight bounds
    Inconsistent pairs (min above max) are accepted as-is.
    """
    min_temperature: int = Field(..., description="Minimum temperature (0.1 °C)")
    max_temperature: int = Field(..., description="Maximum temperature (0.1 °C)")
    min_ph: int = Field(..., description="Minimum pH (0.1)")
    max_ph: int = Field(..., description="Maximum pH (0.1)")
    min_oxygen: int = Field(..., description="Minimum dissolved oxygen (0.1 mg/L)")
    max_ammonia: int = Field(..., description="Maximum ammonia (0.01 mg/L)")
    max_nitrite: int = Field(..., description="Maximum nitrite (0.01 mg/L)")
    max_nitrate: int = Field(..., description="Maximum nitrate (0.1 mg/L)")


class ThresholdResponse(ThresholdUpdate):
    """Current thresholds"""

    @classmethod
    def from_config(cls, config: ThresholdConfig) -> "ThresholdResponse":
        return cls(**config.model_dump())
