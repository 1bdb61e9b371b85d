"""
Pydantic schemas for measurement endpoints
Parameters travel as fixed-point integers; decoded values are added to responses
"""

from pydantic import BaseModel, Field
from typing import Dict, List

from aquamonitor.config import PARAMETER_UNITS, decode_parameter
from aquamonitor.core.measurement_store import Measurement, MeasurementReading, build_reading


class MeasurementCreate(BaseModel):
    """
    Request body for recording a measurement
    Range and length rules are enforced by the store so they surface as InvalidInput
    """
    pond_id: int = Field(..., description="Pond ID")
    temperature: int = Field(..., description="Temperature in 0.1 °C (250 = 25.0 °C)")
    ph: int = Field(..., description="pH in 0.1 units (72 = 7.2)")
    dissolved_oxygen: int = Field(..., description="Dissolved oxygen in 0.1 mg/L")
    ammonia: int = Field(..., description="Ammonia in 0.01 mg/L")
    nitrite: int = Field(..., description="Nitrite in 0.01 mg/L")
    nitrate: int = Field(..., description="Nitrate in 0.1 mg/L")
    turbidity: int = Field(..., description="Turbidity in NTU")
    weather_conditions: str = Field("", description="Weather at measurement time (max 100 characters)")
    notes: str = Field("", description="Free-form notes (max 500 characters)")

    def to_reading(self) -> MeasurementReading:
        return build_reading(
            pond_id=self.pond_id,
            temperature=self.temperature,
            ph=self.ph,
            dissolved_oxygen=self.dissolved_oxygen,
            ammonia=self.ammonia,
            nitrite=self.nitrite,
            nitrate=self.nitrate,
            turbidity=self.turbidity,
            weather=self.weather_conditions,
            notes=self.notes,
        )


class MeasurementCreated(BaseModel):
    measurement_id: int


class MeasurementResponse(BaseModel):
    """Stored measurement as returned by the API"""
    id: int
    pond_id: int
    recorder: str
    temperature: int
    ph: int
    dissolved_oxygen: int
    ammonia: int
    nitrite: int
    nitrate: int
    turbidity: int
    weather_conditions: str
    notes: str
    recorded_at: int
    is_critical: bool
    violations: List[str]
    decoded: Dict[str, float] = Field(..., description="Parameters in display units")

    @classmethod
    def from_measurement(cls, measurement: Measurement) -> "MeasurementResponse":
        return cls(
            **measurement.model_dump(exclude={"weather", "violations"}),
            weather_conditions=measurement.weather,
            violations=list(measurement.violations),
            decoded={
                parameter: decode_parameter(parameter, getattr(measurement, parameter))
                for parameter in PARAMETER_UNITS
            },
        )


class PondMeasurementIds(BaseModel):
    pond_id: int
    measurement_ids: List[int]


class MeasurementCount(BaseModel):
    count: int = Field(..., ge=0)


class PondCapacityResponse(BaseModel):
    """Index usage for one pond; a full index rejects every further measurement"""
    pond_id: int
    measurements: int
    measurement_capacity: int
    measurements_remaining: int
    critical_measurements: int
    critical_capacity: int
    critical_remaining: int
