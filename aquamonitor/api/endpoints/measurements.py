"""
Measurement endpoints
Record water quality measurements and read them back by id or by pond
"""

from fastapi import APIRouter, Depends, status

from aquamonitor.api.deps import get_current_principal, get_monitoring_service
from aquamonitor.core.exceptions import MeasurementNotFoundError
from aquamonitor.core.security import Principal
from aquamonitor.schemas.measurement import (
    MeasurementCount,
    MeasurementCreate,
    MeasurementCreated,
    MeasurementResponse,
    PondCapacityResponse,
    PondMeasurementIds,
)
from aquamonitor.services.monitoring import MonitoringService

router = APIRouter(tags=["measurements"])


@router.post("/measurements", response_model=MeasurementCreated, status_code=status.HTTP_201_CREATED)
async def record_measurement(
    measurement: MeasurementCreate,
    service: MonitoringService = Depends(get_monitoring_service),
    principal: Principal = Depends(get_current_principal)
):
    """Record a measurement; the caller becomes its recorder"""
    measurement_id = service.record_measurement(principal, measurement.to_reading())
    return MeasurementCreated(measurement_id=measurement_id)


@router.get("/measurements/count", response_model=MeasurementCount)
async def get_measurement_count(
    service: MonitoringService = Depends(get_monitoring_service)
):
    """Number of measurements recorded so far"""
    return MeasurementCount(count=service.get_measurement_count())


@router.get("/measurements/{measurement_id}", response_model=MeasurementResponse)
async def get_measurement(
    measurement_id: int,
    service: MonitoringService = Depends(get_monitoring_service)
):
    """Get a specific measurement by ID"""
    measurement = service.get_measurement(measurement_id)
    if measurement is None:
        raise MeasurementNotFoundError(measurement_id)
    return MeasurementResponse.from_measurement(measurement)


@router.get("/ponds/{pond_id}/measurements", response_model=PondMeasurementIds)
async def get_pond_measurements(
    pond_id: int,
    service: MonitoringService = Depends(get_monitoring_service)
):
    """All measurement ids for a pond, oldest first"""
    return PondMeasurementIds(pond_id=pond_id, measurement_ids=service.get_pond_measurements(pond_id))


@router.get("/ponds/{pond_id}/measurements/critical", response_model=PondMeasurementIds)
async def get_critical_measurements(
    pond_id: int,
    service: MonitoringService = Depends(get_monitoring_service)
):
    """Critical measurement ids for a pond, oldest first"""
    return PondMeasurementIds(pond_id=pond_id, measurement_ids=service.get_critical_measurements(pond_id))


@router.get("/ponds/{pond_id}/capacity", response_model=PondCapacityResponse)
async def get_pond_capacity(
    pond_id: int,
    service: MonitoringService = Depends(get_monitoring_service)
):
    """How much room is left in the pond's measurement indices"""
    capacity = service.get_pond_capacity(pond_id)
    return PondCapacityResponse(
        pond_id=capacity.pond_id,
        measurements=capacity.measurements,
        measurement_capacity=capacity.measurement_capacity,
        measurements_remaining=capacity.measurements_remaining,
        critical_measurements=capacity.critical_measurements,
        critical_capacity=capacity.critical_capacity,
        critical_remaining=capacity.critical_remaining,
    )
