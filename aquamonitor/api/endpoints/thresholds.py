"""
Threshold endpoints
Read and (as administrator) replace the parameter safety thresholds
"""

from fastapi import APIRouter, Depends

from aquamonitor.api.deps import get_current_principal, get_monitoring_service
from aquamonitor.core.security import Principal
from aquamonitor.schemas.thresholds import ThresholdResponse, ThresholdUpdate
from aquamonitor.services.monitoring import MonitoringService

router = APIRouter(prefix="/thresholds", tags=["thresholds"])


@router.get("", response_model=ThresholdResponse)
async def get_parameter_thresholds(
    service: MonitoringService = Depends(get_monitoring_service)
):
    """Current thresholds used for new measurements"""
    return ThresholdResponse.from_config(service.get_parameter_thresholds())


@router.put("", response_model=ThresholdResponse)
async def update_thresholds(
    thresholds: ThresholdUpdate,
    service: MonitoringService = Depends(get_monitoring_service),
    principal: Principal = Depends(get_current_principal)
):
    """
    Replace all thresholds (administrators only)
    Already-recorded measurements keep their critical flag.
    """
    config = service.update_thresholds(principal, **thresholds.model_dump())
    return ThresholdResponse.from_config(config)
