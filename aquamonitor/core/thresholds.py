"""
Parameter safety thresholds
Holds the current min/max safe values read by every criticality evaluation
"""

import logging
import threading
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError

from aquamonitor.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class ThresholdConfig(BaseModel):
    """
    Snapshot of the eight safety bounds
    Values use the same fixed-point encoding as the measurements they bound.
    min <= max is deliberately not enforced.
    """
    min_temperature: int = Field(..., description="Minimum temperature (0.1 °C)")
    max_temperature: int = Field(..., description="Maximum temperature (0.1 °C)")
    min_ph: int = Field(..., description="Minimum pH (0.1)")
    max_ph: int = Field(..., description="Maximum pH (0.1)")
    min_oxygen: int = Field(..., ge=0, description="Minimum dissolved oxygen (0.1 mg/L)")
    max_ammonia: int = Field(..., ge=0, description="Maximum ammonia (0.01 mg/L)")
    max_nitrite: int = Field(..., ge=0, description="Maximum nitrite (0.01 mg/L)")
    max_nitrate: int = Field(..., ge=0, description="Maximum nitrate (0.1 mg/L)")

    class Config:
        frozen = True


ThresholdListener = Callable[[ThresholdConfig], None]


class ThresholdRegistry:
    """
    Process-wide holder of the current ThresholdConfig
    Updates swap the whole snapshot, so an evaluation only ever sees one version.
    """

    def __init__(self, initial: ThresholdConfig, on_update: Optional[ThresholdListener] = None):
        self._current = initial
        self._on_update = on_update
        self._lock = threading.Lock()

    def get(self) -> ThresholdConfig:
        with self._lock:
            return self._current

    def update(
        self,
        min_temperature: int,
        max_temperature: int,
        min_ph: int,
        max_ph: int,
        min_oxygen: int,
        max_ammonia: int,
        max_nitrite: int,
        max_nitrate: int,
    ) -> ThresholdConfig:
        """
        Replace the current bounds
        The on_update hook runs first; if it raises, the old snapshot stays in place.
        """
        try:
            config = ThresholdConfig(
                min_temperature=min_temperature,
                max_temperature=max_temperature,
                min_ph=min_ph,
                max_ph=max_ph,
                min_oxygen=min_oxygen,
                max_ammonia=max_ammonia,
                max_nitrite=max_nitrite,
                max_nitrate=max_nitrate,
            )
        except ValidationError as e:
            raise InvalidInputError(f"Invalid thresholds: {e.errors()[0]['msg']}") from e

        with self._lock:
            if self._on_update is not None:
                self._on_update(config)
            self._current = config

        logger.info(f"Thresholds updated: {config.model_dump()}")
        return config
