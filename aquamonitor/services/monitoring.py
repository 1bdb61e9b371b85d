"""
Monitoring service
The boundary surface callers use: injects recorder identity and logical time,
guards administrative operations and keeps the journal in step with memory
"""

import logging
from typing import List, Optional

from aquamonitor.config import Settings
from aquamonitor.core.clock import LogicalClock
from aquamonitor.core.exceptions import AuthorizationError
from aquamonitor.core.measurement_store import (
    ClockedContext,
    Measurement,
    MeasurementReading,
    MeasurementStore,
    PondCapacity,
)
from aquamonitor.core.security import Principal
from aquamonitor.core.thresholds import ThresholdConfig, ThresholdRegistry
from aquamonitor.services.measurement_journal import MeasurementJournal

logger = logging.getLogger(__name__)


class MonitoringService:
    """Records measurements and exposes the read operations over them"""

    def __init__(
        self,
        store: MeasurementStore,
        thresholds: ThresholdRegistry,
        clock: Optional[LogicalClock] = None,
    ):
        self.store = store
        self.thresholds = thresholds
        self.clock = clock or LogicalClock()

    def record_measurement(self, principal: Principal, reading: MeasurementReading) -> int:
        context = ClockedContext(recorder=principal.subject, clock=self.clock.tick)
        return self.store.record_reading(context, reading)

    def update_thresholds(self, principal: Principal, **bounds: int) -> ThresholdConfig:
        """Administrative: replace all eight bounds (no min <= max check)"""
        if not principal.is_admin:
            logger.warning(f"Threshold update refused for {principal.subject}")
            raise AuthorizationError("Only administrators may update thresholds")
        return self.thresholds.update(**bounds)

    def get_measurement(self, measurement_id: int) -> Optional[Measurement]:
        return self.store.get(measurement_id)

    def get_pond_measurements(self, pond_id: int) -> List[int]:
        return self.store.get_pond_measurement_ids(pond_id)

    def get_critical_measurements(self, pond_id: int) -> List[int]:
        return self.store.get_critical_measurement_ids(pond_id)

    def get_parameter_thresholds(self) -> ThresholdConfig:
        return self.thresholds.get()

    def get_measurement_count(self) -> int:
        return self.store.count()

    def get_pond_capacity(self, pond_id: int) -> PondCapacity:
        return self.store.pond_capacity(pond_id)


def build_monitoring_service(
    settings: Settings,
    journal: Optional[MeasurementJournal] = None,
) -> MonitoringService:
    """
    Wire the registry, store and clock from settings

    With a journal, thresholds and measurements are replayed from it first and
    every later commit is written through it.
    """
    initial = ThresholdConfig(**settings.default_thresholds())
    if journal is not None:
        initial = journal.load_thresholds() or initial

    thresholds = ThresholdRegistry(
        initial,
        on_update=journal.persist_thresholds if journal is not None else None,
    )
    store = MeasurementStore(
        thresholds,
        pond_capacity=settings.POND_INDEX_CAPACITY,
        critical_capacity=settings.CRITICAL_INDEX_CAPACITY,
        on_commit=journal.persist_measurement if journal is not None else None,
    )
    clock = LogicalClock()

    if journal is not None:
        measurements = journal.load_measurements()
        store.restore(measurements)
        if measurements:
            clock.advance_to(max(m.recorded_at for m in measurements))

    return MonitoringService(store, thresholds, clock)
