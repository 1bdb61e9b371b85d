"""Tests for the service boundary: injected identity, logical time and admin checks."""

import threading
import time

import pytest

from aquamonitor.core.clock import LogicalClock
from aquamonitor.core.exceptions import AuthorizationError
from aquamonitor.core.measurement_store import build_reading
from aquamonitor.core.security import Principal
from aquamonitor.services.monitoring import MonitoringService


class SlowClock(LogicalClock):
    """Yields the GIL after every tick so concurrent recorders interleave."""

    def tick(self):
        height = super().tick()
        time.sleep(0.001)
        return height


class TestRecordMeasurement:

    def test_recorder_comes_from_principal(self, service, recorder, normal_reading):
        measurement_id = service.record_measurement(recorder, build_reading(**normal_reading))
        assert service.get_measurement(measurement_id).recorder == "station-1"

    def test_logical_time_advances_per_record(self, service, recorder, normal_reading):
        first = service.record_measurement(recorder, build_reading(**normal_reading))
        second = service.record_measurement(recorder, build_reading(**normal_reading))
        assert service.get_measurement(second).recorded_at > service.get_measurement(first).recorded_at

    def test_reads_match_store(self, service, recorder, normal_reading, critical_reading):
        service.record_measurement(recorder, build_reading(**normal_reading))
        service.record_measurement(recorder, build_reading(**critical_reading))

        assert service.get_measurement_count() == 2
        assert service.get_pond_measurements(1) == [0, 1]
        assert service.get_critical_measurements(1) == [1]
        assert service.get_pond_capacity(1).critical_measurements == 1

    def test_concurrent_recorders_keep_time_in_id_order(self, store, registry, normal_reading):
        service = MonitoringService(store, registry, SlowClock())
        reading = build_reading(**normal_reading)

        def worker(worker_id):
            principal = Principal(subject=f"station-{worker_id}")
            for _ in range(20):
                service.record_measurement(principal, reading)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        stamps = [service.get_measurement(i).recorded_at for i in range(160)]
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 160


class TestUpdateThresholds:

    def test_admin_can_update(self, service, admin):
        bounds = service.get_parameter_thresholds().model_dump()
        service.update_thresholds(admin, **dict(bounds, max_ammonia=30))
        assert service.get_parameter_thresholds().max_ammonia == 30

    def test_recorder_cannot_update(self, service, recorder):
        before = service.get_parameter_thresholds()
        with pytest.raises(AuthorizationError):
            service.update_thresholds(recorder, **dict(before.model_dump(), max_ammonia=30))
        assert service.get_parameter_thresholds() == before

    def test_tightened_ph_flags_later_readings_only(self, service, admin, recorder, normal_reading):
        """A tightened pH range flags a reading recorded afterwards only."""
        before_id = service.record_measurement(recorder, build_reading(**normal_reading))

        bounds = service.get_parameter_thresholds().model_dump()
        service.update_thresholds(admin, **dict(bounds, min_ph=75))
        after_id = service.record_measurement(recorder, build_reading(**normal_reading))

        assert service.get_measurement(before_id).is_critical is False
        assert service.get_measurement(after_id).is_critical is True
        assert service.get_critical_measurements(1) == [after_id]
