"""Tests for the SQL journal and startup replay."""

import pytest
from sqlalchemy.exc import OperationalError

from aquamonitor.config import settings
from aquamonitor.core.exceptions import AuthorizationError, CapacityExceededError, PersistenceError
from aquamonitor.core.security import Principal
from aquamonitor.core.measurement_store import build_reading
from aquamonitor.models.measurement import MeasurementRecord
from aquamonitor.services.monitoring import build_monitoring_service


class TestPersistence:

    def test_committed_measurement_is_journaled(self, journal, session_factory, recorder, critical_reading):
        service = build_monitoring_service(settings, journal)
        measurement_id = service.record_measurement(recorder, build_reading(**critical_reading))

        db = session_factory()
        try:
            row = db.get(MeasurementRecord, measurement_id)
            assert row.pond_id == 1
            assert row.recorder == "station-1"
            assert row.temperature == 100
            assert row.is_critical is True
            assert row.violations == ["temperature_low"]
        finally:
            db.close()

    def test_rejected_measurement_is_not_journaled(self, journal, session_factory, recorder, normal_reading):
        service = build_monitoring_service(settings.model_copy(update={"POND_INDEX_CAPACITY": 1}), journal)
        service.record_measurement(recorder, build_reading(**normal_reading))

        with pytest.raises(CapacityExceededError):
            service.record_measurement(recorder, build_reading(**normal_reading))

        db = session_factory()
        try:
            assert db.query(MeasurementRecord).count() == 1
        finally:
            db.close()

    def test_database_failure_leaves_store_untouched(self, journal, recorder, normal_reading, monkeypatch):
        service = build_monitoring_service(settings, journal)

        class BrokenSession:
            def add(self, row):
                pass

            def commit(self):
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))

            def rollback(self):
                pass

            def close(self):
                pass

        monkeypatch.setattr(journal, "db_session_factory", BrokenSession)

        with pytest.raises(PersistenceError):
            service.record_measurement(recorder, build_reading(**normal_reading))

        assert service.get_measurement_count() == 0
        assert service.get_measurement(0) is None
        assert service.get_pond_measurements(1) == []


class TestReplay:

    def test_restart_restores_everything(self, journal, recorder, admin, normal_reading, critical_reading):
        first = build_monitoring_service(settings, journal)
        first.record_measurement(recorder, build_reading(**normal_reading))
        first.record_measurement(recorder, build_reading(**critical_reading))
        first.record_measurement(recorder, build_reading(**dict(normal_reading, pond_id=5)))
        bounds = first.get_parameter_thresholds().model_dump()
        first.update_thresholds(admin, **dict(bounds, max_nitrate=100))

        second = build_monitoring_service(settings, journal)

        assert second.get_measurement_count() == 3
        assert second.get_pond_measurements(1) == [0, 1]
        assert second.get_critical_measurements(1) == [1]
        assert second.get_pond_measurements(5) == [2]
        assert second.get_parameter_thresholds().max_nitrate == 100
        assert second.get_measurement(0) == first.get_measurement(0)
        # normal reading was recorded before the nitrate change; its flag stays
        assert second.get_measurement(0).is_critical is False

    def test_clock_resumes_after_replay(self, journal, recorder, normal_reading):
        first = build_monitoring_service(settings, journal)
        first.record_measurement(recorder, build_reading(**normal_reading))
        first.record_measurement(recorder, build_reading(**normal_reading))
        last_height = first.get_measurement(1).recorded_at

        second = build_monitoring_service(settings, journal)
        measurement_id = second.record_measurement(recorder, build_reading(**normal_reading))
        assert measurement_id == 2
        assert second.get_measurement(measurement_id).recorded_at > last_height

    def test_empty_journal_uses_defaults(self, journal):
        service = build_monitoring_service(settings, journal)
        assert service.get_measurement_count() == 0
        assert service.get_parameter_thresholds().min_temperature == settings.DEFAULT_MIN_TEMPERATURE

    def test_without_journal_starts_empty(self):
        service = build_monitoring_service(settings)
        assert service.get_measurement_count() == 0
        assert service.get_measurement(0) is None


class TestThresholdJournal:

    def test_thresholds_round_trip(self, journal, admin):
        service = build_monitoring_service(settings, journal)
        bounds = service.get_parameter_thresholds().model_dump()
        updated = service.update_thresholds(admin, **dict(bounds, min_ph=95, max_ph=60))

        assert journal.load_thresholds() == updated

    def test_second_update_overwrites_row(self, journal, admin):
        service = build_monitoring_service(settings, journal)
        bounds = service.get_parameter_thresholds().model_dump()
        service.update_thresholds(admin, **dict(bounds, min_oxygen=40))
        service.update_thresholds(admin, **dict(bounds, min_oxygen=70))

        assert journal.load_thresholds().min_oxygen == 70

    def test_non_admin_update_is_not_journaled(self, journal):
        service = build_monitoring_service(settings, journal)
        bounds = service.get_parameter_thresholds().model_dump()

        with pytest.raises(AuthorizationError):
            service.update_thresholds(Principal(subject="station-1"), **bounds)

        assert journal.load_thresholds() is None
