"""
Measurement journal
Writes committed measurements and threshold changes to the database and
replays them when the service starts
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from aquamonitor.core.exceptions import PersistenceError
from aquamonitor.core.measurement_store import Measurement
from aquamonitor.core.thresholds import ThresholdConfig
from aquamonitor.models.measurement import MeasurementRecord, ThresholdSettings

logger = logging.getLogger(__name__)

THRESHOLD_ROW_ID = 1
THRESHOLD_FIELDS = (
    "min_temperature",
    "max_temperature",
    "min_ph",
    "max_ph",
    "min_oxygen",
    "max_ammonia",
    "max_nitrite",
    "max_nitrate",
)


class MeasurementJournal:
    """Durable journal backed by a SQLAlchemy session factory"""

    def __init__(self, db_session_factory):
        self.db_session_factory = db_session_factory

    def persist_measurement(self, measurement: Measurement) -> None:
        """
        Insert one measurement row
        Raises PersistenceError after rolling back if the database refuses it
        """
        db = self.db_session_factory()
        try:
            db.add(MeasurementRecord(
                id=measurement.id,
                pond_id=measurement.pond_id,
                recorder=measurement.recorder,
                temperature=measurement.temperature,
                ph=measurement.ph,
                dissolved_oxygen=measurement.dissolved_oxygen,
                ammonia=measurement.ammonia,
                nitrite=measurement.nitrite,
                nitrate=measurement.nitrate,
                turbidity=measurement.turbidity,
                weather=measurement.weather,
                notes=measurement.notes,
                recorded_at=measurement.recorded_at,
                is_critical=measurement.is_critical,
                violations=list(measurement.violations),
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to journal measurement {measurement.id}: {e}", exc_info=True)
            raise PersistenceError(f"Could not store measurement {measurement.id}") from e
        finally:
            db.close()

    def persist_thresholds(self, config: ThresholdConfig) -> None:
        """Upsert the single thresholds row"""
        db = self.db_session_factory()
        try:
            row = db.get(ThresholdSettings, THRESHOLD_ROW_ID)
            if row is None:
                row = ThresholdSettings(id=THRESHOLD_ROW_ID)
                db.add(row)
            for field in THRESHOLD_FIELDS:
                setattr(row, field, getattr(config, field))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to journal thresholds: {e}", exc_info=True)
            raise PersistenceError("Could not store thresholds") from e
        finally:
            db.close()

    def load_measurements(self) -> List[Measurement]:
        """All journaled measurements in id order"""
        db = self.db_session_factory()
        try:
            rows = db.query(MeasurementRecord).order_by(MeasurementRecord.id).all()
            return [
                Measurement(
                    id=row.id,
                    pond_id=row.pond_id,
                    recorder=row.recorder,
                    temperature=row.temperature,
                    ph=row.ph,
                    dissolved_oxygen=row.dissolved_oxygen,
                    ammonia=row.ammonia,
                    nitrite=row.nitrite,
                    nitrate=row.nitrate,
                    turbidity=row.turbidity,
                    weather=row.weather,
                    notes=row.notes,
                    recorded_at=row.recorded_at,
                    is_critical=row.is_critical,
                    violations=tuple(row.violations or ()),
                )
                for row in rows
            ]
        finally:
            db.close()

    def load_thresholds(self) -> Optional[ThresholdConfig]:
        db = self.db_session_factory()
        try:
            row = db.get(ThresholdSettings, THRESHOLD_ROW_ID)
            if row is None:
                return None
            return ThresholdConfig(**{field: getattr(row, field) for field in THRESHOLD_FIELDS})
        finally:
            db.close()
