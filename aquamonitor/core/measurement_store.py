"""
Measurement store
Owns the measurement records, the id counter and both per-pond indices, and
runs the recording transaction over them as one atomic step.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from aquamonitor.core.bounded_index import BoundedIndex
from aquamonitor.core.criticality import evaluate_criticality, find_violations
from aquamonitor.core.exceptions import CapacityExceededError, InvalidInputError
from aquamonitor.core.thresholds import ThresholdRegistry

logger = logging.getLogger(__name__)

WEATHER_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500
POND_INDEX_CAPACITY = 1000
CRITICAL_INDEX_CAPACITY = 100


class MeasurementReading(BaseModel):
    """
    Caller-supplied part of a measurement
    Parameters are fixed-point integers (see config.PARAMETER_UNITS).
    """
    pond_id: int = Field(..., strict=True, description="Pond ID")
    temperature: int = Field(..., strict=True, description="Temperature in 0.1 °C")
    ph: int = Field(..., strict=True, description="pH in 0.1 units")
    dissolved_oxygen: int = Field(..., ge=0, strict=True, description="Dissolved oxygen in 0.1 mg/L")
    ammonia: int = Field(..., ge=0, strict=True, description="Ammonia in 0.01 mg/L")
    nitrite: int = Field(..., ge=0, strict=True, description="Nitrite in 0.01 mg/L")
    nitrate: int = Field(..., ge=0, strict=True, description="Nitrate in 0.1 mg/L")
    turbidity: int = Field(..., ge=0, strict=True, description="Turbidity in NTU")
    weather: str = Field("", max_length=WEATHER_MAX_LENGTH)
    notes: str = Field("", max_length=NOTES_MAX_LENGTH)

    class Config:
        frozen = True


class Measurement(MeasurementReading):
    """Stored measurement; created once by MeasurementStore.record and never changed"""
    id: int = Field(..., ge=0)
    recorder: str
    recorded_at: int
    is_critical: bool
    violations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecordingContext:
    """Who is recording and when, supplied by the calling environment"""
    recorder: str
    recorded_at: int

    def stamp(self) -> int:
        return self.recorded_at


@dataclass(frozen=True)
class ClockedContext:
    """
    Recorder plus a clock that the store reads inside its critical section,
    so recorded-at values follow id order
    """
    recorder: str
    clock: Callable[[], int]

    def stamp(self) -> int:
        return self.clock()


@dataclass(frozen=True)
class PondCapacity:
    pond_id: int
    measurements: int
    measurement_capacity: int
    critical_measurements: int
    critical_capacity: int

    @property
    def measurements_remaining(self) -> int:
        return max(self.measurement_capacity - self.measurements, 0)

    @property
    def critical_remaining(self) -> int:
        return max(self.critical_capacity - self.critical_measurements, 0)


CommitHook = Callable[[Measurement], None]
Context = Union[RecordingContext, ClockedContext]


def build_reading(**values) -> MeasurementReading:
    """Validate raw reading values, raising InvalidInputError on the first problem"""
    try:
        return MeasurementReading(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        raise InvalidInputError(f"Invalid {field}: {error['msg']}", field=field) from e


class MeasurementStore:
    """
    Append-only measurement store

    A single lock guards the counter, the records and both indices. record()
    holds it for the whole transaction, readers take it briefly and get
    copies back, so nobody observes a half-applied measurement.
    """

    def __init__(
        self,
        thresholds: ThresholdRegistry,
        pond_capacity: int = POND_INDEX_CAPACITY,
        critical_capacity: int = CRITICAL_INDEX_CAPACITY,
        on_commit: Optional[CommitHook] = None,
    ):
        self.thresholds = thresholds
        self._on_commit = on_commit
        self._records: Dict[int, Measurement] = {}
        self._pond_index = BoundedIndex(pond_capacity, name="pond measurement index")
        self._critical_index = BoundedIndex(critical_capacity, name="critical measurement index")
        self._counter = 0
        self._lock = threading.Lock()

    def record(
        self,
        context: Context,
        pond_id: int,
        temperature: int,
        ph: int,
        dissolved_oxygen: int,
        ammonia: int,
        nitrite: int,
        nitrate: int,
        turbidity: int,
        weather: str = "",
        notes: str = "",
    ) -> int:
        reading = build_reading(
            pond_id=pond_id,
            temperature=temperature,
            ph=ph,
            dissolved_oxygen=dissolved_oxygen,
            ammonia=ammonia,
            nitrite=nitrite,
            nitrate=nitrate,
            turbidity=turbidity,
            weather=weather,
            notes=notes,
        )
        return self.record_reading(context, reading)

    def record_reading(self, context: Context, reading: MeasurementReading) -> int:
        """
        Store a validated reading and index it

        The recorded-at value is read from the context under the store lock,
        after the capacity check, so a rejected reading never consumes a tick.

        Raises:
            CapacityExceededError: either index for the pond is full; nothing
                is stored and the counter does not move
            Whatever the commit hook raises, with the same guarantee
        """
        with self._lock:
            measurement_id = self._counter
            snapshot = self.thresholds.get()
            params = (
                reading.temperature,
                reading.ph,
                reading.dissolved_oxygen,
                reading.ammonia,
                reading.nitrite,
                reading.nitrate,
            )
            is_critical = evaluate_criticality(*params, snapshot)

            self._check_room(reading.pond_id, is_critical)

            measurement = Measurement(
                **reading.model_dump(),
                id=measurement_id,
                recorder=context.recorder,
                recorded_at=context.stamp(),
                is_critical=is_critical,
                violations=tuple(find_violations(*params, snapshot)),
            )

            if self._on_commit is not None:
                self._on_commit(measurement)

            self._apply(measurement)
            self._counter += 1

        logger.info(
            f"Recorded measurement {measurement_id} for pond {reading.pond_id} "
            f"(critical={is_critical})"
        )
        return measurement_id

    def _check_room(self, pond_id: int, is_critical: bool) -> None:
        for index, needed in ((self._pond_index, True), (self._critical_index, is_critical)):
            if needed and not index.has_room(pond_id):
                logger.warning(f"Rejected measurement for pond {pond_id}: {index.name} is full")
                raise CapacityExceededError(pond_id, index.capacity, index.name)

    def _apply(self, measurement: Measurement) -> None:
        """Write the record and both index entries, undoing all of it on failure"""
        pond_id = measurement.pond_id
        self._records[measurement.id] = measurement
        try:
            self._pond_index.append(pond_id, measurement.id)
            try:
                if measurement.is_critical:
                    self._critical_index.append(pond_id, measurement.id)
            except Exception:
                self._pond_index.discard_last(pond_id, measurement.id)
                raise
        except Exception:
            del self._records[measurement.id]
            raise

    def get(self, measurement_id: int) -> Optional[Measurement]:
        with self._lock:
            return self._records.get(measurement_id)

    def get_pond_measurement_ids(self, pond_id: int) -> List[int]:
        with self._lock:
            return self._pond_index.get(pond_id)

    def get_critical_measurement_ids(self, pond_id: int) -> List[int]:
        with self._lock:
            return self._critical_index.get(pond_id)

    def count(self) -> int:
        with self._lock:
            return self._counter

    def pond_capacity(self, pond_id: int) -> PondCapacity:
        with self._lock:
            return PondCapacity(
                pond_id=pond_id,
                measurements=self._pond_index.size(pond_id),
                measurement_capacity=self._pond_index.capacity,
                critical_measurements=self._critical_index.size(pond_id),
                critical_capacity=self._critical_index.capacity,
            )

    def restore(self, measurements: Iterable[Measurement]) -> int:
        """
        Rebuild state from previously committed measurements

        Only valid on an empty store. Measurements must arrive in id order
        starting at 0; critical flags are taken as stored, never recomputed.

        Returns:
            Number of measurements restored
        """
        with self._lock:
            if self._counter:
                raise RuntimeError("restore() requires an empty store")

            for measurement in measurements:
                if measurement.id != self._counter:
                    raise ValueError(
                        f"Journal gap: expected measurement {self._counter}, got {measurement.id}"
                    )
                self._check_room(measurement.pond_id, measurement.is_critical)
                self._apply(measurement)
                self._counter += 1

            restored = self._counter

        logger.info(f"Restored {restored} measurements")
        return restored
