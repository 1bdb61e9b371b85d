"""
Measurement journal models - Durable copy of committed measurements and thresholds
Rows are written once the in-memory transaction is known to succeed and are never updated
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index, JSON
from sqlalchemy.sql import func

from aquamonitor.database import Base


class MeasurementRecord(Base):
    """
    One committed measurement
    Parameter columns keep the fixed-point integer encoding
    """
    __tablename__ = "measurements"

    # Assigned by MeasurementStore, not by the database
    id = Column(Integer, primary_key=True, autoincrement=False)
    pond_id = Column(Integer, nullable=False, index=True)
    recorder = Column(String(255), nullable=False)

    # Water quality parameters
    temperature = Column(Integer, nullable=False, comment="Temperature in 0.1 Celsius")
    ph = Column(Integer, nullable=False, comment="pH in 0.1 units")
    dissolved_oxygen = Column(Integer, nullable=False, comment="Dissolved oxygen in 0.1 mg/L")
    ammonia = Column(Integer, nullable=False, comment="Ammonia in 0.01 mg/L")
    nitrite = Column(Integer, nullable=False, comment="Nitrite in 0.01 mg/L")
    nitrate = Column(Integer, nullable=False, comment="Nitrate in 0.1 mg/L")
    turbidity = Column(Integer, nullable=False, comment="Turbidity in NTU")

    weather = Column(String(100), nullable=False, default="")
    notes = Column(String(500), nullable=False, default="")

    # Logical timestamp and classification
    recorded_at = Column(Integer, nullable=False)
    is_critical = Column(Boolean, nullable=False, default=False)
    violations = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index('idx_pond_measurement', 'pond_id', 'id'),
        Index('idx_pond_critical', 'pond_id', 'is_critical'),
    )

    def __repr__(self):
        return f"<MeasurementRecord(id={self.id}, pond_id={self.pond_id}, critical={self.is_critical})>"


class ThresholdSettings(Base):
    """
    Current parameter thresholds (single row, id=1)
    """
    __tablename__ = "parameter_thresholds"

    id = Column(Integer, primary_key=True)
    min_temperature = Column(Integer, nullable=False)
    max_temperature = Column(Integer, nullable=False)
    min_ph = Column(Integer, nullable=False)
    max_ph = Column(Integer, nullable=False)
    min_oxygen = Column(Integer, nullable=False)
    max_ammonia = Column(Integer, nullable=False)
    max_nitrite = Column(Integer, nullable=False)
    max_nitrate = Column(Integer, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ThresholdSettings(temp=[{self.min_temperature}, {self.max_temperature}])>"
