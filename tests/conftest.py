"""Root-level pytest fixtures for the aquamonitor test suite.

Environment variables are set before any aquamonitor import so the
module-level Settings instance picks them up.
"""

import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENABLE_JOURNAL", "false")
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.mkdtemp(), 'aquamonitor-test.db')}"
)

import pytest
from sqlalchemy.orm import sessionmaker

from aquamonitor.config import settings
from aquamonitor.core.measurement_store import MeasurementStore, RecordingContext
from aquamonitor.core.security import ROLE_ADMIN, Principal, create_principal_token
from aquamonitor.core.thresholds import ThresholdConfig, ThresholdRegistry
from aquamonitor.database import Base, make_engine
from aquamonitor.services.measurement_journal import MeasurementJournal
from aquamonitor.services.monitoring import MonitoringService


# =============================================================================
# Reading Fixtures
# =============================================================================

@pytest.fixture
def normal_reading():
    """Reading inside every default threshold (25.0 °C, pH 7.2, DO 8.5 ...)."""
    return dict(
        pond_id=1,
        temperature=250,
        ph=72,
        dissolved_oxygen=85,
        ammonia=25,
        nitrite=5,
        nitrate=200,
        turbidity=12,
        weather="sunny",
        notes="routine check",
    )


@pytest.fixture
def critical_reading(normal_reading):
    """Same reading but at 10.0 °C, below the default minimum temperature."""
    return dict(normal_reading, temperature=100)


@pytest.fixture
def context():
    return RecordingContext(recorder="station-1", recorded_at=1)


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def default_thresholds():
    return ThresholdConfig(**settings.default_thresholds())


@pytest.fixture
def registry(default_thresholds):
    return ThresholdRegistry(default_thresholds)


@pytest.fixture
def store(registry):
    return MeasurementStore(registry)


@pytest.fixture
def make_store(registry):
    """Factory for stores with small index capacities."""
    def _make(pond_capacity=1000, critical_capacity=100, on_commit=None):
        return MeasurementStore(
            registry,
            pond_capacity=pond_capacity,
            critical_capacity=critical_capacity,
            on_commit=on_commit,
        )
    return _make


@pytest.fixture
def service(store, registry):
    return MonitoringService(store, registry)


@pytest.fixture
def recorder():
    return Principal(subject="station-1")


@pytest.fixture
def admin():
    return Principal(subject="operator", role=ROLE_ADMIN)


# =============================================================================
# Persistence Fixtures
# =============================================================================

@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file."""
    engine = make_engine(f"sqlite:///{tmp_path / 'journal.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def journal(session_factory):
    return MeasurementJournal(session_factory)


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def client(service):
    """TestClient whose application uses the in-memory service fixture."""
    from fastapi.testclient import TestClient
    from aquamonitor.main import app

    app.state.monitoring = service
    with TestClient(app) as test_client:
        yield test_client
    app.state.monitoring = None


@pytest.fixture
def recorder_headers():
    return {"Authorization": f"Bearer {create_principal_token('station-1')}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_principal_token('operator', role=ROLE_ADMIN)}"}
