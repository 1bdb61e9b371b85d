"""Tests for the threshold registry."""

import pytest
from pydantic import ValidationError

from aquamonitor.core.exceptions import InvalidInputError
from aquamonitor.core.thresholds import ThresholdConfig, ThresholdRegistry


NEW_BOUNDS = dict(
    min_temperature=180,
    max_temperature=300,
    min_ph=70,
    max_ph=85,
    min_oxygen=60,
    max_ammonia=20,
    max_nitrite=5,
    max_nitrate=400,
)


class TestDefaults:

    def test_default_values(self, registry):
        config = registry.get()
        assert (config.min_temperature, config.max_temperature) == (150, 320)
        assert (config.min_ph, config.max_ph) == (65, 90)
        assert config.min_oxygen == 50
        assert config.max_ammonia == 50
        assert config.max_nitrite == 10
        assert config.max_nitrate == 500

    def test_snapshot_is_frozen(self, registry):
        with pytest.raises(ValidationError):
            registry.get().min_temperature = 0


class TestUpdate:

    def test_get_returns_last_update(self, registry):
        registry.update(**NEW_BOUNDS)
        assert registry.get().model_dump() == NEW_BOUNDS

    def test_inconsistent_bounds_are_accepted(self, registry):
        """min > max is stored untouched; no cross-field validation."""
        inverted = dict(NEW_BOUNDS, min_temperature=350, max_temperature=100, min_ph=95, max_ph=10)
        registry.update(**inverted)
        config = registry.get()
        assert config.min_temperature == 350
        assert config.max_temperature == 100
        assert config.min_ph == 95
        assert config.max_ph == 10

    def test_negative_unsigned_bound_is_invalid_input(self, registry):
        before = registry.get()
        with pytest.raises(InvalidInputError):
            registry.update(**dict(NEW_BOUNDS, max_ammonia=-1))
        assert registry.get() == before

    def test_earlier_snapshots_are_unchanged(self, registry):
        before = registry.get()
        registry.update(**NEW_BOUNDS)
        assert before.min_temperature == 150

    def test_listener_sees_new_config(self, default_thresholds):
        seen = []
        registry = ThresholdRegistry(default_thresholds, on_update=seen.append)
        registry.update(**NEW_BOUNDS)
        assert seen == [ThresholdConfig(**NEW_BOUNDS)]

    def test_failing_listener_keeps_old_snapshot(self, default_thresholds):
        def refuse(config):
            raise RuntimeError("storage down")

        registry = ThresholdRegistry(default_thresholds, on_update=refuse)
        with pytest.raises(RuntimeError):
            registry.update(**NEW_BOUNDS)
        assert registry.get() == default_thresholds

