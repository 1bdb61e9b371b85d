"""
Criticality evaluation
Pure checks of a reading against a ThresholdConfig snapshot
"""

from typing import List

from aquamonitor.core.thresholds import ThresholdConfig


def find_violations(
    temperature: int,
    ph: int,
    dissolved_oxygen: int,
    ammonia: int,
    nitrite: int,
    nitrate: int,
    thresholds: ThresholdConfig,
) -> List[str]:
    """
    Name every bound the reading breaches

    Turbidity is recorded but never thresholded, so it is not an argument here.

    Returns:
        Breach names in a fixed order, e.g. ["temperature_low", "ammonia_high"]
    """
    violations = []

    if temperature < thresholds.min_temperature:
        violations.append("temperature_low")
    if temperature > thresholds.max_temperature:
        violations.append("temperature_high")
    if ph < thresholds.min_ph:
        violations.append("ph_low")
    if ph > thresholds.max_ph:
        violations.append("ph_high")
    if dissolved_oxygen < thresholds.min_oxygen:
        violations.append("oxygen_low")
    if ammonia > thresholds.max_ammonia:
        violations.append("ammonia_high")
    if nitrite > thresholds.max_nitrite:
        violations.append("nitrite_high")
    if nitrate > thresholds.max_nitrate:
        violations.append("nitrate_high")

    return violations


def evaluate_criticality(
    temperature: int,
    ph: int,
    dissolved_oxygen: int,
    ammonia: int,
    nitrite: int,
    nitrate: int,
    thresholds: ThresholdConfig,
) -> bool:
    """True when any parameter falls outside its safe bound"""
    return (
        temperature < thresholds.min_temperature
        or temperature > thresholds.max_temperature
        or ph < thresholds.min_ph
        or ph > thresholds.max_ph
        or dissolved_oxygen < thresholds.min_oxygen
        or ammonia > thresholds.max_ammonia
        or nitrite > thresholds.max_nitrite
        or nitrate > thresholds.max_nitrate
    )
