"""Numeric derivations for workout normalization.

Distance unit inference, pace, multi-source field extraction and calorie
totals. Every function here is total: bad input gives None, never an error.
"""

import math
import re
from typing import Iterable, Optional

METERS_PER_MILE = 1609.34
METERS_PER_KM = 1000.0

# Raw distances strictly inside this range are taken to be miles. HealthKit
# hands back whatever unit the device locale uses, with no unit tag.
MILES_RANGE = (0.5, 50.0)

# Rough resting burn used when a workout carries no total-energy figure
BASAL_KCAL_PER_MINUTE = 1.2

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Candidate keys, in priority order. ("metadata", key) reads the metadata
# mapping, (key,) a top-level field, (parent, key) a nested object field.
AVG_HR_SOURCES = (
    ("metadata", "HKAverageHeartRate"),
    ("averageHeartRate",),
    ("avgHeartRate",),
    ("heartRate",),
    ("metadata", "HKWorkoutAverageHeartRate"),
)
MAX_HR_SOURCES = (
    ("metadata", "HKMaximumHeartRate"),
    ("maxHeartRate",),
    ("maximumHeartRate",),
    ("metadata", "HKWorkoutMaximumHeartRate"),
)
DISTANCE_SOURCES = (
    ("distance",),
    ("metadata", "HKTotalDistance"),
    ("metadata", "HKDistance"),
    ("metadata", "HKDistanceWalkingRunning"),
    ("metadata", "HKWorkoutDistance"),
    ("metadata", "HKWorkoutTotalDistance"),
    ("metadata", "HKTotalDistanceWalkingRunning"),
    ("totalDistance",),
    ("distanceWalkingRunning",),
    ("distanceCycling",),
    ("distanceRunning",),
    ("distanceValue",),
    ("distanceInMeters",),
    ("distanceMeters",),
    ("totalDistanceWalkingRunning",),
    ("statistics", "distance"),
    ("statistics", "totalDistance"),
    ("metrics", "distance"),
    ("metrics", "totalDistance"),
)
ELEVATION_SOURCES = (
    ("metadata", "HKElevationAscended"),
    ("elevationAscended",),
    ("elevationGain",),
)
CADENCE_SOURCES = (
    ("metadata", "HKAverageCadence"),
    ("averageCadence",),
    ("avgCadence",),
)
POWER_SOURCES = (
    ("metadata", "HKAveragePower"),
    ("averagePower",),
    ("avgPower",),
)
TOTAL_ENERGY_SOURCES = (
    ("metadata", "HKTotalEnergyBurned"),
    ("totalEnergyBurned",),
    ("totalCalories",),
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positives (2.5 -> 3), unlike round().

    Values too large to scale are already whole at that precision and come
    back unchanged, as do infinities.
    """
    scale = 10 ** digits
    try:
        scaled = value * scale + 0.5
    except OverflowError:
        return value
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / scale


def to_number(value) -> Optional[float]:
    """Coerce a number or numeric string to a finite float, else None.

    Strings are read like JavaScript's parseFloat: the leading numeric part
    counts ("142 bpm" -> 142.0) and trailing text is ignored.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


def extract_first_present(candidates: Iterable, positive_only: bool = False) -> Optional[float]:
    """Return the first candidate that parses to a finite number.

    None, NaN, booleans and non-numeric strings count as missing and the
    scan moves on to the next candidate.
    """
    for candidate in candidates:
        number = to_number(candidate)
        if number is None:
            continue
        if positive_only and number <= 0:
            continue
        return number
    return None


def candidate_values(record: dict, metadata: dict, sources) -> list:
    """Resolve a source list against a workout's fields and metadata."""
    values = []
    for path in sources:
        if path[0] == "metadata":
            values.append(metadata.get(path[1]))
        elif len(path) == 1:
            values.append(record.get(path[0]))
        else:
            parent = record.get(path[0])
            values.append(parent.get(path[1]) if isinstance(parent, dict) else None)
    return values


def canonicalize_distance(raw_distance) -> Optional[float]:
    """Convert a raw HealthKit distance of unknown unit to meters.

    Values strictly between 0.5 and 50 are assumed to be miles. A short
    indoor session logged in meters inside that range gets misread as miles;
    there is no unit tag to tell them apart.
    """
    value = to_number(raw_distance)
    if value is None or value <= 0:
        return None
    low, high = MILES_RANGE
    if low < value < high:
        return value * METERS_PER_MILE
    return value


def derive_pace(distance_m, duration_s) -> Optional[float]:
    """Average pace in seconds per km, rounded to 2 decimals."""
    distance = to_number(distance_m)
    duration = to_number(duration_s)
    if not distance or distance <= 0 or not duration or duration <= 0:
        return None
    pace = duration * METERS_PER_KM / distance
    if not math.isfinite(pace):
        return None
    return round_half_up(pace, 2)


def active_calories(raw_calories) -> int:
    value = to_number(raw_calories)
    if value is None or value <= 0:
        return 0
    return int(round_half_up(value))


def estimate_total_calories(active_kcal: int, duration_s) -> int:
    """Active calories plus an estimated basal burn of 1.2 kcal/min.

    An approximation, not a measurement.
    """
    duration = to_number(duration_s) or 0.0
    return active_kcal + int(round_half_up(duration / 60 * BASAL_KCAL_PER_MINUTE))


def resolve_total_calories(record: dict, metadata: dict, active_kcal: int,
                           duration_s) -> tuple[int, bool]:
    """Total calories for a workout and whether the figure is estimated.

    Explicit total-energy fields win; zero or missing values fall through to
    the basal estimate.
    """
    explicit = extract_first_present(
        candidate_values(record, metadata, TOTAL_ENERGY_SOURCES), positive_only=True
    )
    if explicit is not None:
        return int(round_half_up(explicit)), False
    return estimate_total_calories(active_kcal, duration_s), True
