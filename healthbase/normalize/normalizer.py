"""Turn raw HealthKit workout samples into normalized Activity records.

One RawWorkout in, one Activity out. Nothing here raises on bad data: a
record missing every optional field still yields a complete Activity with
the default "Workout" classification.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional, Union

from healthbase.models import Activity, RawWorkout
from healthbase.normalize.activity_types import classify
from healthbase.normalize.metrics import (
    AVG_HR_SOURCES,
    CADENCE_SOURCES,
    DISTANCE_SOURCES,
    ELEVATION_SOURCES,
    MAX_HR_SOURCES,
    POWER_SOURCES,
    active_calories,
    candidate_values,
    canonicalize_distance,
    derive_pace,
    extract_first_present,
    resolve_total_calories,
    round_half_up,
)

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a HealthKit ISO timestamp ("2024-05-11T06:12:00.000-0400")."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _epoch_ms(moment: Union[date, datetime, None]) -> int:
    if moment is None:
        return 0
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, time.min)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def _rounded_int(value: Optional[float]) -> Optional[int]:
    return int(round_half_up(value)) if value is not None else None


def normalize_workout(raw: RawWorkout, index: int = 0,
                      reference: Union[date, datetime, None] = None,
                      include_total_calories: bool = False) -> Activity:
    """Normalize a single workout.

    Args:
        raw: The parsed workout sample.
        index: Position in the fetched batch, used for fallback ids.
        reference: Moment used in fallback ids. Defaults to the workout start.
        include_total_calories: Also resolve total (active + basal) calories.
    """
    record = dict(raw.extras)
    record["distance"] = raw.distance
    metadata = raw.metadata

    mapping = classify(raw.activity_id, raw.activity_name)

    avg_hr = extract_first_present(candidate_values(record, metadata, AVG_HR_SOURCES))
    max_hr = extract_first_present(candidate_values(record, metadata, MAX_HR_SOURCES))

    raw_distance = extract_first_present(
        candidate_values(record, metadata, DISTANCE_SOURCES), positive_only=True
    )
    distance_m = canonicalize_distance(raw_distance)
    pace = derive_pace(distance_m, raw.duration_s)

    active_kcal = active_calories(raw.calories)
    total_kcal = None
    estimated = False
    if include_total_calories:
        total_kcal, estimated = resolve_total_calories(record, metadata, active_kcal, raw.duration_s)

    if raw.id:
        activity_id = raw.id
    else:
        moment = reference if reference is not None else parse_timestamp(raw.start)
        activity_id = f"workout-{_epoch_ms(moment)}-{index}"

    if index == 0:
        logger.debug("raw activity id=%r name=%r -> %s", raw.activity_id, raw.activity_name, mapping)
        if mapping.category in ("Running", "Cycling", "Walking", "Rowing"):
            logger.debug("raw distance %r -> %r m", raw_distance, distance_m)

    return Activity(
        id=activity_id,
        start_time=raw.start,
        duration_s=int(round_half_up(raw.duration_s)),
        category=mapping.category,
        subcategory=mapping.subcategory,
        display_name=mapping.display_name,
        type=mapping.type,
        active_calories=active_kcal,
        distance_m=distance_m,
        avg_pace_s_per_km=pace,
        elevation_gain_m=extract_first_present(candidate_values(record, metadata, ELEVATION_SOURCES)),
        avg_hr=_rounded_int(avg_hr),
        max_hr=_rounded_int(max_hr),
        avg_cadence=extract_first_present(candidate_values(record, metadata, CADENCE_SOURCES)),
        avg_power=extract_first_present(candidate_values(record, metadata, POWER_SOURCES)),
        raw_activity_id=raw.activity_id,
        raw_activity_name=raw.activity_name or None,
        total_calories=total_kcal,
        total_calories_estimated=estimated,
    )


def normalize_workouts(raws: Iterable[RawWorkout],
                       reference: Union[date, datetime, None] = None,
                       include_total_calories: bool = False) -> list[Activity]:
    """Normalize a fetched batch. Records are independent of each other."""
    return [
        normalize_workout(raw, index, reference=reference,
                          include_total_calories=include_total_calories)
        for index, raw in enumerate(raws)
    ]
