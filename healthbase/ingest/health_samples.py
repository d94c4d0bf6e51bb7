"""Daily health summaries from a JSON export of HealthKit samples.

The export maps a sample kind to the list that react-native-health returned
for it, e.g.::

    {"steps": [{"value": 412, "startDate": "...", "endDate": "..."}],
     "protein": [...], "sleep": [...]}

Every aggregation reads one local calendar day. Sums treat unreadable values
as 0. Optional sections come back as None when the day has no samples of
that kind.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from healthbase.config import get_health_export_path
from healthbase.ingest.healthkit_export import (
    compute_file_hash,
    day_window,
    local_time,
    read_json_export,
)
from healthbase.ingest.healthkit_sync import get_activities_for_date
from healthbase.models import (
    ActivityMetrics,
    BodyMeasurements,
    DailyHealthData,
    DailySteps,
    EnergyData,
    HeartRateData,
    MacroIntake,
    SleepData,
)
from healthbase.normalize.metrics import round_half_up, to_number
from healthbase.normalize.normalizer import parse_timestamp

logger = logging.getLogger(__name__)

STEPS = "steps"
ENERGY_CONSUMED = "energyConsumed"
PROTEIN = "protein"
CARBOHYDRATES = "carbohydrates"
TOTAL_FAT = "totalFat"
ACTIVE_ENERGY = "activeEnergyBurned"
BASAL_ENERGY = "basalEnergyBurned"
WATER = "water"
SLEEP = "sleep"
WEIGHT = "weight"
HEIGHT = "height"
BMI = "bmi"
BODY_FAT = "bodyFatPercentage"
FLIGHTS_CLIMBED = "flightsClimbed"
EXERCISE_TIME = "appleExerciseTime"
STAND_TIME = "appleStandTime"
HEART_RATE = "heartRate"
RESTING_HEART_RATE = "restingHeartRate"
WALKING_HEART_RATE = "walkingHeartRateAverage"
MINDFUL_SESSION = "mindfulSession"

SAMPLE_KINDS = (
    STEPS, ENERGY_CONSUMED, PROTEIN, CARBOHYDRATES, TOTAL_FAT, ACTIVE_ENERGY,
    BASAL_ENERGY, WATER, SLEEP, WEIGHT, HEIGHT, BMI, BODY_FAT, FLIGHTS_CLIMBED,
    EXERCISE_TIME, STAND_TIME, HEART_RATE, RESTING_HEART_RATE, WALKING_HEART_RATE,
    MINDFUL_SESSION,
)

# Sleep analysis values: 0 in bed, 1 asleep
SLEEP_ASLEEP_VALUES = (1, "ASLEEP")

MINUTES_PER_DAY = 1440
HOURS_PER_DAY = 24


@dataclass
class HealthSample:
    value: Any
    start: datetime
    end: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> Optional["HealthSample"]:
        """Parse a {value, startDate, endDate} sample. None without a usable start."""
        start = local_time(parse_timestamp(data.get("startDate")))
        if start is None:
            return None
        return cls(
            value=data.get("value"),
            start=start,
            end=local_time(parse_timestamp(data.get("endDate"))),
        )

    @property
    def number(self) -> float:
        """Numeric value, 0 when unreadable."""
        return to_number(self.value) or 0.0


@dataclass
class HealthExport:
    samples: dict[str, list[HealthSample]] = field(default_factory=dict)
    file_path: str = ""
    file_hash: str = ""
    skipped: int = 0

    def kind(self, name: str) -> list[HealthSample]:
        return self.samples.get(name, [])


def load_health_export(file_path) -> HealthExport:
    """Read a health sample export.

    Raises FileNotFoundError for a missing file and ValueError when the file
    isn't a JSON object. Unknown kinds are ignored; samples without a
    parseable startDate are counted in ``skipped``.
    """
    path = Path(file_path).expanduser()
    payload = read_json_export(path, "Health export")
    export = parse_health_payload(payload)
    export.file_path = str(path)
    export.file_hash = compute_file_hash(path)
    return export


def parse_health_payload(payload) -> HealthExport:
    if not isinstance(payload, dict):
        raise ValueError("Health export must be an object mapping sample kinds to lists")

    export = HealthExport()
    for kind in SAMPLE_KINDS:
        raw_samples = payload.get(kind)
        if raw_samples is None:
            continue
        if not isinstance(raw_samples, list):
            logger.warning("Ignoring %s: expected a list, got %s", kind, type(raw_samples).__name__)
            continue
        parsed = []
        for raw in raw_samples:
            sample = HealthSample.from_dict(raw) if isinstance(raw, dict) else None
            if sample is None:
                export.skipped += 1
                continue
            parsed.append(sample)
        parsed.sort(key=lambda s: s.start)
        export.samples[kind] = parsed

    unknown = sorted(set(payload) - set(SAMPLE_KINDS))
    if unknown:
        logger.debug("Unknown sample kinds in health export: %s", ", ".join(unknown))
    return export


def _on_day(samples: list[HealthSample], day: date) -> list[HealthSample]:
    start, end = day_window(day)
    return [s for s in samples if start <= s.start <= end]


def _up_to_day(samples: list[HealthSample], day: date) -> list[HealthSample]:
    _, end = day_window(day)
    return [s for s in samples if s.start <= end]


def _total(values) -> float:
    """Sum of values. A total that overflows counts as unreadable (0)."""
    total = sum(values)
    return total if math.isfinite(total) else 0.0


def _sum(samples: list[HealthSample]) -> float:
    return _total(s.number for s in samples)


def _rounded(value: float) -> int:
    return int(round_half_up(value)) if math.isfinite(value) else 0


def _latest_value(samples: list[HealthSample]) -> Optional[float]:
    """Value of the most recent sample, None when it is unreadable or absent."""
    if not samples:
        return None
    return to_number(samples[-1].value)


def steps_for_date(export: HealthExport, day: date) -> DailySteps:
    """Step total and 24 hourly buckets by local start hour."""
    steps = DailySteps()
    for sample in _on_day(export.kind(STEPS), day):
        count = _rounded(sample.number)
        steps.hourly[sample.start.hour] += count
        steps.total += count
    return steps


def macros_for_date(export: HealthExport, day: date) -> MacroIntake:
    """Consumed calories and macros in grams, each summed then rounded."""
    return MacroIntake(
        calories=_rounded(_sum(_on_day(export.kind(ENERGY_CONSUMED), day))),
        protein=_rounded(_sum(_on_day(export.kind(PROTEIN), day))),
        carbs=_rounded(_sum(_on_day(export.kind(CARBOHYDRATES), day))),
        fats=_rounded(_sum(_on_day(export.kind(TOTAL_FAT), day))),
    )


def energy_for_date(export: HealthExport, day: date) -> Optional[EnergyData]:
    active = _on_day(export.kind(ACTIVE_ENERGY), day)
    basal = _on_day(export.kind(BASAL_ENERGY), day)
    if not active and not basal:
        return None
    active_kcal = _sum(active)
    basal_kcal = _sum(basal)
    return EnergyData(
        active=_rounded(active_kcal),
        basal=_rounded(basal_kcal),
        total=_rounded(active_kcal + basal_kcal),
    )


def water_for_date(export: HealthExport, day: date) -> Optional[float]:
    """Water intake in liters, rounded to 2 decimals."""
    samples = _on_day(export.kind(WATER), day)
    if not samples:
        return None
    return round_half_up(_sum(samples), 2)


def sleep_for_date(export: HealthExport, day: date) -> Optional[SleepData]:
    """Minutes asleep and minutes in bed, from sample start/end times.

    Every sample counts toward time in bed; only asleep-valued ones count
    as sleep.
    """
    samples = _on_day(export.kind(SLEEP), day)
    if not samples:
        return None
    asleep = 0.0
    in_bed = 0.0
    for sample in samples:
        if sample.end is None:
            continue
        minutes = (sample.end - sample.start).total_seconds() / 60
        if not isinstance(sample.value, bool) and sample.value in SLEEP_ASLEEP_VALUES:
            asleep += minutes
        in_bed += minutes
    return SleepData(asleep_min=_rounded(asleep), in_bed_min=_rounded(in_bed))


def body_measurements_for_date(export: HealthExport, day: date) -> Optional[BodyMeasurements]:
    """Latest weight, height, BMI and body fat recorded on or before ``day``.

    Weights above 1000 are taken as grams and heights above 3 as centimeters.
    """
    weight = _latest_value(_up_to_day(export.kind(WEIGHT), day))
    if weight is not None and weight > 1000:
        weight = weight / 1000
    height = _latest_value(_up_to_day(export.kind(HEIGHT), day))
    if height is not None and height > 3:
        height = height / 100
    body = BodyMeasurements(
        weight_kg=weight,
        height_m=height,
        bmi=_latest_value(_up_to_day(export.kind(BMI), day)),
        body_fat_pct=_latest_value(_up_to_day(export.kind(BODY_FAT), day)),
    )
    if body == BodyMeasurements():
        return None
    return body


def _minutes(sample: HealthSample) -> float:
    # values past a day's worth of minutes are seconds
    value = sample.number
    return value / 60 if value > MINUTES_PER_DAY else value


def _hours(sample: HealthSample) -> float:
    # values past a day's worth of hours are minutes
    value = sample.number
    return value / 60 if value > HOURS_PER_DAY else value


def activity_metrics_for_date(export: HealthExport, day: date) -> Optional[ActivityMetrics]:
    """Flights climbed, exercise minutes and stand hours."""
    floors = _on_day(export.kind(FLIGHTS_CLIMBED), day)
    exercise = _on_day(export.kind(EXERCISE_TIME), day)
    stand = _on_day(export.kind(STAND_TIME), day)
    if not (floors or exercise or stand):
        return None
    return ActivityMetrics(
        floors_climbed=_rounded(_sum(floors)) if floors else None,
        exercise_min=_rounded(_total(_minutes(s) for s in exercise)) if exercise else None,
        stand_hours=round_half_up(_total(_hours(s) for s in stand), 1) if stand else None,
    )


def heart_rate_for_date(export: HealthExport, day: date) -> Optional[HeartRateData]:
    """Day average over all heart-rate samples, plus the latest resting and walking averages."""
    samples = _on_day(export.kind(HEART_RATE), day)
    average = _rounded(_sum(samples) / len(samples)) if samples else None

    resting = _latest_value(_on_day(export.kind(RESTING_HEART_RATE), day))
    walking = _latest_value(_on_day(export.kind(WALKING_HEART_RATE), day))

    heart_rate = HeartRateData(
        average=average,
        resting=_rounded(resting) if resting is not None else None,
        walking_average=_rounded(walking) if walking is not None else None,
    )
    if heart_rate == HeartRateData():
        return None
    return heart_rate


def mindfulness_for_date(export: HealthExport, day: date) -> Optional[int]:
    samples = _on_day(export.kind(MINDFUL_SESSION), day)
    if not samples:
        return None
    return _rounded(_total(_minutes(s) for s in samples))


def summarize_day(export: HealthExport, day: date, activities=None) -> DailyHealthData:
    """Build the full daily summary from an already loaded export."""
    return DailyHealthData(
        date=day.isoformat(),
        steps=steps_for_date(export, day),
        macros=macros_for_date(export, day),
        activities=list(activities or []),
        energy=energy_for_date(export, day),
        water_l=water_for_date(export, day),
        sleep=sleep_for_date(export, day),
        body=body_measurements_for_date(export, day),
        activity_metrics=activity_metrics_for_date(export, day),
        heart_rate=heart_rate_for_date(export, day),
        mindfulness_min=mindfulness_for_date(export, day),
    )


def get_health_data_for_date(config: dict, day: date, file_path=None,
                             workouts_file=None) -> DailyHealthData:
    """Daily summary for ``day``: health samples plus that day's workouts."""
    path = Path(file_path) if file_path else get_health_export_path(config)
    export = load_health_export(path)
    activities = get_activities_for_date(config, day, file_path=workouts_file)
    logger.debug("health summary for %s: %d sample kind(s), %d activit(ies)",
                 day.isoformat(), len(export.samples), len(activities))
    return summarize_day(export, day, activities)
