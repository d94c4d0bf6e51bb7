from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Union

from healthbase.normalize.metrics import to_number

ActivityId = Union[int, float, str]

# Top-level keys of an anchored workout sample that map onto RawWorkout fields.
# Everything else is kept in RawWorkout.extras as alternate-shape fields.
_KNOWN_KEYS = {
    "id", "activityId", "activityName", "start", "end", "duration",
    "calories", "distance", "metadata",
}


def _id_text(value) -> Optional[str]:
    """Text form of a scalar id. Integers too long to print are dropped."""
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    try:
        return str(value)
    except ValueError:
        return None


@dataclass
class RawWorkout:
    id: Optional[str] = None
    activity_id: Optional[ActivityId] = None
    activity_name: Optional[str] = None
    start: str = ""
    end: Optional[str] = None
    duration_s: float = 0.0
    calories: Optional[float] = None
    distance: Any = None
    metadata: dict = field(default_factory=dict)
    extras: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "RawWorkout":
        """Build a RawWorkout from a react-native-health workout sample.

        Malformed values degrade to absent fields; this never raises for a dict.
        """
        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        activity_id = data.get("activityId")
        if isinstance(activity_id, bool) or not isinstance(activity_id, (int, float, str)):
            activity_id = None
        elif _id_text(activity_id) is None:
            activity_id = None

        activity_name = data.get("activityName")
        if not isinstance(activity_name, str):
            activity_name = None

        raw_id = _id_text(data.get("id"))
        start = data.get("start")
        end = data.get("end")

        duration = to_number(data.get("duration"))
        if duration is None or duration < 0:
            duration = 0.0

        return cls(
            id=raw_id or None,
            activity_id=activity_id,
            activity_name=activity_name,
            start=start if isinstance(start, str) else "",
            end=end if isinstance(end, str) else None,
            duration_s=duration,
            calories=to_number(data.get("calories")),
            distance=data.get("distance"),
            metadata=metadata,
            extras={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )


@dataclass(frozen=True)
class ActivityMapping:
    category: str
    subcategory: Optional[str]
    display_name: str
    type: str


@dataclass(frozen=True)
class Activity:
    id: str
    start_time: str
    duration_s: int
    category: str
    subcategory: Optional[str]
    display_name: str
    type: str
    active_calories: int = 0
    distance_m: Optional[float] = None
    avg_pace_s_per_km: Optional[float] = None
    elevation_gain_m: Optional[float] = None
    avg_hr: Optional[int] = None
    max_hr: Optional[int] = None
    avg_cadence: Optional[float] = None
    avg_power: Optional[float] = None
    raw_activity_id: Optional[ActivityId] = None
    raw_activity_name: Optional[str] = None
    # Only filled by the date-range listing
    total_calories: Optional[int] = None
    total_calories_estimated: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MacroTargets:
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fats: int = 0


@dataclass
class MacroSplit:
    protein_pct: float = 0.0
    carbs_pct: float = 0.0
    fats_pct: float = 0.0


# Daily health summary, aggregated from exported HealthKit samples

@dataclass
class DailySteps:
    total: int = 0
    hourly: list[int] = field(default_factory=lambda: [0] * 24)


@dataclass
class MacroIntake:
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fats: int = 0


@dataclass
class EnergyData:
    active: int = 0
    basal: int = 0
    total: int = 0


@dataclass
class SleepData:
    asleep_min: int = 0
    in_bed_min: int = 0


@dataclass
class BodyMeasurements:
    weight_kg: Optional[float] = None
    height_m: Optional[float] = None
    bmi: Optional[float] = None
    body_fat_pct: Optional[float] = None


@dataclass
class ActivityMetrics:
    floors_climbed: Optional[int] = None
    exercise_min: Optional[int] = None
    stand_hours: Optional[float] = None


@dataclass
class HeartRateData:
    average: Optional[int] = None
    resting: Optional[int] = None
    walking_average: Optional[int] = None


@dataclass
class DailyHealthData:
    date: str
    steps: DailySteps
    macros: MacroIntake
    activities: list[Activity] = field(default_factory=list)
    energy: Optional[EnergyData] = None
    water_l: Optional[float] = None
    sleep: Optional[SleepData] = None
    body: Optional[BodyMeasurements] = None
    activity_metrics: Optional[ActivityMetrics] = None
    heart_rate: Optional[HeartRateData] = None
    mindfulness_min: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)
