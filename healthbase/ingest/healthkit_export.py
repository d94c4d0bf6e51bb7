"""Load raw HealthKit workout samples from a JSON export.

The export is the result of react-native-health's getAnchoredWorkouts
query, either the full ``{"data": [...], "anchor": ...}`` payload or just
the list of samples.
"""

import hashlib
import json
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path

from healthbase.models import RawWorkout
from healthbase.normalize.normalizer import parse_timestamp

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass
class WorkoutExport:
    workouts: list[RawWorkout]
    anchor: str | None
    file_path: str
    file_hash: str
    skipped: int = 0


def load_workout_export(file_path) -> WorkoutExport:
    """Read and parse a workout export file.

    Raises FileNotFoundError for a missing file and ValueError when the
    content isn't a workout query result. Individual samples that aren't
    JSON objects are counted in ``skipped``.
    """
    path = Path(file_path).expanduser()
    payload = read_json_export(path, "Workout export")
    workouts, anchor, skipped = parse_workout_payload(payload)
    return WorkoutExport(
        workouts=workouts,
        anchor=anchor,
        file_path=str(path),
        file_hash=compute_file_hash(path),
        skipped=skipped,
    )


def read_json_export(path: Path, label: str):
    """Load a JSON export file. Missing files and bad JSON raise."""
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except ValueError as e:
            # JSONDecodeError, or an integer literal past the conversion limit
            raise ValueError(f"{label} is not valid JSON: {path}: {e}") from e


def parse_workout_payload(payload) -> tuple[list[RawWorkout], str | None, int]:
    """Split a query payload into (workouts, anchor, skipped count)."""
    anchor = None
    if isinstance(payload, dict):
        anchor = payload.get("anchor")
        samples = payload.get("data")
    else:
        samples = payload

    if not isinstance(samples, list):
        raise ValueError("Workout export must be a list of samples or an object with a 'data' list")

    workouts = []
    skipped = 0
    for sample in samples:
        if isinstance(sample, dict):
            workouts.append(RawWorkout.from_dict(sample))
        else:
            skipped += 1
    return workouts, anchor if isinstance(anchor, str) else None, skipped


def day_window(start_day: date, end_day: date | None = None) -> tuple[datetime, datetime]:
    """Local-time bounds from start_day 00:00:00.000 to end_day 23:59:59.999."""
    end_day = end_day or start_day
    start = datetime.combine(start_day, time.min).astimezone()
    end = datetime.combine(end_day, END_OF_DAY).astimezone()
    return start, end


def local_time(moment: datetime | None) -> datetime | None:
    """Convert to local time; naive values are taken as local already.

    Moments the platform clock cannot represent (e.g. year 1) give None.
    """
    if moment is None:
        return None
    try:
        return moment.astimezone()
    except (OverflowError, OSError, ValueError):
        return None


def workouts_in_window(workouts: list[RawWorkout], start: datetime,
                       end: datetime) -> list[RawWorkout]:
    """Workouts whose start falls inside [start, end]. Unparseable starts are dropped.

    Naive timestamps are read as local time.
    """
    selected = []
    for workout in workouts:
        started = local_time(parse_timestamp(workout.start))
        if started is None:
            continue
        if start <= started <= end:
            selected.append(workout)
    return selected


def compute_file_hash(file_path) -> str:
    """Compute SHA-256 hash of a file."""
    sha256 = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return sha256.hexdigest()
