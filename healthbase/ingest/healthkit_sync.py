"""Fetch normalized activities for a day or a date range from the workout export."""

import logging
from datetime import date, datetime, time
from pathlib import Path

from healthbase.config import get_workouts_export_path
from healthbase.ingest.healthkit_export import day_window, load_workout_export, workouts_in_window
from healthbase.models import Activity
from healthbase.normalize.normalizer import normalize_workouts

logger = logging.getLogger(__name__)


def _export_path(config: dict, file_path) -> Path:
    return Path(file_path) if file_path else get_workouts_export_path(config)


def get_activities_for_date(config: dict, day: date, file_path=None) -> list[Activity]:
    """Normalized activities that started on ``day`` (local time)."""
    export = load_workout_export(_export_path(config, file_path))
    start, end = day_window(day)
    raws = workouts_in_window(export.workouts, start, end)
    logger.debug("%d of %d workout(s) on %s", len(raws), len(export.workouts), day.isoformat())
    return normalize_workouts(raws, reference=datetime.combine(day, time.min))


def get_activities_for_date_range(config: dict, start_day: date, end_day: date,
                                  file_path=None) -> list[Activity]:
    """Normalized activities between two days inclusive, with total calories."""
    if end_day < start_day:
        raise ValueError(f"End date {end_day} is before start date {start_day}")
    export = load_workout_export(_export_path(config, file_path))
    start, end = day_window(start_day, end_day)
    raws = workouts_in_window(export.workouts, start, end)
    logger.debug("%d of %d workout(s) between %s and %s", len(raws), len(export.workouts),
                 start_day.isoformat(), end_day.isoformat())
    return normalize_workouts(raws, include_total_calories=True)
