"""Display strings for activity metrics, in the dashboard's uppercase style."""

import math

from healthbase.models import Activity
from healthbase.normalize.activity_types import sf_symbol_for
from healthbase.normalize.metrics import round_half_up

DISTANCE_CATEGORIES = {"Running", "Cycling", "Walking", "Rowing"}
DISTANCE_TYPES = {"running", "cycling", "walking", "rowing"}


def _round(value: float) -> int:
    return int(round_half_up(value))


def format_duration(seconds) -> str:
    """Format seconds as M:SS (minutes are not rolled into hours)."""
    if not seconds or seconds < 0:
        return "0:00"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def format_distance(meters) -> str:
    if not meters:
        return "0.00KM"
    return f"{meters / 1000:.2f}KM"


def format_pace(seconds_per_km) -> str:
    """Format pace as M'SS"/KM, rounded to the nearest second."""
    if not seconds_per_km:
        return "--'--\"/KM"
    total = _round(seconds_per_km)
    minutes, secs = divmod(total, 60)
    return f"{minutes}'{secs:02d}\"/KM"


def format_elevation(meters) -> str:
    if not meters:
        return "0M"
    return f"{_round(meters)}M"


def format_cadence(steps_per_minute) -> str:
    if not steps_per_minute:
        return "--SPM"
    return f"{_round(steps_per_minute)}SPM"


def format_power(watts) -> str:
    if not watts:
        return "--W"
    return f"{_round(watts)}W"


def format_minutes(total_minutes) -> str:
    """Format minutes as "1h 5m" or "45m"."""
    if total_minutes is None or not math.isfinite(total_minutes) or total_minutes < 0:
        return "0m"
    hours = int(total_minutes // 60)
    minutes = _round(total_minutes % 60)
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


def format_percent(fraction, decimals: int = 0) -> str:
    if fraction is None or not math.isfinite(fraction):
        return "0%"
    return f"{fraction * 100:.{decimals}f}%"


def shows_distance(activity: Activity) -> bool:
    return bool(activity.distance_m) and (
        activity.category in DISTANCE_CATEGORIES or activity.type in DISTANCE_TYPES
    )


def format_metric(activity: Activity) -> str:
    """Headline metric for list rows: distance for distance sports, else calories."""
    if shows_distance(activity):
        return format_distance(activity.distance_m)
    return f"{activity.active_calories}KCAL"


def calculate_effort(activity: Activity, avg_hr=None) -> tuple[int, str]:
    """Effort rating 1-10 and label from heart rate as a share of max HR.

    Without a recorded max, one is estimated from the average: +20 above
    180 bpm, +30 above 160 bpm, otherwise 200.
    """
    hr = avg_hr or activity.avg_hr or activity.max_hr or 0
    if not hr:
        return 1, "Easy"

    max_hr = activity.max_hr or 0
    if not max_hr or max_hr < hr:
        if hr > 180:
            max_hr = hr + 20
        elif hr > 160:
            max_hr = hr + 30
        else:
            max_hr = 200

    pct = hr / max_hr
    if pct < 0.50:
        rating = 1
    elif pct < 0.60:
        rating = _round(1 + (pct - 0.50) / 0.10 * 2)
    elif pct < 0.70:
        rating = _round(3 + (pct - 0.60) / 0.10 * 2)
    elif pct < 0.85:
        rating = _round(5 + (pct - 0.70) / 0.15 * 2)
    else:
        rating = _round(7 + (pct - 0.85) / 0.15 * 3)
    rating = max(1, min(10, rating))

    if rating <= 3:
        label = "Easy"
    elif rating <= 5:
        label = "Moderate"
    elif rating <= 7:
        label = "Hard"
    else:
        label = "Very Hard"
    return rating, label


def display_fields(activity: Activity) -> dict:
    """Activity dict plus preformatted display strings for the API."""
    data = activity.to_dict()
    rating, label = calculate_effort(activity)
    data.update({
        "display_metric": format_metric(activity),
        "display_duration": format_duration(activity.duration_s),
        "display_distance": format_distance(activity.distance_m) if activity.distance_m else "",
        "display_pace": format_pace(activity.avg_pace_s_per_km) if activity.avg_pace_s_per_km else "",
        "display_elevation": format_elevation(activity.elevation_gain_m) if activity.elevation_gain_m else "",
        "display_cadence": format_cadence(activity.avg_cadence) if activity.avg_cadence else "",
        "display_power": format_power(activity.avg_power) if activity.avg_power else "",
        "effort_rating": rating,
        "effort_label": label,
        "sf_symbol": sf_symbol_for(activity.raw_activity_id, activity.raw_activity_name),
    })
    return data
