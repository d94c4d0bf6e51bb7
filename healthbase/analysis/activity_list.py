"""Filtering and month grouping for the activity list."""

from datetime import datetime

from healthbase.models import Activity
from healthbase.normalize.activity_types import ACTIVITY_TYPES
from healthbase.normalize.normalizer import parse_timestamp

FILTERS = ("all",) + ACTIVITY_TYPES

MONTH_NAMES = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def filter_activities(activities: list[Activity], activity_type: str = "all") -> list[Activity]:
    if activity_type not in FILTERS:
        raise ValueError(f"Unknown activity filter: {activity_type!r}")
    if activity_type == "all":
        return list(activities)
    return [a for a in activities if a.type == activity_type]


def group_by_month(activities: list[Activity]) -> list[dict]:
    """Group activities under "Month YYYY", most recent group first.

    Group order follows the first activity seen in each group, as the list
    arrives. Activities without a parseable start time are left out.
    """
    groups: dict[str, dict] = {}
    first_seen: dict[str, datetime] = {}
    for activity in activities:
        started = parse_timestamp(activity.start_time)
        if started is None:
            continue
        month = MONTH_NAMES[started.month]
        key = f"{month} {started.year}"
        if key not in groups:
            groups[key] = {"month": month, "year": started.year, "activities": []}
            first_seen[key] = started.replace(tzinfo=None)
        groups[key]["activities"].append(activity)

    ordered = sorted(groups, key=lambda k: first_seen[k], reverse=True)
    return [groups[k] for k in ordered]
