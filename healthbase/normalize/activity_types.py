"""HealthKit workout classification tables.

Maps a raw HealthKit workout (activityId + activityName) onto the category,
subcategory, display name and coarse type used by the dashboards, and onto
the SF Symbol name used for activity icons. All lookup tables live here.

Name lookups win over id lookups: ids shift between HealthKit releases and
datasets, names do not.
"""

import re
from types import MappingProxyType
from typing import Optional

from healthbase.models import ActivityMapping

M = ActivityMapping

NAME_PREFIX = "HKWorkoutActivityType"

DEFAULT_MAPPING = M("Other", None, "Workout", "other")
DEFAULT_SF_SYMBOL = "figure.fitness"

CATEGORIES = (
    "Running", "Cycling", "Walking", "Swimming", "Strength Training",
    "High-Intensity Interval Training", "Rowing", "Elliptical", "Yoga",
    "Pilates", "Core Training", "Flexibility", "Cooldown", "Stairs",
    "Mixed Cardio", "Soccer", "Tennis", "Basketball", "Other",
)
SUBCATEGORIES = ("Indoor", "Outdoor", "Pool", "Open Water", "Traditional", "Functional")
ACTIVITY_TYPES = ("running", "cycling", "hiit", "walking", "strength", "rowing", "football", "other")

# Generic names that don't say indoor vs outdoor. The activityId decides:
# name -> (indoor id, indoor mapping, outdoor mapping)
INDOOR_TIE_BREAK = MappingProxyType({
    "Running": (17, M("Running", "Indoor", "Indoor Run", "running"),
                M("Running", "Outdoor", "Outdoor Run", "running")),
    "Cycling": (18, M("Cycling", "Indoor", "Indoor Cycle", "cycling"),
                M("Cycling", "Outdoor", "Outdoor Cycle", "cycling")),
    "Walking": (53, M("Walking", "Indoor", "Indoor Walk", "walking"),
                M("Walking", "Outdoor", "Outdoor Walk", "walking")),
})

BY_NAME = MappingProxyType({
    # Running
    "IndoorRunning": M("Running", "Indoor", "Indoor Run", "running"),
    "Treadmill": M("Running", "Indoor", "Indoor Run", "running"),
    "WheelchairRunPace": M("Running", "Outdoor", "Wheelchair Run Pace", "running"),

    # Cycling
    "IndoorCycling": M("Cycling", "Indoor", "Indoor Cycle", "cycling"),
    "HandCycling": M("Cycling", "Outdoor", "Hand Cycle", "cycling"),

    # Walking
    "IndoorWalking": M("Walking", "Indoor", "Indoor Walk", "walking"),
    "Hiking": M("Walking", "Outdoor", "Hiking", "walking"),
    "WheelchairWalkPace": M("Walking", "Outdoor", "Wheelchair Walk Pace", "walking"),

    # Swimming
    "Swimming": M("Swimming", "Pool", "Pool Swim", "other"),
    "OpenWaterSwimming": M("Swimming", "Open Water", "Open Water Swim", "other"),
    "WaterFitness": M("Swimming", "Pool", "Water Fitness", "other"),
    "WaterPolo": M("Swimming", "Pool", "Water Polo", "other"),

    # Strength
    "TraditionalStrengthTraining": M("Strength Training", "Traditional", "Traditional Strength Training", "strength"),
    "FunctionalStrengthTraining": M("Strength Training", "Functional", "Functional Strength Training", "strength"),

    # Cardio machines & mixed
    "HighIntensityIntervalTraining": M("High-Intensity Interval Training", None, "High-Intensity Interval Training", "hiit"),
    "Rowing": M("Rowing", None, "Rowing", "rowing"),
    "Elliptical": M("Elliptical", None, "Elliptical", "other"),
    "CrossTraining": M("Mixed Cardio", None, "Cross Training", "other"),
    "MixedCardio": M("Mixed Cardio", None, "Mixed Cardio", "other"),

    # Mind & body
    "Yoga": M("Yoga", None, "Yoga", "other"),
    "Pilates": M("Pilates", None, "Pilates", "other"),
    "TaiChi": M("Yoga", None, "Tai Chi", "other"),
    "MindAndBody": M("Yoga", None, "Mind & Body", "other"),

    # Core, flexibility, recovery
    "CoreTraining": M("Core Training", None, "Core Training", "other"),
    "Flexibility": M("Flexibility", None, "Flexibility", "other"),
    "PreparationAndRecovery": M("Cooldown", None, "Cooldown", "other"),

    # Stairs
    "Stairs": M("Stairs", None, "Stairs", "other"),
    "StairClimbing": M("Stairs", None, "Stair Stepper", "other"),
    "StepTraining": M("Stairs", None, "Step Training", "other"),

    # Team & racket sports
    "Soccer": M("Soccer", None, "Soccer", "football"),
    "AmericanFootball": M("Soccer", None, "American Football", "football"),
    "Tennis": M("Tennis", None, "Tennis", "other"),
    "TableTennis": M("Tennis", None, "Table Tennis", "other"),
    "Squash": M("Tennis", None, "Squash", "other"),
    "Racquetball": M("Tennis", None, "Racquetball", "other"),
    "Pickleball": M("Tennis", None, "Pickleball", "other"),
    "Badminton": M("Tennis", None, "Badminton", "other"),
    "Basketball": M("Basketball", None, "Basketball", "other"),
    "Baseball": M("Other", None, "Baseball", "other"),
    "Softball": M("Other", None, "Softball", "other"),
    "Volleyball": M("Other", None, "Volleyball", "other"),
    "Handball": M("Other", None, "Handball", "other"),
    "Rugby": M("Other", None, "Rugby", "other"),
    "Lacrosse": M("Other", None, "Lacrosse", "other"),
    "Golf": M("Other", None, "Golf", "other"),
    "Bowling": M("Other", None, "Bowling", "other"),

    # Combat
    "Boxing": M("Other", None, "Boxing", "other"),
    "Kickboxing": M("Other", None, "Kickboxing", "other"),
    "MartialArts": M("Other", None, "Martial Arts", "other"),
    "Wrestling": M("Other", None, "Wrestling", "other"),
    "Fencing": M("Other", None, "Fencing", "other"),

    # Everything else
    "Gymnastics": M("Other", None, "Gymnastics", "other"),
    "Climbing": M("Other", None, "Climbing", "other"),
    "SocialDance": M("Other", None, "Dance", "other"),
    "Dance": M("Other", None, "Dance", "other"),
    "SkatingSports": M("Other", None, "Skating", "other"),
    "Skating": M("Other", None, "Skating", "other"),
    "Snowboarding": M("Other", None, "Snowboarding", "other"),
    "Skiing": M("Other", None, "Skiing", "other"),
    "DownhillSkiing": M("Other", None, "Downhill Skiing", "other"),
    "CrossCountrySkiing": M("Other", None, "Cross Country Skiing", "other"),
    "SurfingSports": M("Other", None, "Surfing", "other"),
    "Surfing": M("Other", None, "Surfing", "other"),
    "Sailing": M("Other", None, "Sailing", "other"),
    "Fishing": M("Other", None, "Fishing", "other"),
    "Hunting": M("Other", None, "Hunting", "other"),
    "Play": M("Other", None, "Play", "other"),
    "TrackAndField": M("Other", None, "Track & Field", "other"),
})

BY_ID = MappingProxyType({
    16: M("Running", "Outdoor", "Outdoor Run", "running"),
    17: M("Running", "Indoor", "Indoor Run", "running"),
    101: M("Running", "Outdoor", "Wheelchair Run Pace", "running"),

    37: M("Cycling", "Outdoor", "Outdoor Cycle", "cycling"),
    18: M("Cycling", "Indoor", "Indoor Cycle", "cycling"),
    56: M("Cycling", "Outdoor", "Hand Cycle", "cycling"),

    36: M("Walking", "Outdoor", "Outdoor Walk", "walking"),
    53: M("Walking", "Indoor", "Indoor Walk", "walking"),
    23: M("Walking", "Outdoor", "Hiking", "walking"),
    58: M("Walking", "Outdoor", "Wheelchair Walk Pace", "walking"),

    38: M("Swimming", "Pool", "Pool Swim", "other"),
    68: M("Swimming", "Open Water", "Open Water Swim", "other"),
    70: M("Swimming", "Pool", "Water Fitness", "other"),
    71: M("Swimming", "Pool", "Water Polo", "other"),

    48: M("Strength Training", "Traditional", "Traditional Strength Training", "strength"),
    49: M("Strength Training", "Functional", "Functional Strength Training", "strength"),

    52: M("High-Intensity Interval Training", None, "High-Intensity Interval Training", "hiit"),
    35: M("Rowing", None, "Rowing", "rowing"),
    34: M("Elliptical", None, "Elliptical", "other"),
    55: M("Mixed Cardio", None, "Cross Training", "other"),

    64: M("Yoga", None, "Yoga", "other"),
    65: M("Pilates", None, "Pilates", "other"),
    66: M("Yoga", None, "Tai Chi", "other"),
    88: M("Yoga", None, "Mind & Body", "other"),

    62: M("Core Training", None, "Core Training", "other"),
    61: M("Flexibility", None, "Flexibility", "other"),
    59: M("Cooldown", None, "Cooldown", "other"),

    67: M("Stairs", None, "Stairs", "other"),
    69: M("Stairs", None, "Stair Stepper", "other"),
    54: M("Stairs", None, "Step Training", "other"),

    15: M("Soccer", None, "Soccer", "football"),
    14: M("Soccer", None, "American Football", "football"),
    10: M("Tennis", None, "Tennis", "other"),
    11: M("Tennis", None, "Table Tennis", "other"),
    40: M("Tennis", None, "Squash", "other"),
    41: M("Tennis", None, "Racquetball", "other"),
    63: M("Tennis", None, "Pickleball", "other"),
    32: M("Tennis", None, "Badminton", "other"),
    28: M("Basketball", None, "Basketball", "other"),
    29: M("Other", None, "Baseball", "other"),
    30: M("Other", None, "Softball", "other"),
    31: M("Other", None, "Volleyball", "other"),
    33: M("Other", None, "Handball", "other"),
    13: M("Other", None, "Rugby", "other"),
    12: M("Other", None, "Lacrosse", "other"),
    27: M("Other", None, "Golf", "other"),
    26: M("Other", None, "Bowling", "other"),

    43: M("Other", None, "Boxing", "other"),
    44: M("Other", None, "Kickboxing", "other"),
    45: M("Other", None, "Martial Arts", "other"),
    46: M("Other", None, "Wrestling", "other"),
    47: M("Other", None, "Fencing", "other"),

    50: M("Other", None, "Gymnastics", "other"),
    51: M("Other", None, "Climbing", "other"),
    60: M("Other", None, "Dance", "other"),
    39: M("Other", None, "Skating", "other"),
    20: M("Other", None, "Snowboarding", "other"),
    19: M("Other", None, "Downhill Skiing", "other"),
    21: M("Other", None, "Cross Country Skiing", "other"),
    25: M("Other", None, "Surfing", "other"),
    22: M("Other", None, "Sailing", "other"),
    24: M("Other", None, "Fishing", "other"),
    93: M("Other", None, "Hunting", "other"),
    57: M("Other", None, "Play", "other"),
    42: M("Other", None, "Track & Field", "other"),
})

SF_SYMBOL_BY_NAME = MappingProxyType({
    "Running": "figure.run",
    "Cycling": "figure.outdoor.cycle",
    "Walking": "figure.walk",
    "Rowing": "figure.rower",
    "HighIntensityIntervalTraining": "figure.highintensity.intervaltraining",
    "TraditionalStrengthTraining": "figure.strengthtraining.traditional",
    "FunctionalStrengthTraining": "figure.strengthtraining.functional",
    "Elliptical": "figure.elliptical",
    "Swimming": "figure.pool.swim",
    "CrossTraining": "figure.mixed.cardio",
    "MixedCardio": "figure.mixed.cardio",
    "Soccer": "figure.soccer",
    "AmericanFootball": "figure.soccer",
    "HandCycling": "figure.hand.cycling",
    "CoreTraining": "figure.core.training",
    "Flexibility": "figure.flexibility",
    "PreparationAndRecovery": "figure.cooldown",
    "StepTraining": "figure.step.training",
    "Stairs": "figure.stairs",
    "StairClimbing": "figure.stair.stepper",
    "Yoga": "figure.yoga",
    "Pilates": "figure.pilates",
    "TaiChi": "figure.taichi",
    "MindAndBody": "figure.mind.and.body",
    "SocialDance": "figure.socialdance",
    "Dance": "figure.socialdance",
    "Boxing": "figure.boxing",
    "Kickboxing": "figure.kickboxing",
    "MartialArts": "figure.martial.arts",
    "Wrestling": "figure.wrestling",
    "Gymnastics": "figure.gymnastics",
    "Climbing": "figure.climbing",
    "Fencing": "figure.fencing",
    "Fishing": "figure.fishing",
    "Hunting": "figure.hunting",
    "Sailing": "figure.sailing",
    "SurfingSports": "figure.surfing",
    "Surfing": "figure.surfing",
    "WaterFitness": "figure.water.fitness",
    "WaterPolo": "figure.waterpolo",
    "SkatingSports": "figure.skating",
    "Skating": "figure.skating",
    "Snowboarding": "figure.snowboarding",
    "TrackAndField": "figure.track.and.field",
    "Rugby": "figure.rugby",
    "Lacrosse": "figure.lacrosse",
    "Tennis": "figure.tennis",
    "TableTennis": "figure.table.tennis",
    "Squash": "figure.squash",
    "Racquetball": "figure.racquetball",
    "Pickleball": "figure.pickleball",
    "Badminton": "figure.badminton",
    "Baseball": "figure.baseball",
    "Softball": "figure.softball",
    "Basketball": "figure.basketball",
    "Bowling": "figure.bowling",
    "Golf": "figure.golf",
    "Handball": "figure.handball",
    "Volleyball": "figure.volleyball",
    "Play": "figure.play",
    "WheelchairWalkPace": "figure.rolling",
    "WheelchairRunPace": "figure.rolling",
    "Hiking": "figure.hiking",
})

# The icon id table predates BY_ID and numbers several activities
# differently (64 is Badminton here, Yoga in BY_ID). Kept as-is so icons
# don't change for records that only carry an id.
SF_SYMBOL_BY_ID = MappingProxyType({
    16: "figure.run", 17: "figure.run",
    37: "figure.outdoor.cycle", 18: "figure.indoor.cycle",
    36: "figure.walk", 53: "figure.walk",
    35: "figure.rower",
    52: "figure.highintensity.intervaltraining",
    48: "figure.strengthtraining.traditional",
    49: "figure.strengthtraining.functional",
    34: "figure.elliptical",
    38: "figure.pool.swim",
    55: "figure.mixed.cardio",
    15: "figure.soccer", 14: "figure.soccer",
    19: "figure.hand.cycling",
    20: "figure.core.training",
    21: "figure.flexibility",
    22: "figure.cooldown",
    23: "figure.step.training",
    24: "figure.stairs",
    25: "figure.stair.stepper",
    26: "figure.yoga",
    27: "figure.pilates",
    28: "figure.taichi",
    29: "figure.mind.and.body",
    30: "figure.socialdance",
    31: "figure.boxing",
    32: "figure.kickboxing",
    33: "figure.martial.arts",
    39: "figure.wrestling",
    40: "figure.gymnastics",
    41: "figure.climbing",
    42: "figure.fencing",
    43: "figure.fishing",
    44: "figure.hunting",
    45: "figure.sailing",
    46: "figure.surfing",
    47: "figure.water.fitness",
    50: "figure.waterpolo",
    51: "figure.skating",
    54: "figure.snowboarding",
    56: "figure.track.and.field",
    57: "figure.rugby",
    58: "figure.lacrosse",
    59: "figure.tennis",
    60: "figure.table.tennis",
    61: "figure.squash",
    62: "figure.racquetball",
    63: "figure.pickleball",
    64: "figure.badminton",
    65: "figure.baseball",
    66: "figure.softball",
    67: "figure.basketball",
    68: "figure.bowling",
    69: "figure.golf",
    70: "figure.handball",
    71: "figure.volleyball",
    72: "figure.play",
    73: "figure.rolling",
    74: "figure.rolling",
})

_DIGITS = re.compile(r"\d+")


def extract_numeric_id(activity_id) -> Optional[int]:
    """Return the numeric HealthKit id, or None.

    Strings use their first run of digits ("HK17" -> 17). Booleans and
    non-integral floats never match a table key.
    """
    if activity_id is None or isinstance(activity_id, bool):
        return None
    if isinstance(activity_id, int):
        return activity_id
    if isinstance(activity_id, float):
        return int(activity_id) if activity_id.is_integer() else None
    if isinstance(activity_id, str):
        match = _DIGITS.search(activity_id)
        if not match:
            return None
        try:
            return int(match.group(0))
        except ValueError:
            # past the interpreter's int conversion limit
            return None
    return None


def normalize_name(activity_name) -> Optional[str]:
    """Strip the HealthKit prefix. Empty and the generic "Workout" are unusable."""
    if not isinstance(activity_name, str) or not activity_name or activity_name == "Workout":
        return None
    if activity_name.startswith(NAME_PREFIX):
        activity_name = activity_name[len(NAME_PREFIX):]
    return activity_name or None


def _lookup_name(table, name: str):
    """Exact key match first, then case-insensitive. Returns the matched key."""
    if name in table:
        return name
    lowered = name.lower()
    for key in table:
        if key.lower() == lowered:
            return key
    return None


def classify(activity_id=None, activity_name=None) -> ActivityMapping:
    """Resolve category, subcategory, display name and type for a workout.

    Never raises; unknown input resolves to DEFAULT_MAPPING.
    """
    name = normalize_name(activity_name)
    numeric_id = extract_numeric_id(activity_id)

    if name:
        key = _lookup_name(INDOOR_TIE_BREAK, name)
        if key is not None:
            indoor_id, indoor, outdoor = INDOOR_TIE_BREAK[key]
            return indoor if numeric_id == indoor_id else outdoor

        key = _lookup_name(BY_NAME, name)
        if key is not None:
            return BY_NAME[key]

    if numeric_id is not None and numeric_id in BY_ID:
        return BY_ID[numeric_id]

    return DEFAULT_MAPPING


def format_activity_name(activity_id=None, activity_name=None) -> str:
    return classify(activity_id, activity_name).display_name


def sf_symbol_for(activity_id=None, activity_name=None) -> str:
    """SF Symbol name for an activity icon: name table, then id table."""
    name = normalize_name(activity_name)
    if name:
        key = _lookup_name(SF_SYMBOL_BY_NAME, name)
        if key is not None:
            return SF_SYMBOL_BY_NAME[key]

    numeric_id = extract_numeric_id(activity_id)
    if numeric_id is not None and numeric_id in SF_SYMBOL_BY_ID:
        return SF_SYMBOL_BY_ID[numeric_id]

    return DEFAULT_SF_SYMBOL
