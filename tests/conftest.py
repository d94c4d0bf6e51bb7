import json

import pytest

SAMPLE_WORKOUTS = [
    {
        "id": "run-1",
        "activityId": 37,
        "activityName": "Running",
        "start": "2024-06-10T07:00:00",
        "end": "2024-06-10T07:25:00",
        "duration": 1500,
        "calories": 320.4,
        "distance": 3.10686,
        "metadata": {"HKAverageHeartRate": 152, "HKMaximumHeartRate": 178},
    },
    {
        "activityId": 50,
        "activityName": "TraditionalStrengthTraining",
        "start": "2024-06-10T18:30:00",
        "duration": 1800,
        "calories": 200,
    },
    {
        "id": "ride-1",
        "activityId": 18,
        "activityName": "Cycling",
        "start": "2024-06-12T12:00:00",
        "duration": 2700,
        "calories": 410,
        "metadata": {"HKTotalEnergyBurned": 520},
    },
    {
        "id": "walk-may",
        "activityName": "Walking",
        "start": "2024-05-28T09:00:00",
        "duration": 1200,
        "calories": 90,
        "distance": 1500,
    },
    {"id": "broken", "activityName": "Yoga", "start": "not a date", "duration": 600},
    "not a sample",
]


def _sample(value, start, end=None):
    return {"value": value, "startDate": start, "endDate": end or start}


# Health samples around 2024-06-10, naive timestamps read as local time
SAMPLE_HEALTH = {
    "steps": [
        _sample(1200, "2024-06-10T08:15:00"),
        _sample("800.6", "2024-06-10T08:45:00"),
        _sample(3000, "2024-06-10T17:05:00"),
        _sample("abc", "2024-06-10T18:00:00"),
        _sample(5000, "2024-06-11T09:00:00"),
        {"value": 10, "startDate": "yesterday"},
        "not a sample",
    ],
    "energyConsumed": [_sample(650.4, "2024-06-10T07:30:00"), _sample(1200.3, "2024-06-10T13:00:00")],
    "protein": [_sample(40.2, "2024-06-10T07:30:00"), _sample(55.5, "2024-06-10T13:00:00")],
    "carbohydrates": [_sample(80, "2024-06-10T07:30:00"), _sample("120.5", "2024-06-10T13:00:00")],
    "totalFat": [_sample(30.25, "2024-06-10T07:30:00"), _sample(29.5, "2024-06-10T13:00:00")],
    "activeEnergyBurned": [_sample(300.4, "2024-06-10T09:00:00"), _sample(220.2, "2024-06-10T18:00:00")],
    "basalEnergyBurned": [_sample(1650.3, "2024-06-10T23:00:00")],
    "water": [
        _sample(0.5, "2024-06-10T08:00:00"),
        _sample(0.75, "2024-06-10T12:00:00"),
        _sample(1.004, "2024-06-10T19:00:00"),
    ],
    "sleep": [
        _sample(0, "2024-06-10T00:30:00", "2024-06-10T00:50:00"),
        _sample(1, "2024-06-10T00:50:00", "2024-06-10T07:20:00"),
        _sample("ASLEEP", "2024-06-10T07:20:00", "2024-06-10T07:30:00"),
    ],
    "weight": [_sample(72500, "2024-06-01T07:00:00"), _sample(71.8, "2024-06-12T07:00:00")],
    "height": [_sample(180, "2024-05-01T07:00:00")],
    "flightsClimbed": [_sample(4, "2024-06-10T10:00:00"), _sample(6, "2024-06-10T16:00:00")],
    "appleExerciseTime": [_sample(25, "2024-06-10T07:00:00"), _sample(1800, "2024-06-10T18:00:00")],
    "appleStandTime": [_sample(6, "2024-06-10T12:00:00"), _sample(120, "2024-06-10T20:00:00")],
    "heartRate": [
        _sample(60, "2024-06-10T06:00:00"),
        _sample(80, "2024-06-10T12:00:00"),
        _sample(91, "2024-06-10T18:00:00"),
    ],
    "restingHeartRate": [_sample(58, "2024-06-10T06:00:00"), _sample(55, "2024-06-10T07:00:00")],
    "walkingHeartRateAverage": [_sample("98.4", "2024-06-10T20:00:00")],
    "mindfulSession": [_sample(10, "2024-06-10T07:45:00"), _sample(3000, "2024-06-10T21:00:00")],
    "stepsOnTheMoon": [],
}


def write_export(path, samples=None, anchor="anchor-1"):
    path.write_text(json.dumps({"data": SAMPLE_WORKOUTS if samples is None else samples,
                                "anchor": anchor}))
    return path


@pytest.fixture
def export_file(tmp_path):
    return write_export(tmp_path / "workouts.json")


@pytest.fixture
def health_file(tmp_path):
    path = tmp_path / "health.json"
    path.write_text(json.dumps(SAMPLE_HEALTH))
    return path


@pytest.fixture
def config(tmp_path, export_file, health_file):
    return {
        "paths": {
            "db": str(tmp_path / "healthbase.db"),
            "workouts_export": str(export_file),
            "health_export": str(health_file),
        },
    }


@pytest.fixture
def make_export(tmp_path):
    def _make(samples, name="custom.json"):
        return write_export(tmp_path / name, samples)
    return _make
