"""
HealthBase — daily health summary tests
"""

import logging
from datetime import date

import pytest

from healthbase.ingest.health_samples import (
    activity_metrics_for_date,
    body_measurements_for_date,
    energy_for_date,
    get_health_data_for_date,
    heart_rate_for_date,
    load_health_export,
    macros_for_date,
    mindfulness_for_date,
    parse_health_payload,
    sleep_for_date,
    steps_for_date,
    summarize_day,
    water_for_date,
)
from healthbase.models import ActivityMetrics, EnergyData, HeartRateData, MacroIntake, SleepData

DAY = date(2024, 6, 10)


@pytest.fixture
def export(health_file):
    return load_health_export(health_file)


class TestLoadHealthExport:
    def test_known_kinds_are_parsed(self, export):
        assert len(export.samples) == 18
        assert "stepsOnTheMoon" not in export.samples
        assert export.skipped == 2
        assert len(export.file_hash) == 64

    def test_samples_sorted_by_start(self, export):
        starts = [s.start for s in export.kind("steps")]
        assert starts == sorted(starts)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_health_export(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_health_export(path)

    def test_payload_must_be_an_object(self):
        with pytest.raises(ValueError):
            parse_health_payload([{"steps": []}])

    def test_non_list_kind_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="healthbase.ingest.health_samples"):
            export = parse_health_payload({"steps": {"value": 10}})
        assert export.kind("steps") == []
        assert "expected a list" in caplog.text


class TestSteps:
    def test_total_and_hourly_buckets(self, export):
        steps = steps_for_date(export, DAY)
        assert steps.total == 5001
        assert steps.hourly[8] == 2001
        assert steps.hourly[17] == 3000
        assert len(steps.hourly) == 24

    def test_other_day(self, export):
        steps = steps_for_date(export, date(2024, 6, 11))
        assert steps.total == 5000
        assert steps.hourly[9] == 5000


class TestIntake:
    def test_macros_are_summed_then_rounded(self, export):
        assert macros_for_date(export, DAY) == MacroIntake(calories=1851, protein=96, carbs=201, fats=60)

    def test_empty_day_is_zero(self, export):
        assert macros_for_date(export, date(2024, 6, 11)) == MacroIntake()

    def test_water_in_liters(self, export):
        assert water_for_date(export, DAY) == 2.25

    def test_no_water_samples(self, export):
        assert water_for_date(export, date(2024, 6, 11)) is None


class TestEnergy:
    def test_active_basal_total(self, export):
        assert energy_for_date(export, DAY) == EnergyData(active=521, basal=1650, total=2171)

    def test_no_samples(self, export):
        assert energy_for_date(export, date(2024, 6, 11)) is None


class TestSleep:
    def test_asleep_and_in_bed(self, export):
        assert sleep_for_date(export, DAY) == SleepData(asleep_min=400, in_bed_min=420)

    def test_sample_without_end_adds_nothing(self):
        export = parse_health_payload({"sleep": [{"value": 1, "startDate": "2024-06-10T01:00:00"}]})
        assert sleep_for_date(export, DAY) == SleepData(asleep_min=0, in_bed_min=0)

    def test_no_samples(self, export):
        assert sleep_for_date(export, date(2024, 6, 11)) is None


class TestBodyMeasurements:
    def test_grams_and_centimeters_are_converted(self, export):
        body = body_measurements_for_date(export, DAY)
        assert body.weight_kg == 72.5
        assert body.height_m == 1.8
        assert body.bmi is None
        assert body.body_fat_pct is None

    def test_latest_on_or_before_day(self, export):
        assert body_measurements_for_date(export, date(2024, 6, 12)).weight_kg == 71.8
        assert body_measurements_for_date(export, date(2024, 5, 15)).weight_kg is None

    def test_nothing_recorded_yet(self, export):
        assert body_measurements_for_date(export, date(2024, 4, 30)) is None


class TestActivityMetrics:
    def test_seconds_and_minutes_are_normalized(self, export):
        assert activity_metrics_for_date(export, DAY) == ActivityMetrics(
            floors_climbed=10, exercise_min=55, stand_hours=8.0,
        )

    def test_only_present_fields_are_set(self):
        export = parse_health_payload({"flightsClimbed": [
            {"value": 3, "startDate": "2024-06-10T09:00:00"},
        ]})
        assert activity_metrics_for_date(export, DAY) == ActivityMetrics(floors_climbed=3)

    def test_no_samples(self, export):
        assert activity_metrics_for_date(export, date(2024, 6, 11)) is None


class TestHeartRate:
    def test_average_resting_walking(self, export):
        assert heart_rate_for_date(export, DAY) == HeartRateData(average=77, resting=55, walking_average=98)

    def test_unreadable_sample_counts_as_zero(self):
        export = parse_health_payload({"heartRate": [
            {"value": 90, "startDate": "2024-06-10T09:00:00"},
            {"value": "n/a", "startDate": "2024-06-10T10:00:00"},
        ]})
        assert heart_rate_for_date(export, DAY).average == 45

    def test_no_samples(self, export):
        assert heart_rate_for_date(export, date(2024, 6, 11)) is None


class TestMindfulness:
    def test_minutes_and_seconds(self, export):
        assert mindfulness_for_date(export, DAY) == 60

    def test_no_samples(self, export):
        assert mindfulness_for_date(export, date(2024, 6, 11)) is None


class TestDailySummary:
    def test_quiet_day(self, export):
        summary = summarize_day(export, date(2024, 6, 11))
        assert summary.date == "2024-06-11"
        assert summary.activities == []
        assert summary.energy is None
        assert summary.sleep is None
        assert summary.body.weight_kg == 72.5

    def test_to_dict(self, export):
        data = summarize_day(export, DAY).to_dict()
        assert data["steps"]["total"] == 5001
        assert data["sleep"] == {"asleep_min": 400, "in_bed_min": 420}

    def test_with_workouts_from_config(self, config):
        summary = get_health_data_for_date(config, DAY)
        assert summary.date == "2024-06-10"
        assert [a.display_name for a in summary.activities] == [
            "Outdoor Run", "Traditional Strength Training",
        ]
        assert summary.mindfulness_min == 60

    def test_explicit_files(self, health_file, export_file):
        summary = get_health_data_for_date({}, DAY, file_path=health_file, workouts_file=export_file)
        assert summary.macros.calories == 1851
        assert len(summary.activities) == 2

    def test_health_export_not_configured(self, export_file):
        with pytest.raises(KeyError):
            get_health_data_for_date({"paths": {"workouts_export": str(export_file)}}, DAY)
