"""
HealthBase — display formatting and activity list tests
"""

import pytest

from healthbase.analysis.activity_list import filter_activities, group_by_month
from healthbase.analysis.display import (
    calculate_effort,
    display_fields,
    format_cadence,
    format_distance,
    format_duration,
    format_elevation,
    format_metric,
    format_minutes,
    format_pace,
    format_percent,
    format_power,
)
from healthbase.models import Activity


def _activity(id="a", start="2024-06-10T07:00:00", category="Running", type="running", **kwargs):
    return Activity(id=id, start_time=start, duration_s=kwargs.pop("duration_s", 1500),
                    category=category, subcategory=None, display_name=category,
                    type=type, **kwargs)


class TestFormatters:
    def test_duration(self):
        assert format_duration(1805) == "30:05"
        assert format_duration(3725) == "62:05"
        assert format_duration(0) == "0:00"
        assert format_duration(None) == "0:00"

    def test_distance(self):
        assert format_distance(5000) == "5.00KM"
        assert format_distance(None) == "0.00KM"

    def test_pace(self):
        assert format_pace(300) == "5'00\"/KM"
        assert format_pace(359.6) == "6'00\"/KM"
        assert format_pace(None) == "--'--\"/KM"

    def test_elevation_cadence_power(self):
        assert format_elevation(120.5) == "121M"
        assert format_cadence(171.6) == "172SPM"
        assert format_cadence(None) == "--SPM"
        assert format_power(210.4) == "210W"
        assert format_power(0) == "--W"

    def test_minutes(self):
        assert format_minutes(65) == "1h 5m"
        assert format_minutes(45) == "45m"
        assert format_minutes(-1) == "0m"
        assert format_minutes(None) == "0m"

    def test_percent(self):
        assert format_percent(0.25) == "25%"
        assert format_percent(0.256, 1) == "25.6%"
        assert format_percent(float("nan")) == "0%"


class TestHeadlineMetric:
    def test_distance_sport_shows_distance(self):
        assert format_metric(_activity(distance_m=5000, active_calories=300)) == "5.00KM"

    def test_rowing_shows_distance(self):
        rowing = _activity(category="Rowing", type="rowing", distance_m=2000)
        assert format_metric(rowing) == "2.00KM"

    def test_other_sport_shows_calories(self):
        strength = _activity(category="Strength Training", type="strength", active_calories=250)
        assert format_metric(strength) == "250KCAL"

    def test_distance_ignored_for_non_distance_sport(self):
        yoga = _activity(category="Yoga", type="other", distance_m=100, active_calories=80)
        assert format_metric(yoga) == "80KCAL"

    def test_run_without_distance_shows_calories(self):
        assert format_metric(_activity(active_calories=300)) == "300KCAL"


class TestEffort:
    def test_no_heart_rate(self):
        assert calculate_effort(_activity()) == (1, "Easy")

    def test_with_recorded_max(self):
        assert calculate_effort(_activity(avg_hr=150, max_hr=190)) == (6, "Hard")

    def test_estimated_max_for_high_average(self):
        assert calculate_effort(_activity(avg_hr=175)) == (7, "Hard")
        assert calculate_effort(_activity(avg_hr=185)) == (8, "Very Hard")

    def test_low_average(self):
        assert calculate_effort(_activity(avg_hr=90)) == (1, "Easy")

    def test_explicit_average_overrides(self):
        assert calculate_effort(_activity(), avg_hr=150) == calculate_effort(_activity(avg_hr=150))

    def test_display_fields(self):
        fields = display_fields(_activity(distance_m=5000, avg_pace_s_per_km=300.0, avg_hr=150, max_hr=190))
        assert fields["id"] == "a"
        assert fields["display_metric"] == "5.00KM"
        assert fields["display_pace"] == "5'00\"/KM"
        assert fields["display_power"] == ""
        assert (fields["effort_rating"], fields["effort_label"]) == (6, "Hard")

    def test_display_fields_icon(self):
        assert display_fields(_activity(raw_activity_name="Running"))["sf_symbol"] == "figure.run"
        assert display_fields(_activity(raw_activity_id=18))["sf_symbol"] == "figure.indoor.cycle"
        assert display_fields(_activity())["sf_symbol"] == "figure.fitness"


class TestFilter:
    def test_by_type(self):
        items = [_activity(id="r"), _activity(id="s", category="Strength Training", type="strength")]
        assert [a.id for a in filter_activities(items, "strength")] == ["s"]
        assert len(filter_activities(items)) == 2

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            filter_activities([], "swimming")


class TestGroupByMonth:
    def test_groups_newest_first(self):
        items = [
            _activity(id="may20", start="2024-05-20T07:00:00"),
            _activity(id="may02", start="2024-05-02T07:00:00"),
            _activity(id="apr10", start="2024-04-10T07:00:00"),
            _activity(id="jun01", start="2024-06-01T07:00:00"),
        ]
        groups = group_by_month(items)
        assert [(g["month"], g["year"]) for g in groups] == [("June", 2024), ("May", 2024), ("April", 2024)]
        assert [a.id for a in groups[1]["activities"]] == ["may20", "may02"]

    def test_years_are_separate(self):
        items = [_activity(id="a", start="2023-06-01T07:00:00"), _activity(id="b", start="2024-06-01T07:00:00")]
        assert [g["year"] for g in group_by_month(items)] == [2024, 2023]

    def test_unparseable_start_is_left_out(self):
        assert group_by_month([_activity(start="")]) == []
