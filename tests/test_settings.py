"""
HealthBase — settings store tests
"""

import logging

import pytest

from healthbase import settings
from healthbase.db import get_connection, get_value, init_db, set_value
from healthbase.models import MacroSplit, MacroTargets


@pytest.fixture
def conn(config):
    conn = get_connection(config)
    yield conn
    conn.close()


class TestDatabase:
    def test_init_db_creates_file(self, config, tmp_path, capsys):
        path = init_db(config)
        assert path == tmp_path / "healthbase.db"
        assert path.exists()
        assert "Database initialized" in capsys.readouterr().out

    def test_upsert(self, conn):
        set_value(conn, "k", "1")
        set_value(conn, "k", "2")
        assert get_value(conn, "k") == "2"
        assert get_value(conn, "missing") is None


class TestCalorieTarget:
    def test_unset(self, conn):
        assert settings.load_calorie_target(conn) is None

    def test_save_and_load(self, conn):
        settings.save_calorie_target(conn, 2200)
        assert settings.load_calorie_target(conn) == 2200

    def test_unreadable_value(self, conn):
        set_value(conn, settings.CALORIE_TARGET_KEY, "lots")
        assert settings.load_calorie_target(conn) is None

    def test_unreadable_value_is_logged(self, conn, caplog):
        set_value(conn, settings.CALORIE_TARGET_KEY, "lots")
        with caplog.at_level(logging.ERROR, logger="healthbase.settings"):
            settings.load_calorie_target(conn)
        assert "Unreadable calorie target 'lots'" in caplog.text


class TestMacroTargets:
    def test_save_and_load(self, conn):
        targets = MacroTargets(calories=2000, protein=150, carbs=200, fats=67)
        settings.save_macro_targets(conn, targets)
        assert settings.load_macro_targets(conn) == targets

    def test_corrupted_json(self, conn):
        set_value(conn, settings.MACRO_TARGETS_KEY, "not json")
        assert settings.load_macro_targets(conn) is None

    def test_missing_key(self, conn):
        set_value(conn, settings.MACRO_TARGETS_KEY, '{"calories": 2000}')
        assert settings.load_macro_targets(conn) is None


class TestMacroSplitAndMode:
    def test_split_is_stored_with_camel_case_keys(self, conn):
        settings.save_macro_split(conn, MacroSplit(30, 40, 30))
        assert '"proteinPct": 30' in get_value(conn, settings.MACRO_SPLIT_KEY)
        assert settings.load_macro_split(conn) == MacroSplit(30.0, 40.0, 30.0)

    def test_mode(self, conn):
        assert settings.load_macro_mode(conn) is None
        settings.save_macro_mode(conn, "grams")
        assert settings.load_macro_mode(conn) == "grams"

    def test_invalid_mode_is_rejected(self, conn):
        with pytest.raises(ValueError):
            settings.save_macro_mode(conn, "bogus")

    def test_unknown_stored_mode(self, conn):
        set_value(conn, settings.MACRO_MODE_KEY, "weird")
        assert settings.load_macro_mode(conn) is None


class TestCalculations:
    def test_grams_from_split(self):
        grams = settings.calculate_grams_from_calories_and_split(2000, MacroSplit(30, 40, 30))
        assert grams == MacroTargets(calories=2000, protein=150, carbs=200, fats=67)

    def test_zero_calories(self):
        grams = settings.calculate_grams_from_calories_and_split(0, MacroSplit(30, 40, 30))
        assert grams == MacroTargets()


class TestLoadAll:
    def test_empty(self, conn):
        assert settings.load_all(conn) == {
            "calorie_target": None, "macro_targets": None, "macro_split": None, "macro_mode": None,
        }

    def test_populated(self, conn):
        settings.save_calorie_target(conn, 1800)
        settings.save_macro_split(conn, MacroSplit(25, 50, 25))
        result = settings.load_all(conn)
        assert result["calorie_target"] == 1800
        assert result["macro_split"] == {"protein_pct": 25.0, "carbs_pct": 50.0, "fats_pct": 25.0}
