"""Calorie and macro targets entered on the settings screen.

Values are stored as strings/JSON in the key/value settings table. Loads
return None for anything missing or unreadable.
"""

import json
import logging
import sqlite3
from dataclasses import asdict

from healthbase.db import get_value, set_value
from healthbase.models import MacroSplit, MacroTargets
from healthbase.normalize.metrics import round_half_up

logger = logging.getLogger(__name__)

CALORIE_TARGET_KEY = "healthbase.calorieTarget.v1"
MACRO_TARGETS_KEY = "healthbase.macroTargets.v1"
MACRO_SPLIT_KEY = "healthbase.macroSplit.v1"
MACRO_MODE_KEY = "healthbase.macroMode.v1"

MACRO_MODES = ("percent", "grams")

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9


def save_calorie_target(conn, target: int) -> None:
    try:
        set_value(conn, CALORIE_TARGET_KEY, str(int(target)))
    except sqlite3.Error:
        logger.error("Failed to save calorie target", exc_info=True)
        raise


def load_calorie_target(conn) -> int | None:
    try:
        value = get_value(conn, CALORIE_TARGET_KEY)
    except sqlite3.Error:
        logger.error("Failed to load calorie target", exc_info=True)
        return None
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.error("Unreadable calorie target %r", value)
        return None


def save_macro_targets(conn, targets: MacroTargets) -> None:
    payload = {
        "calories": targets.calories,
        "protein": targets.protein,
        "carbs": targets.carbs,
        "fats": targets.fats,
    }
    try:
        set_value(conn, MACRO_TARGETS_KEY, json.dumps(payload))
    except sqlite3.Error:
        logger.error("Failed to save macro targets", exc_info=True)
        raise


def load_macro_targets(conn) -> MacroTargets | None:
    try:
        value = get_value(conn, MACRO_TARGETS_KEY)
        if not value:
            return None
        data = json.loads(value)
        return MacroTargets(
            calories=int(data["calories"]),
            protein=int(data["protein"]),
            carbs=int(data["carbs"]),
            fats=int(data["fats"]),
        )
    except (sqlite3.Error, ValueError, KeyError, TypeError):
        logger.error("Failed to load macro targets", exc_info=True)
        return None


def save_macro_split(conn, split: MacroSplit) -> None:
    payload = {
        "proteinPct": split.protein_pct,
        "carbsPct": split.carbs_pct,
        "fatsPct": split.fats_pct,
    }
    try:
        set_value(conn, MACRO_SPLIT_KEY, json.dumps(payload))
    except sqlite3.Error:
        logger.error("Failed to save macro split", exc_info=True)


def load_macro_split(conn) -> MacroSplit | None:
    try:
        value = get_value(conn, MACRO_SPLIT_KEY)
        if not value:
            return None
        data = json.loads(value)
        return MacroSplit(
            protein_pct=float(data["proteinPct"]),
            carbs_pct=float(data["carbsPct"]),
            fats_pct=float(data["fatsPct"]),
        )
    except (sqlite3.Error, ValueError, KeyError, TypeError):
        logger.error("Failed to load macro split", exc_info=True)
        return None


def save_macro_mode(conn, mode: str) -> None:
    if mode not in MACRO_MODES:
        raise ValueError(f"Unknown macro mode: {mode!r} (expected one of {', '.join(MACRO_MODES)})")
    try:
        set_value(conn, MACRO_MODE_KEY, mode)
    except sqlite3.Error:
        logger.error("Failed to save macro mode", exc_info=True)


def load_macro_mode(conn) -> str | None:
    try:
        value = get_value(conn, MACRO_MODE_KEY)
    except sqlite3.Error:
        logger.error("Failed to load macro mode", exc_info=True)
        return None
    return value if value in MACRO_MODES else None


def calculate_grams_from_calories_and_split(calories: float, split: MacroSplit) -> MacroTargets:
    """Convert a calorie target and percentage split into gram targets."""
    protein_kcal = split.protein_pct / 100 * calories
    carbs_kcal = split.carbs_pct / 100 * calories
    fats_kcal = split.fats_pct / 100 * calories
    return MacroTargets(
        calories=_round(calories),
        protein=_round(protein_kcal / KCAL_PER_GRAM_PROTEIN),
        carbs=_round(carbs_kcal / KCAL_PER_GRAM_CARBS),
        fats=_round(fats_kcal / KCAL_PER_GRAM_FAT),
    )


def _round(value: float) -> int:
    return int(round_half_up(value))


def load_all(conn) -> dict:
    """Every setting as a JSON-ready dict (None where unset)."""
    targets = load_macro_targets(conn)
    split = load_macro_split(conn)
    return {
        "calorie_target": load_calorie_target(conn),
        "macro_targets": asdict(targets) if targets else None,
        "macro_split": asdict(split) if split else None,
        "macro_mode": load_macro_mode(conn),
    }
