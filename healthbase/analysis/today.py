"""Progress of a day's intake against the calorie and macro targets."""

from typing import Optional

from healthbase.analysis.display import display_fields
from healthbase.models import DailyHealthData, MacroIntake, MacroTargets
from healthbase.normalize.metrics import round_half_up

# Display order of the macro rings
MACRO_LABELS = (
    ("carbs", "Carbohydrates"),
    ("fats", "Fat"),
    ("protein", "Protein"),
)


def merge_targets(calorie_target: Optional[int], macro_targets: Optional[MacroTargets]) -> MacroTargets:
    """The stand-alone calorie target wins over the one saved with the macros."""
    if calorie_target is not None:
        calories = calorie_target
    elif macro_targets is not None:
        calories = macro_targets.calories
    else:
        calories = 0
    if macro_targets is None:
        return MacroTargets(calories=calories)
    return MacroTargets(calories=calories, protein=macro_targets.protein,
                        carbs=macro_targets.carbs, fats=macro_targets.fats)


def has_targets(targets: MacroTargets) -> bool:
    return bool(targets.calories or targets.protein or targets.carbs or targets.fats)


def calorie_progress(consumed: float, goal: float) -> dict:
    """Consumed vs goal. ``remaining`` is floored at 0 and ``over`` flags a surplus."""
    diff = (goal or 0) - consumed
    progress = min(100, int(round_half_up(consumed / goal * 100))) if goal and goal > 0 else 0
    return {
        "consumed": int(round_half_up(consumed)),
        "goal": goal or 0,
        "remaining": int(round_half_up(max(0, diff))),
        "over": diff < 0,
        "difference": int(round_half_up(abs(diff))),
        "progress_pct": progress,
    }


def macro_progress(intake: MacroIntake, targets: MacroTargets) -> list[dict]:
    return [
        {
            "key": key,
            "label": label,
            "value": max(0, int(round_half_up(getattr(intake, key)))),
            "goal": max(0, int(round_half_up(getattr(targets, key)))),
        }
        for key, label in MACRO_LABELS
    ]


def today_summary(health: DailyHealthData, calorie_target: Optional[int] = None,
                  macro_targets: Optional[MacroTargets] = None) -> dict:
    """JSON-ready Today view: the daily summary plus target progress."""
    targets = merge_targets(calorie_target, macro_targets)
    data = health.to_dict()
    data["activities"] = [display_fields(a) for a in health.activities]
    data["targets"] = {
        "calories": targets.calories,
        "protein": targets.protein,
        "carbs": targets.carbs,
        "fats": targets.fats,
    }
    data["has_targets"] = has_targets(targets)
    data["calorie_progress"] = calorie_progress(health.macros.calories, targets.calories)
    data["macro_progress"] = macro_progress(health.macros, targets)
    return data
