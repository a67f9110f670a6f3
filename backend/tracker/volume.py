from typing import Any, Dict, Iterable, Tuple
from backend.tracker.timestamps import coerce_number

MENU_TYPES = ("weight", "bodyweight", "time", "distance")


def pick(doc: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First non-null value among `keys` (snake_case first, legacy camelCase after)."""
    if not isinstance(doc, dict):
        return default
    for key in keys:
        value = doc.get(key)
        if value is not None:
            return value
    return default


def iter_sets(exercise: Dict[str, Any]) -> Iterable[Dict[str, Any]]:
    sets = exercise.get("sets") if isinstance(exercise, dict) else None
    if not isinstance(sets, list):
        return []
    return [s for s in sets if isinstance(s, dict)]


def set_seconds(workout_set: Dict[str, Any], *order: str) -> float:
    return coerce_number(pick(workout_set, *(order or ("time", "duration"))))


def resolve_menu_type(exercise: Dict[str, Any]) -> str:
    """
    Canonical menu type of a logged exercise.

    The declared menu type wins. Otherwise it is inferred from the sets, with
    distance checked before weight because old distance entries carry no
    other marker.
    """
    declared = pick(exercise, "menu_type", "menuType")
    if declared in MENU_TYPES:
        return declared

    sets = iter_sets(exercise)
    legacy_type = exercise.get("type") if isinstance(exercise, dict) else None

    if any(coerce_number(s.get("distance")) > 0 for s in sets):
        return "distance"
    if legacy_type == "time":
        return "time"
    has_weight = any(
        coerce_number(s.get("weight")) > 0 and coerce_number(s.get("reps")) > 0 for s in sets
    )
    if has_weight or legacy_type == "weight":
        return "weight"
    if any(set_seconds(s, "duration", "time") > 0 for s in sets):
        return "time"
    return "bodyweight"


def set_volume(menu_type: str, workout_set: Dict[str, Any]) -> float:
    if menu_type == "weight":
        weight = coerce_number(workout_set.get("weight"))
        reps = coerce_number(workout_set.get("reps"))
        if weight <= 0 or reps <= 0:
            return 0.0
        return weight * reps
    if menu_type == "bodyweight":
        value = coerce_number(workout_set.get("reps"))
    elif menu_type == "time":
        value = set_seconds(workout_set, "time", "duration")
    elif menu_type == "distance":
        value = coerce_number(workout_set.get("distance"))
    else:
        return 0.0
    return value if value > 0 else 0.0


def volume_for_sets(menu_type: str, sets: Iterable[Dict[str, Any]]) -> float:
    return sum((set_volume(menu_type, s) for s in sets if isinstance(s, dict)), 0.0)


def compute_exercise_volume(exercise: Dict[str, Any]) -> Tuple[str, float]:
    menu_type = resolve_menu_type(exercise)
    return menu_type, volume_for_sets(menu_type, iter_sets(exercise))


def compute_total_volume(exercises: Any) -> float:
    """Weight-type volume of a whole workout, stored as `total_volume` on save."""
    if not isinstance(exercises, list):
        return 0.0
    total = 0.0
    for exercise in exercises:
        menu_type, volume = compute_exercise_volume(exercise)
        if menu_type == "weight":
            total += volume
    return total
