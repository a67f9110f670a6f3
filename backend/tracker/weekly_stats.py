"""
Weekly workout statistics.

Everything is bucketed by the user's local calendar day at a fixed UTC
offset (`LOCAL_UTC_OFFSET_HOURS`). A local day is represented by the UTC
midnight carrying its date, which is also how workout dates are stored.
Instants with a time of day (older documents, fallback "now") are moved
into the local offset before their day is taken, so "now", record dates,
this week and last week all share one calendar.
"""

import math
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, Optional, Tuple
from backend.config import LOCAL_UTC_OFFSET_HOURS, WARMUP_KEYWORDS, COOLDOWN_KEYWORDS
from backend.api.models.stats_model import VolumeByType, WeeklyStats
from backend.tracker.timestamps import normalize_timestamp, utc_now
from backend.tracker.volume import compute_exercise_volume, iter_sets, pick, resolve_menu_type, set_seconds

Window = Tuple[datetime, datetime]


def _aware(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def _midnight(instant: datetime) -> datetime:
    return datetime(instant.year, instant.month, instant.day, tzinfo=timezone.utc)


def start_of_week(instant: datetime) -> datetime:
    d = _aware(instant)
    # datetime.weekday(): Monday == 0
    return _midnight(d - timedelta(days=d.weekday()))


def end_of_week(instant: datetime) -> datetime:
    return start_of_week(instant) + timedelta(days=7)


def local_now(now: Optional[datetime] = None, offset_hours: float = LOCAL_UTC_OFFSET_HOURS) -> datetime:
    return _aware(now or utc_now()) + timedelta(hours=offset_hours)


def local_day(instant: datetime, offset_hours: float = LOCAL_UTC_OFFSET_HOURS) -> datetime:
    """
    UTC midnight stamp of the local calendar day `instant` falls on.

    A value that is already a UTC midnight is a stored day stamp and keeps
    its date.
    """
    d = _aware(instant)
    if d.time() != time(0):
        d = d + timedelta(hours=offset_hours)
    return _midnight(d)


def this_week_window(now: Optional[datetime] = None, offset_hours: float = LOCAL_UTC_OFFSET_HOURS) -> Window:
    start = start_of_week(local_now(now, offset_hours))
    return start, start + timedelta(days=7)


def last_week_window(now: Optional[datetime] = None, offset_hours: float = LOCAL_UTC_OFFSET_HOURS) -> Window:
    this_start, _ = this_week_window(now, offset_hours)
    return this_start - timedelta(days=7), this_start


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def seconds_to_minutes(seconds: float) -> int:
    return round_half_up(seconds / 60)


def _matches(name: str, keywords: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(k.lower() in lowered for k in keywords)


def _explicit_seconds(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value) or value <= 0:
        return 0.0
    return float(value)


@dataclass
class WarmupCooldown:
    warmup_seconds: float = 0.0
    cooldown_seconds: float = 0.0
    warmup_minutes: int = 0
    cooldown_minutes: int = 0


def reconcile_warmup_cooldown(workout: Dict[str, Any],
                              warmup_keywords: Iterable[str] = WARMUP_KEYWORDS,
                              cooldown_keywords: Iterable[str] = COOLDOWN_KEYWORDS) -> WarmupCooldown:
    """
    Warmup and cooldown time of one workout.

    Adds the explicit `warmup_duration`/`cooldown_duration` fields (seconds)
    to the set time of time-type exercises whose name carries a warmup or
    cooldown keyword. Both sources count when both are filled in. Minutes are
    rounded per source and then summed.
    """
    result = WarmupCooldown()
    explicit_warmup = _explicit_seconds(pick(workout, "warmup_duration", "warmupDuration"))
    explicit_cooldown = _explicit_seconds(pick(workout, "cooldown_duration", "cooldownDuration"))
    if explicit_warmup > 0:
        result.warmup_seconds += explicit_warmup
        result.warmup_minutes += seconds_to_minutes(explicit_warmup)
    if explicit_cooldown > 0:
        result.cooldown_seconds += explicit_cooldown
        result.cooldown_minutes += seconds_to_minutes(explicit_cooldown)

    exercises = workout.get("exercises") if isinstance(workout, dict) else None
    if not isinstance(exercises, list):
        return result

    warmup_from_menus = 0.0
    cooldown_from_menus = 0.0
    for exercise in exercises:
        name = pick(exercise, "menu_name", "menuName", "name", default="")
        if not isinstance(name, str) or not name or resolve_menu_type(exercise) != "time":
            continue
        seconds = sum(
            (v for v in (set_seconds(s, "time", "duration") for s in iter_sets(exercise)) if v > 0),
            0.0,
        )
        if seconds <= 0:
            continue
        if _matches(name, warmup_keywords):
            warmup_from_menus += seconds
        if _matches(name, cooldown_keywords):
            cooldown_from_menus += seconds

    if warmup_from_menus > 0:
        result.warmup_seconds += warmup_from_menus
        result.warmup_minutes += seconds_to_minutes(warmup_from_menus)
    if cooldown_from_menus > 0:
        result.cooldown_seconds += cooldown_from_menus
        result.cooldown_minutes += seconds_to_minutes(cooldown_from_menus)
    return result


def day_key(day: datetime) -> str:
    return _aware(day).strftime("%Y-%m-%d")


def aggregate_weekly_stats(records: Iterable[Dict[str, Any]],
                           window_start: datetime,
                           window_end: datetime,
                           now: Optional[datetime] = None,
                           offset_hours: float = LOCAL_UTC_OFFSET_HOURS) -> WeeklyStats:
    """
    Fold workout documents whose local day is in [window_start, window_end) into WeeklyStats.

    Malformed records never raise: an unreadable date falls back to `now`
    and is counted in `fallback_dates`, unreadable numbers contribute zero.
    """
    now = now or utc_now()
    today = _midnight(local_now(now, offset_hours))
    window_start, window_end = _aware(window_start), _aware(window_end)
    count = 0
    total_volume = 0.0
    fallback_dates = 0
    volume_by_type = {"weight": 0.0, "bodyweight": 0.0, "time": 0.0, "distance": 0.0}
    warmup_seconds = cooldown_seconds = 0.0
    warmup_minutes = cooldown_minutes = 0
    days = set()
    exercise_names = set()

    for record in records:
        if not isinstance(record, dict):
            continue
        normalized = normalize_timestamp(record.get("date"), now)
        if normalized.is_fallback:
            fallback_dates += 1
            workout_day = today
        else:
            workout_day = local_day(normalized.value, offset_hours)
        if not (window_start <= workout_day < window_end):
            continue

        count += 1
        stored_volume = pick(record, "total_volume", "totalVolume", default=0)
        if isinstance(stored_volume, (int, float)) and not isinstance(stored_volume, bool) \
                and math.isfinite(stored_volume):
            total_volume += stored_volume
        days.add(day_key(workout_day))

        exercises = record.get("exercises")
        if isinstance(exercises, list):
            for exercise in exercises:
                name = exercise.get("name") if isinstance(exercise, dict) else None
                if isinstance(name, str) and name.strip():
                    exercise_names.add(name.strip())
                menu_type, volume = compute_exercise_volume(exercise)
                if volume > 0:
                    volume_by_type[menu_type] += volume

        warm_cool = reconcile_warmup_cooldown(record)
        warmup_seconds += warm_cool.warmup_seconds
        cooldown_seconds += warm_cool.cooldown_seconds
        warmup_minutes += warm_cool.warmup_minutes
        cooldown_minutes += warm_cool.cooldown_minutes

    return WeeklyStats(
        count=count,
        total_volume=total_volume,
        unique_days=len(days),
        unique_exercises=len(exercise_names),
        volume_by_type=VolumeByType(**volume_by_type),
        warmup_total_minutes=warmup_minutes,
        cooldown_total_minutes=cooldown_minutes,
        warmup_total_seconds=warmup_seconds,
        cooldown_total_seconds=cooldown_seconds,
        fallback_dates=fallback_dates,
        window_start=window_start,
        window_end=window_end,
    )
