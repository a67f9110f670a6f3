import uuid
from datetime import datetime, date, timedelta, timezone
from typing import Dict, Any, List, Optional
from dateutil import parser
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from backend.api.models.stats_model import DashboardStats, WeeklyStats
from backend.tracker.timestamps import to_datetime, utc_now
from backend.tracker.volume import compute_total_volume, pick
from backend.tracker.weekly_stats import (aggregate_weekly_stats, last_week_window, local_day, local_now,
                                          this_week_window)

workouts_col = None
try:
    from backend.db_connection import workouts_col
    print("Using workouts_col from db_connection module")
except Exception:
    workouts_col = None


class WorkoutFetchError(RuntimeError):
    """The workout store could not supply a user's records."""


def _require_collection():
    if workouts_col is None:
        raise RuntimeError(
            "No MongoDB collection available as 'workouts_col'.\n"
            "Set MONGO_URI and DB_NAME so `backend.db_connection` can connect."
        )
    return workouts_col


def _parse_workout_date(raw) -> datetime:
    """Stored workout date: the UTC midnight stamp of the session's local day."""
    if isinstance(raw, datetime):
        return local_day(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, str):
        try:
            return local_day(parser.isoparse(raw.strip()))
        except (ValueError, OverflowError):
            raise ValueError(f"Invalid date format: {raw!r}")
    raise ValueError(f"Unknown date format: {raw!r}")


def _normalize_time_field(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return to_datetime(value)
    if isinstance(value, str):
        try:
            return to_datetime(parser.isoparse(value.strip()))
        except (ValueError, OverflowError):
            return None
    return None


def _non_negative(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return max(0, value)


def _remove_none(obj):
    if isinstance(obj, list):
        return [_remove_none(item) for item in obj if item is not None]
    if isinstance(obj, dict):
        return {k: _remove_none(v) for k, v in obj.items() if v is not None}
    return obj


def _duration_field(doc: Dict[str, Any], *keys: str, default=None):
    value = pick(doc, *keys)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _to_workout(doc: Dict[str, Any], user_id: str = "") -> Dict[str, Any]:
    created_at = to_datetime(doc["created_at"]) if doc.get("created_at") else utc_now()
    return {
        "workout_id": doc.get("workout_id"),
        "user_id": doc.get("user_id") or user_id,
        "date": to_datetime(doc.get("date")).isoformat(),
        "exercises": doc.get("exercises") or [],
        "notes": doc.get("notes") or "",
        "total_volume": pick(doc, "total_volume", "totalVolume", default=0),
        "created_at": created_at,
        "updated_at": to_datetime(doc["updated_at"]) if doc.get("updated_at") else created_at,
        "start_time": to_datetime(doc["start_time"]) if doc.get("start_time") else None,
        "end_time": to_datetime(doc["end_time"]) if doc.get("end_time") else None,
        "duration": _duration_field(doc, "duration"),
        "warmup_duration": _duration_field(doc, "warmup_duration", "warmupDuration", default=0),
        "cooldown_duration": _duration_field(doc, "cooldown_duration", "cooldownDuration", default=0),
    }


def create_workout(user_id: str, workout_payload: Dict[str, Any]) -> Dict[str, Any]:
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()

    exercises = workout_payload.get("exercises") or []
    total_volume = workout_payload.get("total_volume")
    if total_volume is None:
        total_volume = compute_total_volume(exercises)

    now = utc_now()
    document = _remove_none({
        "workout_id": uuid.uuid4().hex,
        "user_id": user_id,
        "date": _parse_workout_date(workout_payload.get("date")),
        "exercises": exercises,
        "notes": workout_payload.get("notes"),
        "total_volume": total_volume,
        "start_time": _normalize_time_field(workout_payload.get("start_time")),
        "end_time": _normalize_time_field(workout_payload.get("end_time")),
        "duration": workout_payload.get("duration"),
        "warmup_duration": _non_negative(workout_payload.get("warmup_duration")),
        "cooldown_duration": _non_negative(workout_payload.get("cooldown_duration")),
        "created_at": now,
        "updated_at": now,
    })
    col.insert_one(document)
    print(f"🆕 Workout {document['workout_id']} created for {user_id}")
    return _to_workout(document, user_id)


def get_workouts(user_id: str) -> List[Dict[str, Any]]:
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()
    docs = col.find({"user_id": user_id}, {"_id": 0}).sort("date", DESCENDING)
    return [_to_workout(d, user_id) for d in docs]


def get_workout_by_id(user_id: str, workout_id: str) -> Optional[Dict[str, Any]]:
    if not user_id or not workout_id:
        raise ValueError("user_id and workout_id are required")
    col = _require_collection()
    doc = col.find_one({"user_id": user_id, "workout_id": workout_id}, {"_id": 0})
    if not doc:
        return None
    return _to_workout(doc, user_id)


def update_workout(user_id: str, workout_id: str, workout_payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not user_id or not workout_id:
        raise ValueError("user_id and workout_id are required")
    col = _require_collection()

    update_data = {k: v for k, v in workout_payload.items()
                   if k not in ("workout_id", "user_id", "created_at", "updated_at", "_id")}
    if "date" in update_data:
        update_data["date"] = _parse_workout_date(update_data["date"])
    for field in ("start_time", "end_time"):
        if field in update_data:
            update_data[field] = _normalize_time_field(update_data[field])
    for field in ("warmup_duration", "cooldown_duration"):
        if field in update_data:
            update_data[field] = _non_negative(update_data[field])
    if "exercises" in update_data and update_data.get("total_volume") is None:
        update_data["total_volume"] = compute_total_volume(update_data["exercises"])
    update_data["updated_at"] = utc_now()

    result = col.update_one(
        {"user_id": user_id, "workout_id": workout_id},
        {"$set": _remove_none(update_data)}
    )
    if result.matched_count == 0:
        return None
    print(f"🔁 Workout {workout_id} updated for {user_id}")
    return get_workout_by_id(user_id, workout_id)


def delete_workout(user_id: str, workout_id: str) -> bool:
    if not user_id or not workout_id:
        raise ValueError("user_id and workout_id are required")
    col = _require_collection()
    result = col.delete_one({"user_id": user_id, "workout_id": workout_id})
    return result.deleted_count > 0


def get_recent_workouts(user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()
    docs = (col.find({"user_id": user_id}, {"_id": 0})
            .sort([("date", DESCENDING), ("created_at", DESCENDING)])
            .limit(limit))
    return [_to_workout(d, user_id) for d in docs]


def get_todays_workouts(user_id: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Workouts on the local calendar day; older documents may hold a full instant instead of a day stamp."""
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()
    local = local_now(now)
    today = datetime(local.year, local.month, local.day, tzinfo=timezone.utc)
    try:
        docs = col.find(
            {"user_id": user_id,
             "date": {"$gte": today - timedelta(days=1), "$lt": today + timedelta(days=2)}},
            {"_id": 0}
        ).sort("date", DESCENDING)
        return [_to_workout(d, user_id) for d in docs if local_day(to_datetime(d.get("date"))) == today]
    except PyMongoError as e:
        print(f"❌ Error getting today's workouts: {e}")
        return []


def fetch_workout_records(user_id: str) -> List[Dict[str, Any]]:
    if not user_id:
        raise ValueError("user_id is required")
    if workouts_col is None:
        raise WorkoutFetchError("Workout store is not configured")
    try:
        return list(workouts_col.find({"user_id": user_id}, {"_id": 0}))
    except PyMongoError as e:
        print(f"❌ Error fetching workouts for {user_id}: {e}")
        raise WorkoutFetchError(f"Error fetching workouts: {e}") from e


def _log_stats(label: str, user_id: str, stats: WeeklyStats):
    print(f"📊 {label} stats for {user_id}: {stats.count} workouts, "
          f"warmup {stats.warmup_total_minutes} min, cooldown {stats.cooldown_total_minutes} min")
    if stats.fallback_dates:
        print(f"⚠️ {stats.fallback_dates} workout(s) for {user_id} have an unreadable date")


def get_this_weeks_stats(user_id: str, now: Optional[datetime] = None) -> WeeklyStats:
    now = now or utc_now()
    records = fetch_workout_records(user_id)
    start, end = this_week_window(now)
    stats = aggregate_weekly_stats(records, start, end, now)
    _log_stats("This week", user_id, stats)
    return stats


def get_last_weeks_stats(user_id: str, now: Optional[datetime] = None) -> WeeklyStats:
    now = now or utc_now()
    records = fetch_workout_records(user_id)
    start, end = last_week_window(now)
    stats = aggregate_weekly_stats(records, start, end, now)
    _log_stats("Last week", user_id, stats)
    return stats


def get_dashboard_stats(user_id: str, now: Optional[datetime] = None) -> DashboardStats:
    now = now or utc_now()
    records = fetch_workout_records(user_id)
    this_start, this_end = this_week_window(now)
    last_start, last_end = last_week_window(now)
    return DashboardStats(
        this_week=aggregate_weekly_stats(records, this_start, this_end, now),
        last_week=aggregate_weekly_stats(records, last_start, last_end, now),
    )
