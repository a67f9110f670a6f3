import secrets
import uuid
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional
from backend.auth import hash_password, verify_password
from backend.config import SHARE_DURATION_DAYS
from backend.tracker.timestamps import normalize_timestamp, to_datetime, utc_now
from backend.api.services.workout_service import get_dashboard_stats, get_workouts

shares_col = None
try:
    from backend.db_connection import shares_col
    print("Using shares_col from db_connection module")
except Exception:
    shares_col = None

SHARE_DURATION = timedelta(days=SHARE_DURATION_DAYS)


def _require_collection():
    if shares_col is None:
        raise RuntimeError(
            "No MongoDB collection available as 'shares_col'.\n"
            "Set MONGO_URI and DB_NAME so `backend.db_connection` can connect."
        )
    return shares_col


def generate_share_id() -> str:
    return uuid.uuid4().hex[:12]


def generate_password() -> str:
    return str(1000 + secrets.randbelow(9000))


def _to_share(doc: Dict[str, Any]) -> Dict[str, Any]:
    created_at = to_datetime(doc.get("created_at"))
    expires_at = normalize_timestamp(doc.get("expires_at"))
    return {
        "share_id": doc.get("share_id") or "",
        "user_id": doc.get("user_id") or "",
        "created_at": created_at,
        # a share without a readable expiry gets a fresh one
        "expires_at": utc_now() + SHARE_DURATION if expires_at.is_fallback else expires_at.value,
        "is_active": bool(doc.get("is_active")),
        "updated_at": to_datetime(doc["updated_at"]) if doc.get("updated_at") else None,
    }


def create_share(user_id: str) -> Dict[str, Any]:
    """New share link for `user_id`. The plain password is only returned here."""
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()

    share_id = generate_share_id()
    password = generate_password()
    now = utc_now()
    document = {
        "share_id": share_id,
        "user_id": user_id,
        "password_hash": hash_password(password),
        "created_at": now,
        "updated_at": now,
        "expires_at": now + SHARE_DURATION,
        "is_active": True,
    }
    col.insert_one(document)
    print(f"🔗 Share {share_id} created for {user_id}")
    return {**_to_share(document), "password": password}


def _find_share(share_id: str) -> Optional[Dict[str, Any]]:
    if not share_id:
        return None
    return _require_collection().find_one({"share_id": share_id}, {"_id": 0})


def get_share(share_id: str) -> Optional[Dict[str, Any]]:
    doc = _find_share(share_id)
    return _to_share(doc) if doc else None


def _password_matches(doc: Dict[str, Any], password: str) -> bool:
    if doc.get("password_hash"):
        return verify_password(password, doc["password_hash"])
    # links created before hashing stored the password as-is
    legacy = doc.get("password")
    if isinstance(legacy, str) and legacy:
        return secrets.compare_digest(legacy, str(password))
    return False


def verify_share(share_id: str, password: str, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
    doc = _find_share(share_id)
    if not doc:
        return None
    share = _to_share(doc)
    now = to_datetime(now) if now else utc_now()
    if not share["is_active"] or share["expires_at"] < now or not _password_matches(doc, password):
        return None
    return share


def deactivate_share(share_id: str, user_id: Optional[str] = None) -> bool:
    if not share_id:
        raise ValueError("share_id is required")
    query = {"share_id": share_id}
    if user_id:
        query["user_id"] = user_id
    result = _require_collection().update_one(
        query, {"$set": {"is_active": False, "updated_at": utc_now()}}
    )
    return result.matched_count > 0


def get_user_shares(user_id: str) -> List[Dict[str, Any]]:
    if not user_id:
        return []
    docs = _require_collection().find({"user_id": user_id}, {"_id": 0})
    return [_to_share(d) for d in docs]


def get_shared_workouts(share_id: str, password: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    share = verify_share(share_id, password, now)
    if share is None:
        raise PermissionError("Share link is invalid, expired or the password is wrong")
    owner = share["user_id"]
    return {
        "share": share,
        "workouts": get_workouts(owner),
        "stats": get_dashboard_stats(owner, now),
    }
