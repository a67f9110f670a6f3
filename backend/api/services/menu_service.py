import uuid
from typing import Dict, Any, List, Optional
from pymongo import ASCENDING, UpdateOne
from backend.tracker.timestamps import to_datetime, utc_now
from backend.tracker.volume import MENU_TYPES

menus_col = None
try:
    from backend.db_connection import menus_col
    print("Using menus_col from db_connection module")
except Exception:
    menus_col = None

DEFAULT_MENUS = [
    {"name": "Bench Press", "category": ["chest"], "type": "weight", "has_sides": False},
    {"name": "Smith Machine Press", "category": ["chest"], "type": "weight", "has_sides": False},
    {"name": "Dumbbell Press", "category": ["chest"], "type": "weight", "has_sides": False},
    {"name": "Lat Pulldown", "category": ["back"], "type": "weight", "has_sides": False},
    {"name": "Seated Row", "category": ["back"], "type": "weight", "has_sides": True},
    {"name": "Side Raise", "category": ["shoulders"], "type": "weight", "has_sides": True},
    {"name": "Leg Press", "category": ["legs"], "type": "weight", "has_sides": False},
    {"name": "Plank", "category": ["core"], "type": "time", "has_sides": False},
]


def _require_collection():
    if menus_col is None:
        raise RuntimeError(
            "No MongoDB collection available as 'menus_col'.\n"
            "Set MONGO_URI and DB_NAME so `backend.db_connection` can connect."
        )
    return menus_col


def _to_menu(doc: Dict[str, Any], user_id: str = "") -> Dict[str, Any]:
    created_at = to_datetime(doc.get("created_at"))
    menu_type = doc.get("type")
    order = doc.get("order")
    return {
        "menu_id": doc.get("menu_id"),
        "name": doc.get("name") or "",
        "category": doc.get("category") if isinstance(doc.get("category"), list) else [],
        "type": menu_type if menu_type in MENU_TYPES else "weight",
        "has_sides": bool(doc.get("has_sides")),
        "order": order if isinstance(order, (int, float)) and not isinstance(order, bool) else 0,
        "user_id": doc.get("user_id") or user_id,
        "created_at": created_at,
        "updated_at": to_datetime(doc["updated_at"]) if doc.get("updated_at") else created_at,
    }


def create_menu(user_id: str, menu_data: Dict[str, Any]) -> Dict[str, Any]:
    if not user_id:
        raise ValueError("user_id is required")
    name = (menu_data.get("name") or "").strip()
    if not name:
        raise ValueError("Menu name is required")
    col = _require_collection()

    now = utc_now()
    document = {
        "menu_id": uuid.uuid4().hex,
        "user_id": user_id,
        "name": name,
        "category": menu_data.get("category") if isinstance(menu_data.get("category"), list) else [],
        "type": menu_data.get("type") or "weight",
        "has_sides": bool(menu_data.get("has_sides")),
        "order": menu_data.get("order") or 0,
        "created_at": now,
        "updated_at": now,
    }
    col.insert_one(document)
    print(f"🆕 Menu '{name}' created for {user_id}")
    return _to_menu(document, user_id)


def get_menus(user_id: str) -> List[Dict[str, Any]]:
    if not user_id:
        print("⚠️ No user_id given, returning no menus")
        return []
    col = _require_collection()
    docs = col.find({"user_id": user_id}, {"_id": 0}).sort("order", ASCENDING)
    return [_to_menu(d, user_id) for d in docs]


def get_menu_by_id(user_id: str, menu_id: str) -> Optional[Dict[str, Any]]:
    if not user_id or not menu_id:
        raise ValueError("user_id and menu_id are required")
    col = _require_collection()
    doc = col.find_one({"user_id": user_id, "menu_id": menu_id}, {"_id": 0})
    return _to_menu(doc, user_id) if doc else None


def update_menu(user_id: str, menu_id: str, menu_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not user_id or not menu_id:
        raise ValueError("user_id and menu_id are required")
    col = _require_collection()

    update_data = {k: v for k, v in menu_data.items()
                   if v is not None and k not in ("menu_id", "_id", "updated_at")}
    if "created_at" in update_data:
        update_data["created_at"] = to_datetime(update_data["created_at"])
    if "category" in update_data and not isinstance(update_data["category"], list):
        print(f"⚠️ category is not a list, storing an empty list instead: {update_data['category']!r}")
        update_data["category"] = []
    update_data["user_id"] = user_id
    update_data["updated_at"] = utc_now()

    result = col.update_one({"user_id": user_id, "menu_id": menu_id}, {"$set": update_data})
    if result.matched_count == 0:
        return None
    return get_menu_by_id(user_id, menu_id)


def delete_menu(user_id: str, menu_id: str) -> bool:
    if not user_id or not menu_id:
        raise ValueError("user_id and menu_id are required")
    col = _require_collection()
    return col.delete_one({"user_id": user_id, "menu_id": menu_id}).deleted_count > 0


def delete_all_menus(user_id: str) -> int:
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()
    deleted = col.delete_many({"user_id": user_id}).deleted_count
    print(f"🗑️ Deleted {deleted} menu(s) for {user_id}")
    return deleted


def update_menus_order(user_id: str, menus: List[Dict[str, Any]]) -> int:
    if not user_id:
        raise ValueError("user_id is required")
    col = _require_collection()
    now = utc_now()
    operations = [
        UpdateOne(
            {"user_id": user_id, "menu_id": m["menu_id"]},
            {"$set": {"order": m.get("order") or 0, "updated_at": now}}
        )
        for m in menus if m.get("menu_id")
    ]
    if not operations:
        return 0
    result = col.bulk_write(operations, ordered=False)
    print(f"🔁 Reordered {result.matched_count} menu(s) for {user_id}")
    return result.matched_count


def initialize_default_menus(user_id: str) -> int:
    if not user_id:
        raise ValueError("user_id is required")
    existing = get_menus(user_id)
    existing_names = {m["name"] for m in existing}
    to_add = [m for m in DEFAULT_MENUS if m["name"] not in existing_names]
    if not to_add:
        return 0

    base_order = max(m["order"] for m in existing) if existing else -1
    now = utc_now()
    documents = [
        {
            **menu,
            "category": list(menu["category"]),
            "menu_id": uuid.uuid4().hex,
            "user_id": user_id,
            "order": base_order + i + 1,
            "created_at": now,
            "updated_at": now,
        }
        for i, menu in enumerate(to_add)
    ]
    _require_collection().insert_many(documents)
    print(f"🆕 Added {len(documents)} default menu(s) for {user_id}")
    return len(documents)
