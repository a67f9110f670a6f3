import pytest

from backend.api.services import menu_service
from backend.api.services.menu_service import (
    DEFAULT_MENUS,
    create_menu,
    delete_all_menus,
    delete_menu,
    get_menu_by_id,
    get_menus,
    initialize_default_menus,
    update_menu,
    update_menus_order,
)


class TestMenus:
    def test_create_and_get(self, menus):
        menu = create_menu("user-1", {"name": "  Deadlift ", "category": ["back"], "type": "weight"})
        assert menu["name"] == "Deadlift"
        assert get_menu_by_id("user-1", menu["menu_id"])["category"] == ["back"]
        assert get_menu_by_id("user-2", menu["menu_id"]) is None

    def test_name_is_required(self, menus):
        with pytest.raises(ValueError):
            create_menu("user-1", {"name": "   "})

    def test_unknown_type_reads_as_weight(self, menus):
        menus.insert_one({"menu_id": "m1", "user_id": "user-1", "name": "Old", "type": "cardio", "category": "legs"})
        menu = get_menu_by_id("user-1", "m1")
        assert menu["type"] == "weight"
        assert menu["category"] == []

    def test_list_is_sorted_by_order(self, menus):
        create_menu("user-1", {"name": "B", "order": 2})
        create_menu("user-1", {"name": "A", "order": 1})
        create_menu("user-2", {"name": "C", "order": 0})
        assert [m["name"] for m in get_menus("user-1")] == ["A", "B"]

    def test_list_without_user(self, menus):
        assert get_menus("") == []

    def test_update(self, menus):
        menu = create_menu("user-1", {"name": "Plank", "type": "time"})
        updated = update_menu("user-1", menu["menu_id"], {"has_sides": True, "category": "core", "user_id": "user-2"})
        assert updated["has_sides"] is True
        assert updated["category"] == []
        assert updated["user_id"] == "user-1"
        assert update_menu("user-1", "missing", {"name": "x"}) is None

    def test_delete_one_and_all(self, menus):
        first = create_menu("user-1", {"name": "A"})
        create_menu("user-1", {"name": "B"})
        create_menu("user-2", {"name": "C"})
        assert delete_menu("user-1", first["menu_id"]) is True
        assert delete_menu("user-1", first["menu_id"]) is False
        assert delete_all_menus("user-1") == 1
        assert len(get_menus("user-2")) == 1

    def test_reorder(self, menus):
        a = create_menu("user-1", {"name": "A", "order": 0})
        b = create_menu("user-1", {"name": "B", "order": 1})
        matched = update_menus_order("user-1", [
            {"menu_id": a["menu_id"], "order": 1},
            {"menu_id": b["menu_id"], "order": 0},
            {"order": 5},
        ])
        assert matched == 2
        assert [m["name"] for m in get_menus("user-1")] == ["B", "A"]

    def test_reorder_nothing(self, menus):
        assert update_menus_order("user-1", []) == 0

    def test_default_menus_are_added_once(self, menus):
        create_menu("user-1", {"name": "Bench Press", "order": 4})
        added = initialize_default_menus("user-1")
        assert added == len(DEFAULT_MENUS) - 1
        listed = get_menus("user-1")
        assert listed[0]["name"] == "Bench Press"
        assert listed[1]["order"] == 5
        assert initialize_default_menus("user-1") == 0

    def test_missing_collection(self, monkeypatch):
        monkeypatch.setattr(menu_service, "menus_col", None)
        with pytest.raises(RuntimeError):
            get_menus("user-1")
