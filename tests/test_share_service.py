from datetime import timedelta

import pytest

from backend.api.services.share_service import (
    create_share,
    deactivate_share,
    get_share,
    get_shared_workouts,
    get_user_shares,
    verify_share,
)
from backend.api.services.workout_service import create_workout
from backend.tracker.timestamps import utc_now
from tests.conftest import FROZEN_NOW


class TestShares:
    def test_create_returns_the_password_once(self, shares):
        share = create_share("user-1")
        assert len(share["password"]) == 4
        assert share["password"].isdigit()
        stored = shares.docs[0]
        assert "password" not in stored
        assert stored["password_hash"] != share["password"]
        assert "password" not in get_share(share["share_id"])

    def test_expires_after_thirty_days(self, shares):
        share = create_share("user-1")
        assert share["expires_at"] - share["created_at"] == timedelta(days=30)

    def test_verify(self, shares):
        share = create_share("user-1")
        assert verify_share(share["share_id"], share["password"])["user_id"] == "user-1"
        assert verify_share(share["share_id"], "0000" if share["password"] != "0000" else "1111") is None
        assert verify_share("missing", share["password"]) is None

    def test_expired_share(self, shares):
        share = create_share("user-1")
        later = utc_now() + timedelta(days=31)
        assert verify_share(share["share_id"], share["password"], now=later) is None

    def test_deactivated_share(self, shares):
        share = create_share("user-1")
        assert deactivate_share(share["share_id"], "user-2") is False
        assert deactivate_share(share["share_id"], "user-1") is True
        assert verify_share(share["share_id"], share["password"]) is None

    def test_legacy_plaintext_password(self, shares):
        shares.insert_one({
            "share_id": "legacy",
            "user_id": "user-1",
            "password": "4321",
            "created_at": utc_now(),
            "expires_at": utc_now() + timedelta(days=1),
            "is_active": True,
        })
        assert verify_share("legacy", "4321") is not None
        assert verify_share("legacy", "1234") is None

    def test_missing_expiry_gets_a_fresh_one(self, shares):
        shares.insert_one({"share_id": "old", "user_id": "user-1", "password": "1111", "is_active": True})
        share = get_share("old")
        assert share["expires_at"] > utc_now() + timedelta(days=29)

    def test_user_shares(self, shares):
        create_share("user-1")
        create_share("user-1")
        create_share("user-2")
        assert len(get_user_shares("user-1")) == 2
        assert get_user_shares("") == []

    def test_shared_workouts_and_stats(self, shares):
        create_workout("user-1", {"date": "2026-10-20", "exercises": [
            {"name": "Bench Press", "sets": [{"weight": 60, "reps": 10}, {"weight": 60, "reps": 8}]},
        ]})
        share = create_share("user-1")
        shared = get_shared_workouts(share["share_id"], share["password"], now=FROZEN_NOW)
        assert len(shared["workouts"]) == 1
        assert shared["stats"].this_week.total_volume == 1080

    def test_shared_workouts_with_wrong_password(self, shares):
        share = create_share("user-1")
        with pytest.raises(PermissionError):
            get_shared_workouts(share["share_id"], "wrong")
