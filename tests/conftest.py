import copy
import itertools
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ServerSelectionTimeoutError

from backend.api.services import menu_service, share_service, workout_service

# Wednesday 2026-10-21 12:00 in UTC+9; the week runs Mon 2026-10-19 .. Mon 2026-10-26
FROZEN_NOW = datetime(2026, 10, 21, 3, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


def _matches(doc, query):
    for key, expected in (query or {}).items():
        value = doc.get(key)
        if isinstance(expected, dict) and any(k.startswith("$") for k in expected):
            for op, operand in expected.items():
                if op == "$gte" and not (value is not None and value >= operand):
                    return False
                if op == "$gt" and not (value is not None and value > operand):
                    return False
                if op == "$lt" and not (value is not None and value < operand):
                    return False
                if op == "$lte" and not (value is not None and value <= operand):
                    return False
                if op == "$in" and value not in operand:
                    return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key, direction=ASCENDING):
        keys = key if isinstance(key, list) else [(key, direction)]
        for field, order in reversed(keys):
            self._docs.sort(key=lambda d: (d.get(field) is not None, d.get(field)),
                            reverse=order == DESCENDING)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    """In-memory stand-in for the handful of pymongo Collection calls the services make."""

    def __init__(self, docs=None):
        self.docs = []
        for doc in docs or []:
            self.insert_one(doc)

    def _public(self, doc):
        out = copy.deepcopy(doc)
        out.pop("_id", None)
        return out

    def find(self, query=None, projection=None):
        return FakeCursor(self._public(d) for d in self.docs if _matches(d, query))

    def find_one(self, query=None, projection=None, sort=None):
        for doc in self.docs:
            if _matches(doc, query):
                return self._public(doc)
        return None

    def insert_one(self, doc):
        doc.setdefault("_id", next(_ids))
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def insert_many(self, docs):
        return SimpleNamespace(inserted_ids=[self.insert_one(d).inserted_id for d in docs])

    def update_one(self, query, update, upsert=False):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    def delete_one(self, query):
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def delete_many(self, query):
        kept = [d for d in self.docs if not _matches(d, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)

    def bulk_write(self, operations, ordered=True):
        matched = sum(self.update_one(op._filter, op._doc).matched_count for op in operations)
        return SimpleNamespace(matched_count=matched, modified_count=matched)

    def create_index(self, keys, **kwargs):
        return "_".join(k for k, _ in keys)


class UnreachableCollection(FakeCollection):
    def find(self, query=None, projection=None):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")


@pytest.fixture
def workouts(monkeypatch):
    col = FakeCollection()
    monkeypatch.setattr(workout_service, "workouts_col", col)
    return col


@pytest.fixture
def menus(monkeypatch):
    col = FakeCollection()
    monkeypatch.setattr(menu_service, "menus_col", col)
    return col


@pytest.fixture
def shares(monkeypatch, workouts):
    col = FakeCollection()
    monkeypatch.setattr(share_service, "shares_col", col)
    return col
