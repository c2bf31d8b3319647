import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_LOG_TO_FILE", "False")
os.environ.setdefault("APP_LOG_LEVEL", "WARNING")

import copy
import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from bson import ObjectId

from app import create_admin_app
from app.extensions.db import db


TEST_SECRET = "test-secret"
NOW = datetime(2025, 6, 15, 12, 0, 0)


# ---------------------------------------------------------------------------
# In-memory stand-in for the handful of pymongo collection calls the app uses
# ---------------------------------------------------------------------------

def _get_path(doc, path):
    value = doc
    for part in path.split("."):
        if isinstance(value, dict):
            value = value.get(part)
        else:
            return None
    return value


def _compare(value, op, operand):
    if op == "$in":
        if isinstance(value, list):
            return any(v in operand for v in value)
        return value in operand
    if op == "$ne":
        return value != operand
    if op == "$exists":
        return (value is not None) == bool(operand)
    if value is None:
        return False
    if op == "$gte":
        return value >= operand
    if op == "$gt":
        return value > operand
    if op == "$lte":
        return value <= operand
    if op == "$lt":
        return value < operand
    raise NotImplementedError(op)


def matches(doc, query):
    for key, condition in (query or {}).items():
        if key == "$or":
            if not any(matches(doc, sub) for sub in condition):
                return False
            continue
        if key == "$and":
            if not all(matches(doc, sub) for sub in condition):
                return False
            continue

        value = _get_path(doc, key)

        if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
            if "$regex" in condition:
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or not re.search(condition["$regex"], value, flags):
                    return False
            for op, operand in condition.items():
                if op in ("$regex", "$options"):
                    continue
                if not _compare(value, op, operand):
                    return False
        elif isinstance(value, list) and not isinstance(condition, list):
            if condition not in value:
                return False
        elif value != condition:
            return False
    return True


def _project(doc, projection):
    if not projection:
        return copy.deepcopy(doc)
    included = {k for k, v in projection.items() if v}
    if included:
        out = {k: copy.deepcopy(v) for k, v in doc.items() if k in included}
        if projection.get("_id", 1):
            out["_id"] = doc.get("_id")
        return out
    return {k: copy.deepcopy(v) for k, v in doc.items() if k not in projection}


def _sort_key(field):
    def key(doc):
        value = _get_path(doc, field)
        return (value is None, value if value is not None else 0)
    return key


class FakeCursor:
    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key_or_list, direction=1):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        for field, dirn in reversed(keys):
            self._docs.sort(key=_sort_key(field), reverse=dirn == -1)
        return self

    def skip(self, n):
        self._docs = self._docs[n:]
        return self

    def limit(self, n):
        if n:
            self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    def __init__(self, name):
        self.name = name
        self.docs = []
        self.indexes = []
        self.aggregate_rows = []
        self.pipelines = []
        self.fail_with = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def seed(self, *docs):
        for doc in docs:
            doc.setdefault("_id", ObjectId())
            self.docs.append(doc)
        return docs

    def find(self, query=None, projection=None):
        self._check()
        return FakeCursor(_project(d, projection) for d in self.docs if matches(d, query))

    def find_one(self, query=None, projection=None, sort=None):
        self._check()
        cursor = self.find(query, projection)
        if sort:
            cursor.sort(sort)
        return next(iter(cursor), None)

    def insert_one(self, doc):
        self._check()
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def update_one(self, query, update):
        self._check()
        for doc in self.docs:
            if matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=int(before != doc))
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_many(self, query):
        self._check()
        kept = [d for d in self.docs if not matches(d, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)

    def count_documents(self, query):
        self._check()
        return sum(1 for d in self.docs if matches(d, query))

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return "_".join(k for k, _ in keys)

    def aggregate(self, pipeline):
        """
        Pipelines are not evaluated: the rows a test primes in
        ``aggregate_rows`` stand for the pipeline output. A trailing $facet is
        honoured so pagination can be exercised.
        """
        self._check()
        self.pipelines.append(pipeline)
        rows = copy.deepcopy(self.aggregate_rows)
        last = pipeline[-1] if pipeline else {}
        if "$facet" in last:
            skip = last["$facet"]["data"][0]["$skip"]
            limit = last["$facet"]["data"][1]["$limit"]
            metadata = [{"totalUsers": len(rows)}] if rows else []
            return iter([{"data": rows[skip:skip + limit], "metadata": metadata}])
        return iter(rows)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.get_collection(name)

    def get_collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    return create_admin_app({
        "TESTING": True,
        "RATELIMIT_ENABLED": False,
        "SECRET_KEY": TEST_SECRET,
        "JWT_SECRET": TEST_SECRET,
        "MONGO_URI": "mongodb://localhost:27017/electric_shop_test",
    })


@pytest.fixture
def fake_db(monkeypatch):
    fake = FakeDatabase()
    monkeypatch.setattr(db, "get_collection", fake.get_collection)
    return fake


@pytest.fixture
def app_ctx(app, fake_db):
    with app.app_context():
        yield app


@pytest.fixture
def client(app, fake_db):
    return app.test_client()


@pytest.fixture(autouse=True)
def sync_bg(monkeypatch):
    """Run snapshot writes inline so tests can observe them and no thread outlives a test."""
    calls = []

    def run_inline(fn, *args, **kwargs):
        calls.append((fn, args, kwargs))
        return fn(*args, **kwargs)

    monkeypatch.setattr("app.services.reports.snapshot.run_bg", run_inline)
    return calls


def make_token(role="admin", principal_id=None, expires_in=3600, secret=TEST_SECRET):
    claims = {
        "id": principal_id or str(ObjectId()),
        "role": role,
        "name": "Test Principal",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token('admin')}"}


@pytest.fixture
def customer_id():
    return ObjectId()


@pytest.fixture
def customer_headers(customer_id):
    return {"Authorization": f"Bearer {make_token('customer', str(customer_id))}"}
