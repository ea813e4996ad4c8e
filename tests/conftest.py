"""Shared test fixtures for FitTrack backend tests."""

import copy
import re
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.auth import JWTTokenIssuer, TokenPurpose
from common.utils.password import PasswordHasher
from fittrack.services.auth.auth_service import AuthService
from fittrack.services.user.account_service import AccountService


# ─────────────────────────────────────────────────────────────────
# In-memory collection double
# ─────────────────────────────────────────────────────────────────


def _matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
            continue

        value = doc.get(key)
        if isinstance(cond, dict) and any(k.startswith("$") for k in cond):
            for op, arg in cond.items():
                if op == "$ne":
                    if value == arg:
                        return False
                elif op == "$gte":
                    if value is None or value < arg:
                        return False
                elif op == "$regex":
                    flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
                    if not isinstance(value, str) or not re.search(arg, value, flags):
                        return False
                elif op == "$options":
                    continue
                else:
                    raise NotImplementedError(op)
        elif value != cond:
            return False
    return True


# Aggregation limited to the stages and operators the services use

def _field(doc, path):
    value = doc
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _eval(doc, expr):
    if isinstance(expr, str) and expr.startswith("$"):
        return _field(doc, expr[1:])
    if isinstance(expr, dict) and len(expr) == 1:
        op, arg = next(iter(expr.items()))
        if op == "$subtract":
            return _eval(doc, arg[0]) - _eval(doc, arg[1])
        if op == "$dayOfWeek":
            # Mongo counts 1 = Sunday ... 7 = Saturday, in UTC
            value = _eval(doc, arg).astimezone(timezone.utc)
            return value.isoweekday() % 7 + 1
        if op == "$size":
            return len(_eval(doc, arg))
        if op == "$ifNull":
            value = _eval(doc, arg[0])
            return _eval(doc, arg[1]) if value is None else value
        raise NotImplementedError(op)
    return expr


def _sort(docs, args):
    # Stable sorts applied from the least significant key
    for key, direction in reversed(list(args.items())):
        docs.sort(key=lambda d: _field(d, key), reverse=direction == -1)
    return docs


def _group(docs, args):
    groups = {}
    for doc in docs:
        key = _eval(doc, args["_id"])
        groups.setdefault(repr(key), (key, []))[1].append(doc)

    results = []
    for key, members in groups.values():
        out = {"_id": key}
        for name, acc in args.items():
            if name == "_id":
                continue
            op, arg = next(iter(acc.items()))
            values = [_eval(d, arg) for d in members]
            numbers = [v for v in values if isinstance(v, (int, float))]
            if op == "$sum":
                out[name] = sum(numbers)
            elif op == "$avg":
                out[name] = sum(numbers) / len(numbers) if numbers else None
            elif op == "$first":
                out[name] = values[0]
            else:
                raise NotImplementedError(op)
        results.append(out)
    return results


def _unwind(docs, args):
    path = args["path"][1:]
    index_field = args.get("includeArrayIndex")
    out = []
    for doc in docs:
        for i, item in enumerate(doc.get(path) or []):
            row = {**doc, path: item}
            if index_field:
                row[index_field] = i
            out.append(row)
    return out


def run_pipeline(docs, pipeline):
    docs = [copy.deepcopy(d) for d in docs]
    for stage in pipeline:
        op, args = next(iter(stage.items()))
        if op == "$match":
            docs = [d for d in docs if _matches(d, args)]
        elif op == "$sort":
            docs = _sort(docs, args)
        elif op == "$unwind":
            docs = _unwind(docs, args)
        elif op == "$group":
            docs = _group(docs, args)
        elif op == "$limit":
            docs = docs[:args]
        else:
            raise NotImplementedError(op)
    return docs


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda d: d.get(key), reverse=direction == -1)
        return self

    def skip(self, n):
        self._docs = self._docs[n:]
        return self

    def limit(self, n):
        if n:
            self._docs = self._docs[:n]
        return self

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Motor-shaped collection holding documents in a list."""

    def __init__(self, name: str, log: list):
        self.name = name
        self.docs = []
        self._unique = []
        self._log = log

    def add_unique_index(self, *fields):
        if list(fields) not in self._unique:
            self._unique.append(list(fields))

    async def create_index(self, keys, unique=False, **kwargs):
        if unique:
            self.add_unique_index(*[k for k, _ in keys])
        return "_".join(k for k, _ in keys)

    def _check_unique(self, doc, ignore_id=None):
        for fields in self._unique:
            for other in self.docs:
                if other["_id"] != ignore_id and all(other.get(f) == doc.get(f) for f in fields):
                    raise DuplicateKeyError("E11000 duplicate key error")

    def _project(self, doc, projection):
        if not projection:
            return copy.deepcopy(doc)
        keep = {k for k, v in projection.items() if v}
        return copy.deepcopy({k: v for k, v in doc.items() if k in keep or k == "_id"})

    async def insert_one(self, doc):
        self._log.append((self.name, "insert_one"))
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        self._check_unique(stored)
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return self._project(doc, projection)
        return None

    def find(self, query=None, projection=None):
        return FakeCursor([self._project(d, projection) for d in self.docs if _matches(d, query or {})])

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    def aggregate(self, pipeline):
        return FakeCursor(run_pipeline(self.docs, pipeline))

    def _apply(self, doc, update):
        for key, value in update.get("$set", {}).items():
            doc[key] = copy.deepcopy(value)
        for key in update.get("$unset", {}):
            doc.pop(key, None)

    async def update_one(self, query, update):
        self._log.append((self.name, "update_one"))
        for doc in self.docs:
            if _matches(doc, query):
                self._apply(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        self._log.append((self.name, "find_one_and_update"))
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                self._apply(doc, update)
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, query):
        self._log.append((self.name, "find_one_and_delete"))
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return doc
        return None

    async def delete_one(self, query):
        self._log.append((self.name, "delete_one"))
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        self._log.append((self.name, "delete_many"))
        kept = [d for d in self.docs if not _matches(d, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)


class FakeDatabase:
    """Database double; `log` records writes in call order."""

    def __init__(self):
        self.log = []
        self._collections = {}

    def __getitem__(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self.log)
        return self._collections[name]


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() and aggregate() return cursors synchronously (not
    # coroutines), so use MagicMock for them. Async methods like find_one,
    # insert_one, count_documents etc. stay as AsyncMock.
    collection.find = MagicMock()
    collection.aggregate = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def password_hasher():
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_issuer():
    return JWTTokenIssuer(
        secrets={
            TokenPurpose.ACCESS: "test-access-secret",
            TokenPurpose.REFRESH: "test-refresh-secret",
            TokenPurpose.PASSWORD_RESET: "test-reset-secret",
        }
    )


@pytest.fixture
def account_service(fake_db, password_hasher):
    # Mirrors the unique email index from ensure_indexes()
    fake_db["users"].add_unique_index("email")
    return AccountService(fake_db, password_hasher)


@pytest.fixture
def reset_sender():
    return AsyncMock()


@pytest.fixture
def auth_service(account_service, password_hasher, token_issuer, reset_sender):
    return AuthService(
        account_service=account_service,
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        reset_token_sender=reset_sender,
    )


@pytest.fixture
def make_user_doc():
    """Factory for stored user documents."""

    def _make(password_hash="", **overrides):
        now = datetime.now(timezone.utc)
        doc = {
            "_id": ObjectId(),
            "email": "alice@example.com",
            "passwordHash": password_hash,
            "firstName": "Alice",
            "lastName": "Smith",
            "fitnessLevel": "beginner",
            "units": "metric",
            "privacy": "private",
            "goals": [],
            "isEmailVerified": False,
            "isActive": True,
            "suspended": False,
            "role": "user",
            "lastLogin": None,
            "createdAt": now,
            "updatedAt": now,
        }
        doc.update(overrides)
        return doc

    return _make
