"""
Test models and an in-memory stand-in for a motor client.

FakeMotorClient implements only the collection calls the repository makes and
evaluates the filter documents the repository compiles ($and, $or, $eq, $ne,
$gt, $gte, $lt, $lte, $in, $regex).
"""

import copy
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.results import DeleteResult, InsertManyResult, InsertOneResult, UpdateResult


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"


@dataclass
class Customer:
    Name: str
    Age: int
    DateOfBirth: Optional[datetime] = None
    Sex: Optional[Gender] = None
    _id: Optional[ObjectId] = None


@dataclass
class Order:
    Total: float
    _id: Optional[ObjectId] = None


MISSING = object()


def matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Evaluate a filter document against a stored document."""
    for key, condition in query.items():
        if key == "$and":
            if not all(matches(document, q) for q in condition):
                return False
        elif key == "$or":
            if not any(matches(document, q) for q in condition):
                return False
        elif isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            if not _match_field(document.get(key, MISSING), condition):
                return False
        elif document.get(key, MISSING) != condition:
            return False
    return True


def _match_field(value: Any, condition: Dict[str, Any]) -> bool:
    for op, operand in condition.items():
        if op == "$options":
            continue
        if op == "$eq":
            ok = value == operand
        elif op == "$ne":
            ok = value != operand
        elif op == "$in":
            ok = value in operand
        elif op == "$regex":
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            ok = isinstance(value, str) and re.search(operand, value, flags) is not None
        elif op in ("$gt", "$gte", "$lt", "$lte"):
            ok = _compare(value, op, operand)
        else:
            raise NotImplementedError(op)
        if not ok:
            return False
    return True


def _compare(value: Any, op: str, operand: Any) -> bool:
    if value is MISSING or value is None:
        return False
    try:
        if op == "$gt":
            return value > operand
        if op == "$gte":
            return value >= operand
        if op == "$lt":
            return value < operand
        return value <= operand
    except TypeError:
        return False


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = iter(documents)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._documents)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    def __init__(self, name: str):
        self.name = name
        self.documents: List[Dict[str, Any]] = []
        self.indexes: List[str] = []
        self.calls: List[str] = []

    def find(self, query=None, limit=0):
        self.calls.append("find")
        found = [copy.deepcopy(d) for d in self.documents if matches(d, query or {})]
        if limit:
            found = found[:limit]
        return FakeCursor(found)

    async def insert_one(self, document):
        self.calls.append("insert_one")
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return InsertOneResult(stored["_id"], True)

    async def insert_many(self, documents):
        self.calls.append("insert_many")
        ids = []
        for document in documents:
            stored = copy.deepcopy(document)
            stored.setdefault("_id", ObjectId())
            self.documents.append(stored)
            ids.append(stored["_id"])
        return InsertManyResult(ids, True)

    async def update_one(self, query, update):
        self.calls.append("update_one")
        for document in self.documents:
            if matches(document, query):
                modified = 0
                for key, value in update["$set"].items():
                    if document.get(key, MISSING) != value:
                        document[key] = value
                        modified = 1
                return UpdateResult({"n": 1, "nModified": modified}, True)
        return UpdateResult({"n": 0, "nModified": 0}, True)

    async def replace_one(self, query, replacement):
        self.calls.append("replace_one")
        for i, document in enumerate(self.documents):
            if matches(document, query):
                new_document = dict(copy.deepcopy(replacement), _id=document["_id"])
                modified = 1 if new_document != document else 0
                self.documents[i] = new_document
                return UpdateResult({"n": 1, "nModified": modified}, True)
        return UpdateResult({"n": 0, "nModified": 0}, True)

    async def delete_one(self, query):
        self.calls.append("delete_one")
        for i, document in enumerate(self.documents):
            if matches(document, query):
                del self.documents[i]
                return DeleteResult({"n": 1}, True)
        return DeleteResult({"n": 0}, True)

    async def delete_many(self, query):
        self.calls.append("delete_many")
        kept = [d for d in self.documents if not matches(d, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return DeleteResult({"n": deleted}, True)

    async def create_index(self, keys):
        self.calls.append("create_index")
        name = "_".join(f"{field}_{direction}" for field, direction in keys)
        self.indexes.append(name)
        return name


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self._collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self._collections.setdefault(name, FakeCollection(name))


class FakeMotorClient:
    def __init__(self):
        self._databases: Dict[str, FakeDatabase] = {}
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        return self._databases.setdefault(name, FakeDatabase(name))

    def close(self):
        self.closed = True
