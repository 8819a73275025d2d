#!/usr/bin/env python3
"""
Database helpers for mongo-helping-hand
Connection strings, client creation, identity parsing and entity <-> document mapping
"""

import dataclasses
import functools
import types
import typing
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient

from ..exceptions import InvalidIdentityError


T = TypeVar('T')

SCHEMES = ("mongodb://", "mongodb+srv://")

# Optional[X] and X | None
UNION_TYPES = (Union, getattr(types, "UnionType", Union))


def build_connection_string(server: str) -> str:
    """
    Build a MongoDB connection string for a server address.

    Args:
        server: "host", "host:port" or a full mongodb:// / mongodb+srv:// URI

    Returns:
        Connection string
    """
    if server.startswith(SCHEMES):
        return server
    return f"mongodb://{server}"


def create_client(server: str) -> AsyncIOMotorClient:
    """
    Create a connection-pooled client for a server address.
    The client connects lazily on first use.
    """
    return AsyncIOMotorClient(build_connection_string(server))


def parse_object_id(object_id: Union[str, ObjectId]) -> ObjectId:
    """
    Parse an identity into an ObjectId.

    Args:
        object_id: 24-character hex string or ObjectId

    Returns:
        The ObjectId

    Raises:
        InvalidIdentityError: If object_id is not a well-formed ObjectId
    """
    if isinstance(object_id, ObjectId):
        return object_id
    if not isinstance(object_id, str) or not ObjectId.is_valid(object_id):
        raise InvalidIdentityError(object_id)
    return ObjectId(object_id)


def entity_field_names(entity_type: type) -> typing.List[str]:
    """Return the dataclass field names of an entity type."""
    return [f.name for f in dataclasses.fields(entity_type)]


def to_document(entity: Any) -> Dict[str, Any]:
    """
    Convert a dataclass entity to a document.
    Enum members are stored by value and a missing _id is left for the store
    to assign.
    """
    if not dataclasses.is_dataclass(entity) or isinstance(entity, type):
        raise TypeError(f"Expected a dataclass instance, but got {type(entity).__name__}")

    document = dataclasses.asdict(entity, dict_factory=_document_factory)
    if document.get("_id") is None:
        document.pop("_id", None)
    return document


def from_document(entity_type: Type[T], document: Optional[Dict[str, Any]]) -> Optional[T]:
    """
    Build an entity from a document.
    Keys that are not fields of entity_type are ignored. Fields missing from the
    document take their dataclass default, or None when there is none.
    """
    if document is None:
        return None

    hints = _type_hints(entity_type)
    values = {}
    for field in dataclasses.fields(entity_type):
        if not field.init:
            continue
        name = field.name
        if name not in document:
            values[name] = _field_default(field)
            continue
        value = document[name]
        enum_type = _enum_type(hints.get(name))
        if enum_type is not None and value is not None and not isinstance(value, enum_type):
            value = enum_type(value)
        values[name] = value

    return entity_type(**values)


@functools.lru_cache(maxsize=None)
def _type_hints(entity_type: type) -> Dict[str, Any]:
    return typing.get_type_hints(entity_type)


def _field_default(field: dataclasses.Field) -> Any:
    if field.default is not dataclasses.MISSING:
        return field.default
    if field.default_factory is not dataclasses.MISSING:
        return field.default_factory()
    return None


def _document_factory(items) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}


def _enum_type(hint: Any) -> Optional[Type[Enum]]:
    """Return the Enum class for a hint of Enum or Optional[Enum]."""
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint
    if typing.get_origin(hint) in UNION_TYPES:
        for arg in typing.get_args(hint):
            if isinstance(arg, type) and issubclass(arg, Enum):
                return arg
    return None
