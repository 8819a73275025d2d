"""
mongo-helping-hand
Typed async repository over a MongoDB collection with filter-entry queries.
"""

from .db import MongoRepository, Repository
from .db.filters import FilterEntry, Operator
from .exceptions import (
    HelpingHandError, ConfigurationError, MissingArgumentError,
    ValidationError, InvalidIdentityError, UnknownFieldError
)
from .config import Config

__version__ = "1.0.0"

__all__ = [
    "MongoRepository",
    "Repository",
    "FilterEntry",
    "Operator",
    "HelpingHandError",
    "ConfigurationError",
    "MissingArgumentError",
    "ValidationError",
    "InvalidIdentityError",
    "UnknownFieldError",
    "Config"
]
