"""
Filter-entry system for the repository.

Callers describe a query as a list of (key, value, operator) entries plus a
combinator. The entries are validated and compiled into a MongoDB filter
document.

Example usage:
    from helping_hand.db.filters import FilterEntry, MongoFilterBackend, Operator

    backend = MongoFilterBackend()
    query = backend.compile_many([
        FilterEntry("Name", "John"),
        FilterEntry("Age", 21, Operator.GREATER_THAN),
    ], Operator.OR)
    # {"$or": [{"Name": {"$eq": "John"}}, {"Age": {"$gt": 21}}]}
"""

from .base import (
    Operator,
    FilterEntry,
    FilterBackend,
    COMBINATORS,
    COMPARISON_OPERATORS,
    validate_entries,
    FilterError,
    InvalidFilterError,
    InvalidCombinatorError,
    UnsupportedOperatorError,
    RegexNotAllowedError
)

from .mongo_backend import MongoFilterBackend

__all__ = [
    # Core classes
    'Operator',
    'FilterEntry',
    'FilterBackend',
    'COMBINATORS',
    'COMPARISON_OPERATORS',
    'validate_entries',

    # Backends
    'MongoFilterBackend',

    # Errors
    'FilterError',
    'InvalidFilterError',
    'InvalidCombinatorError',
    'UnsupportedOperatorError',
    'RegexNotAllowedError'
]
