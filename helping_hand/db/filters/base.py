#!/usr/bin/env python3
"""
Base filter-entry model.
Provides the operator vocabulary, the (key, value, operator) entry type and the
legality checks shared by every backend that compiles entries into a native
query.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union

from ...exceptions import ValidationError


class Operator(Enum):
    """MongoDB-style operators usable in a filter entry or as a combinator."""
    # Comparison
    EQUALS = "$eq"
    NOT_EQUALS = "$ne"
    GREATER_THAN = "$gt"
    GREATER_THAN_EQUALS = "$gte"
    LESS_THAN = "$lt"
    LESS_THAN_EQUALS = "$lte"

    # Text
    REGEX = "$regex"

    # Logical
    AND = "$and"
    OR = "$or"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string is a valid operator."""
        return value in {op.value for op in cls}

    @classmethod
    def from_string(cls, value: str) -> Optional['Operator']:
        """
        Convert string to operator.
        Accepts the MongoDB form ("$gt") or the member name ("GREATER_THAN",
        case-insensitive).
        """
        for op in cls:
            if op.value == value or op.name == value.upper():
                return op
        return None

    @classmethod
    def coerce(cls, value: Union['Operator', str, None]) -> Optional['Operator']:
        """Return the operator for an Operator or string, None if unrecognised."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        return None


COMBINATORS = frozenset({Operator.AND, Operator.OR})

COMPARISON_OPERATORS = frozenset({
    Operator.EQUALS, Operator.NOT_EQUALS,
    Operator.GREATER_THAN, Operator.GREATER_THAN_EQUALS,
    Operator.LESS_THAN, Operator.LESS_THAN_EQUALS,
})


@dataclass(frozen=True)
class FilterEntry:
    """
    A single (key, value, operator) condition supplied by a caller.
    The operator defaults to EQUALS; strings such as "$gte" are accepted.
    """
    key: str
    value: Any
    operator: Operator = Operator.EQUALS

    def __post_init__(self):
        if not self.key or not isinstance(self.key, str):
            raise InvalidFilterError(f"Filter entry key must be a non-empty string, got {self.key!r}")

        if self.operator is None:
            object.__setattr__(self, 'operator', Operator.EQUALS)
            return

        op = Operator.coerce(self.operator)
        if op is None:
            raise InvalidFilterError(f"Unknown operator {self.operator!r} for key '{self.key}'")
        object.__setattr__(self, 'operator', op)

    def __repr__(self):
        return f"{self.key} {self.operator.value} {self.value!r}"


class FilterError(ValidationError):
    """Base exception for filter-related errors."""
    pass


class InvalidFilterError(FilterError):
    """Raised when a filter entry is malformed."""
    pass


class InvalidCombinatorError(FilterError):
    """Raised when entries are combined with something other than AND or OR."""
    def __init__(self, combinator: Any):
        name = combinator.name if isinstance(combinator, Operator) else repr(combinator)
        super().__init__(f"Can only combine entries with AND or OR, got {name}")
        self.combinator = combinator


class UnsupportedOperatorError(FilterError):
    """Raised when a combinator is used as a per-entry operator."""
    def __init__(self, entry: FilterEntry):
        super().__init__(
            f"Cannot use {entry.operator.name} on key '{entry.key}'. Must use EQUALS, "
            f"NOT_EQUALS, GREATER_THAN, GREATER_THAN_EQUALS, LESS_THAN or LESS_THAN_EQUALS"
        )
        self.entry = entry
        self.operator = entry.operator


class RegexNotAllowedError(FilterError):
    """Raised when a REGEX entry is passed anywhere but search."""
    def __init__(self, entry: FilterEntry):
        super().__init__(
            f"REGEX on key '{entry.key}' is not allowed in a filter list. Use the search method"
        )
        self.entry = entry
        self.operator = entry.operator


def validate_entries(entries: Iterable[FilterEntry],
                     combinator: Union[Operator, str]) -> Operator:
    """
    Check that entries may be combined into a single filter.

    Args:
        entries: The filter entries to check
        combinator: AND or OR

    Returns:
        The combinator as an Operator

    Raises:
        InvalidCombinatorError: If the combinator is not AND or OR
        RegexNotAllowedError: If any entry uses REGEX
        UnsupportedOperatorError: If any entry uses AND or OR
    """
    op = Operator.coerce(combinator)
    if op not in COMBINATORS:
        raise InvalidCombinatorError(combinator)

    for entry in entries:
        if not isinstance(entry, FilterEntry):
            raise InvalidFilterError(f"Expected FilterEntry, got {type(entry).__name__}")
        if entry.operator == Operator.REGEX:
            raise RegexNotAllowedError(entry)
        if entry.operator == Operator.AND or entry.operator == Operator.OR:
            raise UnsupportedOperatorError(entry)

    return op


class FilterBackend(ABC):
    """
    Abstract base class for filter backends.
    Each store implements this to compile filter entries into its native
    query format.
    """

    @abstractmethod
    def compile_entry(self, entry: FilterEntry, case_sensitive: bool = False) -> Any:
        """
        Compile one entry into a single-field native predicate.

        Args:
            entry: The filter entry
            case_sensitive: Only used by REGEX entries

        Returns:
            Backend-specific predicate
        """
        pass

    @abstractmethod
    def combine(self, predicates: list, combinator: Operator) -> Any:
        """
        Combine compiled predicates with AND or OR.

        Args:
            predicates: Predicates returned by compile_entry, in entry order
            combinator: AND or OR

        Returns:
            Backend-specific predicate
        """
        pass

    def validate_entries(self, entries: Iterable[FilterEntry],
                         combinator: Union[Operator, str]) -> Operator:
        """Validate entries and combinator. See validate_entries()."""
        return validate_entries(entries, combinator)

    def compile_many(self, entries: Iterable[FilterEntry],
                     combinator: Union[Operator, str] = Operator.AND) -> Any:
        """
        Validate entries, compile each one and combine the results.

        Args:
            entries: Filter entries, order is preserved
            combinator: AND (all must match) or OR (any must match)

        Returns:
            Backend-specific predicate
        """
        entries = list(entries)
        op = self.validate_entries(entries, combinator)
        predicates = [self.compile_entry(entry) for entry in entries]
        return self.combine(predicates, op)
