#!/usr/bin/env python3
"""
MongoDB backend for filter entries.
Compiles FilterEntry lists into MongoDB filter documents.
"""

import logging
from enum import Enum
from typing import Any, Dict, List

from .base import FilterBackend, FilterEntry, Operator


class MongoFilterBackend(FilterBackend):
    """
    Converts filter entries to MongoDB filter documents.
    """

    # Comparison operators and their query operator
    COMPARISONS = {
        Operator.EQUALS: "$eq",
        Operator.NOT_EQUALS: "$ne",
        Operator.GREATER_THAN: "$gt",
        Operator.GREATER_THAN_EQUALS: "$gte",
        Operator.LESS_THAN: "$lt",
        Operator.LESS_THAN_EQUALS: "$lte",
    }

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def compile_entry(self, entry: FilterEntry, case_sensitive: bool = False) -> Dict[str, Any]:
        """
        Compile one entry into a single-field filter document.

        Args:
            entry: The filter entry
            case_sensitive: For REGEX entries, match case exactly when True

        Returns:
            Filter document such as {"Age": {"$gt": 21}}
        """
        op = entry.operator
        value = self.convert_value(entry.value)

        if op == Operator.REGEX:
            condition = {"$regex": str(entry.value)}
            if not case_sensitive:
                condition["$options"] = "i"
            return {entry.key: condition}

        if op not in self.COMPARISONS:
            self.logger.warning(f"No comparison for {op.name} on '{entry.key}', falling back to EQUALS")
            op = Operator.EQUALS

        return {entry.key: {self.COMPARISONS[op]: value}}

    def combine(self, predicates: List[Dict[str, Any]], combinator: Operator) -> Dict[str, Any]:
        """
        Combine filter documents under $and or $or.
        An empty AND matches everything, an empty OR matches nothing.
        """
        if not predicates:
            return {} if combinator == Operator.AND else {"_id": {"$in": []}}

        return {combinator.value: predicates}

    def convert_value(self, value: Any) -> Any:
        """Store Enum operands by value."""
        if isinstance(value, Enum):
            return value.value
        return value
