#!/usr/bin/env python3
"""
Repository: abstract async CRUD and query surface over one collection.
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, Sequence, TypeVar, Union

from bson import ObjectId

from .filters import FilterEntry, Operator


T = TypeVar('T')

Identity = Union[str, ObjectId]


class Repository(ABC, Generic[T]):
    """
    Async repository over records of type T.
    Not-found outcomes are returned as None or False, never raised.
    """

    @abstractmethod
    async def get_all(self) -> List[T]:
        """Get every record in the collection."""
        pass

    @abstractmethod
    async def get_matches(self, entries: Sequence[FilterEntry],
                          combinator: Operator = Operator.AND) -> List[T]:
        """Get all records matching the entries. combinator must be AND or OR."""
        pass

    @abstractmethod
    async def get_first(self, query: Union[Identity, Sequence[FilterEntry]],
                        combinator: Operator = Operator.AND) -> Optional[T]:
        """Get the record with an identity, or the first record matching entries."""
        pass

    @abstractmethod
    async def search(self, key: str, value: str, case_sensitive: bool = False) -> List[T]:
        """Regular expression search against a single field."""
        pass

    @abstractmethod
    async def insert(self, value: T) -> None:
        """Insert a single record."""
        pass

    @abstractmethod
    async def insert_batch(self, values: Iterable[T]) -> None:
        """Insert a batch of records."""
        pass

    @abstractmethod
    async def update(self, object_id: Identity,
                     value: Union[T, Sequence[FilterEntry]]) -> bool:
        """Partial update from entries, or full replacement with a record."""
        pass

    @abstractmethod
    async def delete(self, object_id: Identity) -> bool:
        """Delete a record."""
        pass

    @abstractmethod
    async def delete_all(self) -> bool:
        """Delete all records in the collection."""
        pass

    @abstractmethod
    async def create_index(self, field_name: str) -> str:
        """Create an ascending index on a field."""
        pass
