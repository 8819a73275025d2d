#!/usr/bin/env python3
"""
MongoRepository: generic async CRUD and query façade over one MongoDB collection.
Builds filters through MongoFilterBackend and executes them with motor.
"""

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar, Union

from bson import ObjectId
from pymongo import ASCENDING

from ..exceptions import MissingArgumentError, UnknownFieldError
from .db_helpers import (
    create_client, entity_field_names, from_document, parse_object_id, to_document
)
from .filters import FilterEntry, InvalidFilterError, MongoFilterBackend, Operator
from .repository import Identity, Repository


T = TypeVar('T')


class MongoRepository(Repository[T]):
    """
    Repository bound to a (server, database, collection) triple.

    Records are dataclass instances of entity_type; the store identity lives in
    their _id field. Validation errors are raised before any store call, store
    errors propagate unchanged.
    """

    def __init__(self,
                 entity_type: Type[T],
                 server: str,
                 database_name: str,
                 collection_name: str,
                 client: Optional[Any] = None):
        """
        Initialize the repository.

        Args:
            entity_type: Dataclass type records are mapped to
            server: Server address ("host:port" or a mongodb:// URI)
            database_name: Name of the database
            collection_name: Name of the collection
            client: Pre-built client to use instead of creating one

        Raises:
            MissingArgumentError: If server, database_name or collection_name is empty
        """
        if not server:
            raise MissingArgumentError("server")
        if not database_name:
            raise MissingArgumentError("database_name")
        if not collection_name:
            raise MissingArgumentError("collection_name")
        if not (isinstance(entity_type, type) and dataclasses.is_dataclass(entity_type)):
            raise TypeError(f"Expected a dataclass type, but got {entity_type!r}")

        self.logger = logging.getLogger(__name__)
        self.entity_type = entity_type
        self.filters = MongoFilterBackend()

        self.client = client if client is not None else create_client(server)
        self.database = self.client[database_name]
        self.collection = self.database[collection_name]

        self.logger.info(
            f"Bound {entity_type.__name__} repository to {database_name}.{collection_name}"
        )

    def close(self):
        """Close the underlying client"""
        self.client.close()

    # ============================================================================
    # Retrieval
    # ============================================================================

    async def get_all(self) -> List[T]:
        """
        Get every record in the collection, in store order.
        """
        return await self._find({})

    async def get_matches(self, entries: Sequence[FilterEntry],
                          combinator: Operator = Operator.AND) -> List[T]:
        """
        Get all records matching the entries.

        Args:
            entries: Filter entries; REGEX, AND and OR are not allowed
            combinator: AND (all entries match) or OR (any entry matches)

        Returns:
            Matching records, possibly empty
        """
        query = self.filters.compile_many(entries, combinator)
        return await self._find(query)

    async def get_first(self, query: Union[Identity, Sequence[FilterEntry]],
                        combinator: Operator = Operator.AND) -> Optional[T]:
        """
        Get one record, by identity or by filter entries.

        Args:
            query: An ObjectId (or its hex string), or a list of filter entries
            combinator: AND or OR, used with filter entries only

        Returns:
            The record, or None if nothing matches
        """
        if isinstance(query, (str, bytes, ObjectId)) or not isinstance(query, Iterable):
            filter_doc = {"_id": parse_object_id(query)}
        else:
            filter_doc = self.filters.compile_many(query, combinator)

        found = await self._find(filter_doc, limit=1)
        return found[0] if found else None

    async def search(self, key: str, value: str, case_sensitive: bool = False) -> List[T]:
        """
        Regular expression search against a single field.

        The value is used as a regex fragment, so it matches anywhere in the
        field. Escape metacharacters (re.escape) for a literal substring match.

        Args:
            key: Field to search
            value: Pattern
            case_sensitive: Case-insensitive (default) unless True

        Returns:
            Matching records
        """
        entry = FilterEntry(key, value, Operator.REGEX)
        query = self.filters.compile_entry(entry, case_sensitive=case_sensitive)
        return await self._find(query)

    # ============================================================================
    # Insertion
    # ============================================================================

    async def insert(self, value: T) -> None:
        """Insert a single record"""
        self._check_entity(value)
        await self.collection.insert_one(to_document(value))

    async def insert_batch(self, values: Iterable[T]) -> None:
        """Insert a batch of records"""
        values = list(values)
        for value in values:
            self._check_entity(value)
        documents = [to_document(value) for value in values]
        if not documents:
            return
        await self.collection.insert_many(documents)
        self.logger.debug(f"Inserted {len(documents)} {self.entity_type.__name__} records")

    # ============================================================================
    # Update / Delete
    # ============================================================================

    async def update(self, object_id: Identity,
                     value: Union[T, Sequence[FilterEntry]]) -> bool:
        """
        Update a record.

        With a list of filter entries, each entry's key is set to its value in a
        separate update (the operator is ignored). With a record, the stored
        record is replaced.

        Args:
            object_id: Identity of the record
            value: Filter entries or a replacement record

        Returns:
            True if every update modified exactly one record
        """
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return await self._replace(object_id, value)
        return await self._update_fields(object_id, value)

    async def _update_fields(self, object_id: Identity, entries: Sequence[FilterEntry]) -> bool:
        parsed_id = parse_object_id(object_id)
        entries = list(entries)
        for entry in entries:
            if not isinstance(entry, FilterEntry):
                raise InvalidFilterError(f"Expected FilterEntry, got {type(entry).__name__}")

        updated = True
        for entry in entries:
            result = await self.collection.update_one(
                {"_id": parsed_id},
                {"$set": {entry.key: self.filters.convert_value(entry.value)}}
            )
            if result.modified_count != 1:
                self.logger.warning(f"Setting '{entry.key}' on {parsed_id} modified {result.modified_count} records")
                updated = False

        return updated

    async def _replace(self, object_id: Identity, value: T) -> bool:
        parsed_id = parse_object_id(object_id)
        self._check_entity(value)
        document = to_document(value)
        document.pop("_id", None)

        result = await self.collection.replace_one({"_id": parsed_id}, document)
        return result.modified_count == 1

    async def delete(self, object_id: Identity) -> bool:
        """
        Delete a record.

        Returns:
            True if a record was removed
        """
        parsed_id = parse_object_id(object_id)
        result = await self.collection.delete_one({"_id": parsed_id})
        return result.deleted_count >= 1

    async def delete_all(self) -> bool:
        """
        Delete all records in the collection.

        Returns:
            True if at least one record was removed
        """
        result = await self.collection.delete_many({})
        self.logger.debug(f"Deleted {result.deleted_count} {self.entity_type.__name__} records")
        return result.deleted_count > 0

    # ============================================================================
    # Indexes
    # ============================================================================

    async def create_index(self, field_name: str) -> str:
        """
        Create an ascending index on a field of the entity type.

        Args:
            field_name: Field to index; dotted paths are checked on their first segment

        Returns:
            Name of the index

        Raises:
            UnknownFieldError: If the field is not a field of the entity type
        """
        root = field_name.split(".", 1)[0] if field_name else field_name
        if not root or root not in entity_field_names(self.entity_type):
            raise UnknownFieldError(field_name, self.entity_type)

        name = await self.collection.create_index([(field_name, ASCENDING)])
        self.logger.info(f"Created index {name} on {self.entity_type.__name__}")
        return name

    # ============================================================================
    # Helpers
    # ============================================================================

    def _check_entity(self, value: Any):
        """Raise TypeError unless value is an instance of the entity type."""
        if not isinstance(value, self.entity_type):
            raise TypeError(
                f"Expected {self.entity_type.__name__}, but got {type(value).__name__}"
            )

    async def _find(self, query: Dict[str, Any], limit: int = 0) -> List[T]:
        """Run a query and drain the cursor into entities."""
        self.logger.debug(f"find {query} (limit={limit})")

        results = []
        async for document in self.collection.find(query, limit=limit):
            results.append(from_document(self.entity_type, document))
        return results
