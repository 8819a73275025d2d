"""
Configuration helpers for mongo-helping-hand.
Supports environment variables for easy deployment configuration.
"""

import os
from typing import Any, Dict


DEFAULT_SERVER = "localhost:27017"
DEFAULT_DATABASE = "local"
DEFAULT_COLLECTION = "Customer"


class Config:
    """
    Configuration helper producing MongoRepository keyword arguments.

    Environment variables:
        MONGO_SERVER: Server address or mongodb:// URI (default: localhost:27017)
        MONGO_DB_NAME: Database name (default: local)
        MONGO_COLLECTION: Collection name (default: Customer)
    """

    @staticmethod
    def from_env() -> Dict[str, Any]:
        """
        Create configuration from environment variables.

        Returns:
            Dict with server, database_name and collection_name

        Example:
            from helping_hand import Config, MongoRepository

            repository = MongoRepository(Customer, **Config.from_env())
        """
        return {
            "server": os.getenv("MONGO_SERVER", DEFAULT_SERVER),
            "database_name": os.getenv("MONGO_DB_NAME", DEFAULT_DATABASE),
            "collection_name": os.getenv("MONGO_COLLECTION", DEFAULT_COLLECTION)
        }

    @staticmethod
    def for_docker(host: str = "localhost",
                   port: int = 27017,
                   database_name: str = DEFAULT_DATABASE,
                   collection_name: str = DEFAULT_COLLECTION) -> Dict[str, Any]:
        """
        Configuration for a Docker deployment.

        Args:
            host: Docker host (default: localhost)
            port: MongoDB port (default: 27017)
            database_name: Database name
            collection_name: Collection name
        """
        return {
            "server": f"{host}:{port}",
            "database_name": database_name,
            "collection_name": collection_name
        }

    @staticmethod
    def for_server(server: str, database_name: str, collection_name: str) -> Dict[str, Any]:
        """Configuration for an explicit server, database and collection."""
        return {
            "server": server,
            "database_name": database_name,
            "collection_name": collection_name
        }
