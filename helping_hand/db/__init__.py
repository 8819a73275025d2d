"""
Database module for mongo-helping-hand
Handles filter compilation and MongoDB repository operations
"""

from .repository import Repository
from .mongo_repository import MongoRepository

__all__ = ['Repository', 'MongoRepository']
