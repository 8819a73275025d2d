"""
Shared pytest fixtures for mongo-helping-hand tests.
Repositories are bound to an in-memory fake client so no server is needed.
"""

import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path for imports, and this directory for helpers
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(1, str(Path(__file__).parent))

from helping_hand import MongoRepository
from helpers import Customer, FakeMotorClient, Gender

logging.basicConfig(level=logging.CRITICAL)


@pytest.fixture
def fake_client():
    """Provide an empty in-memory client."""
    return FakeMotorClient()


@pytest.fixture
def collection(fake_client):
    """The fake collection the repository is bound to."""
    return fake_client["local"]["Customer"]


@pytest.fixture
def repository(fake_client):
    """Provide a Customer repository over the fake client."""
    return MongoRepository(Customer, "localhost:27017", "local", "Customer", client=fake_client)


@pytest.fixture
def customers():
    """John (25) and Mary (42)."""
    now = datetime.now().replace(microsecond=0)
    return [
        Customer(Name="John", Age=25, DateOfBirth=now - timedelta(days=25 * 365), Sex=Gender.MALE),
        Customer(Name="Mary", Age=42, DateOfBirth=now - timedelta(days=42 * 365), Sex=Gender.FEMALE),
    ]


@pytest_asyncio.fixture
async def populated_repository(repository, customers):
    """Provide a repository holding John and Mary."""
    await repository.insert_batch(customers)
    return repository
