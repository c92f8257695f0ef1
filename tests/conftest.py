"""
Pytest fixtures and configuration for all tests.
"""

import os

# Settings se leen al importar la app: defaults antes de cualquier import de zentype
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/?replicaSet=rs0")
os.environ.setdefault("JWT_SECRET", "test-secret-key-at-least-32-chars-long")

import pytest
from datetime import datetime, timezone

from mongo_fakes import FakeMotorClient
from zentype.database import MongoDatabase

TEST_DB_NAME = "zentype_test"


@pytest.fixture
def mongo_client() -> FakeMotorClient:
    """In-memory client; each test gets a fresh one."""
    return FakeMotorClient()


@pytest.fixture
def test_db(mongo_client):
    """Provide a clean test database for each test."""
    return mongo_client[TEST_DB_NAME]


@pytest.fixture
def database(mongo_client, test_db) -> MongoDatabase:
    """MongoDatabase wired to the in-memory client (no connect() needed)."""
    database = MongoDatabase("mongodb://fake", db_name=TEST_DB_NAME)
    database.client = mongo_client
    database.db = test_db
    return database


@pytest.fixture
def sample_profile_data():
    """Sample profile document for testing."""
    return {
        "_id": "test_user_123",
        "username": "test8",
        "email": "test8@test.com",
        "stats": {
            "rank": "E",
            "tests_completed": 0,
            "avg_wpm": 0,
            "avg_accuracy": 0,
            "best_wpm": 0,
        },
        "created_at": datetime(2025, 9, 24, 23, 37, tzinfo=timezone.utc),
    }


@pytest.fixture
async def seeded_profile(test_db, sample_profile_data):
    """Profile already provisioned in the database."""
    await test_db["profiles"].insert_one(sample_profile_data)
    return sample_profile_data


@pytest.fixture
def sample_submission_payload():
    """Valid body for POST /submit-test-result."""
    return {
        "wpm": 80,
        "accuracy": 95,
        "errors": 3,
        "timeTaken": 60,
        "textLength": 250,
        "userInput": "the quick brown fox jumps over the lazy dog",
        "testType": "practice",
        "difficulty": "Medium",
        "testId": "test_content_001",
    }


@pytest.fixture
def sample_test_contents():
    """Pre-made texts for testing."""
    return [
        {
            "_id": f"content_{i:03d}",
            "text": f"Sample practice text number {i}",
            "difficulty": "Easy" if i % 2 == 0 else "Hard",
            "category": "Technology" if i < 3 else "Nature",
            "source": "Unknown",
            "word_count": 5,
            "time_limit": 60 if i % 3 else 30,
            "created_at": datetime(2025, 9, 1, tzinfo=timezone.utc),
        }
        for i in range(6)
    ]
