import pytest
import os
import sys
import random
from unittest.mock import patch
from datetime import date, datetime, timezone

# Add project root to Python Path so modules can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wellness_engine.adapters.repositories.memory import (
    InMemoryActivityStore, InMemoryMessageStore, InMemoryProfileStore,
)
from wellness_engine.core.models import Activity, Message
from wellness_engine.core.profile import WellnessProfileService

# ============================================================================
# 1. GLOBAL MOCKS (ENV VARS)
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env_vars():
    """Sets up fake environment variables for all tests."""
    with patch.dict(os.environ, {
        "MONGODB_URI": "mongodb://localhost:27017",
        "WELLNESS_DB_NAME": "wellness_test",
    }):
        yield

# ============================================================================
# 2. DETERMINISM
# ============================================================================

FIXED_NOW = datetime(2025, 3, 12, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def today():
    return FIXED_NOW.date()


@pytest.fixture
def rng():
    return random.Random(1234)

# ============================================================================
# 3. CONTEXT DATA FIXTURES
# ============================================================================

def user(text):
    return Message(sender="user", text=text)


def assistant(text):
    return Message(sender="assistant", text=text)


@pytest.fixture
def happy_messages():
    return [
        user("I am happy today. I feel great."),
        assistant("That's wonderful to hear! Anything in particular?"),
    ]


@pytest.fixture
def stressed_messages():
    return [
        user("Work has been awful lately, I'm stressed and tired all the time."),
        assistant("I'm sorry to hear that."),
        user("My job keeps me up at night and I can't sleep. I feel anxious."),
        user("Let's talk about work, the pressure is overwhelming."),
    ]


@pytest.fixture
def sample_activities(today):
    return [
        Activity(title="Daily Mindfulness", completed=True, streak=4, last_completed=today),
        Activity(title="Journaling", completed=False, streak=2),
        Activity(title="Deep Breathing", completed=True, streak=1, last_completed=today),
    ]

# ============================================================================
# 4. SERVICE FIXTURES
# ============================================================================

@pytest.fixture
def stores():
    return InMemoryMessageStore(), InMemoryActivityStore(), InMemoryProfileStore()


@pytest.fixture
def service(stores, rng):
    return WellnessProfileService(*stores, rng=rng, clock=lambda: FIXED_NOW)
