import os
import tempfile

# must be set before anything under mediaplanner is imported
_tmp = tempfile.mkdtemp(prefix="mediaplanner-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from mediaplanner.domain.models import Answer


@pytest.fixture(scope="session")
def client():
    from mediaplanner.main import app

    with TestClient(app) as c:
        yield c


def answers(*pairs):
    return [Answer(question_id=q, option_id=o) for q, o in pairs]


def payload(*pairs):
    return [{"question_id": q, "option_id": o} for q, o in pairs]


# full decision-tree run: low-ticket conversion, volume focus, burst, weak tracking
FULL_RULES_RUN = (
    ("STEP_1", "conversion"),
    ("STEP_2", "low_ticket"),
    ("STEP_3B", "volume"),
    ("STEP_4", "high_budget"),
    ("STEP_5", "prefer_volume"),
    ("STEP_6", "burst"),
    ("STEP_7", "has_data"),
    ("STEP_8", "no_preference"),
    ("STEP_9", "weak_tracking"),
)

# every point-bearing answer on the Facebook side
FACEBOOK_MAX_RUN = (
    ("q1", "Low"),
    ("q2", "No"),
    ("q3", "Yes"),
    ("q4", "Low"),
    ("q5", "Weak"),
    ("q6", "Yes"),
    ("q7", "High"),
    ("q8", "25-34"),
    ("q9", "Volume"),
    ("q10", "New"),
)
