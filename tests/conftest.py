import os
import tempfile

# Must be set before db.py is imported anywhere
_DB_DIR = tempfile.mkdtemp(prefix="math-problems-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"

import uuid  # noqa: E402
from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import models  # noqa: E402,F401
from db import Base, SessionLocal, engine  # noqa: E402
from errors import StorageError  # noqa: E402
from schemas.problems import SessionOut, SubmissionOut  # noqa: E402
from store import ProblemStore  # noqa: E402

Base.metadata.create_all(engine)

PROBLEM_JSON = (
    '{"problem_text": "Sam has 4 bags with 2 apples each and finds 2 more apples. '
    'How many apples does Sam have?", "final_answer": 10}'
)


class FakeAI:
    """Scripted stand-in for GeminiClient; exceptions in the script are raised."""

    def __init__(self, *replies, observer=None):
        self.replies = list(replies)
        self.prompts = []
        self.observer = observer

    async def generate_text(self, prompt, *, response_schema=None):
        self.prompts.append(prompt)
        if self.observer is not None:
            self.observer()
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeStore:
    """In-memory store with switchable failures."""

    def __init__(self, fail_sessions=False, fail_submissions=False):
        self.fail_sessions = fail_sessions
        self.fail_submissions = fail_submissions
        self.sessions = {}
        self.submissions = []

    def create_session(self, problem_text, correct_answer):
        if self.fail_sessions:
            raise StorageError("insert into math_problem_sessions failed")
        row = SessionOut(
            id=str(uuid.uuid4()),
            created_at=datetime.now(UTC),
            problem_text=problem_text,
            correct_answer=correct_answer,
        )
        self.sessions[row.id] = row
        return row

    def create_submission(self, session_id, user_answer, is_correct, feedback_text):
        if self.fail_submissions:
            raise StorageError("insert into math_problem_submissions failed")
        row = SubmissionOut(
            id=len(self.submissions) + 1,
            created_at=datetime.now(UTC),
            session_id=session_id,
            user_answer=user_answer,
            is_correct=is_correct,
            feedback_text=feedback_text,
        )
        self.submissions.append(row)
        return row


@pytest.fixture
def store():
    return ProblemStore(SessionLocal)


@pytest.fixture
def make_client(store):
    """Build a TestClient whose workflows use the given AI (and optionally store)."""
    from deps.services import get_ai_client, get_store, reset_controllers
    from main import app

    def _make(ai, use_store=None):
        reset_controllers()
        app.dependency_overrides[get_ai_client] = lambda: ai
        app.dependency_overrides[get_store] = lambda: use_store or store
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
    reset_controllers()
