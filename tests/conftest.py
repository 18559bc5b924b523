from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import learnpath` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from learnpath.api.dependencies import progress_repo  # noqa: E402
from learnpath.main import app  # noqa: E402
from learnpath.models.course import Course, CurriculumItem  # noqa: E402
from learnpath.models.quiz import Question, Quiz  # noqa: E402
from learnpath.repos.course_repo import InMemoryCourseRepo  # noqa: E402
from learnpath.repos.progress_repo import InMemoryProgressRepo  # noqa: E402
from learnpath.repos.quiz_repo import InMemoryQuizRepo  # noqa: E402
from learnpath.services import token_service  # noqa: E402
from learnpath.services.tracker import ProgressTracker  # noqa: E402

SAMPLE_COURSE_ID = "intro-to-food-safety"


@pytest.fixture(autouse=True)
def reset_progress_state() -> None:
    """Clear stored progress between tests."""
    progress_repo._store.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(
    username: str = "test-learner",
    roles: list[str] | None = None,
) -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(sub=username, roles=roles)


def auth(token: str | None) -> dict[str, str]:
    if token is None:
        return {}
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token() -> str:
    return mint_token()


@pytest.fixture
def admin_token() -> str:
    return mint_token(username="test-admin", roles=["admin"])


# ---------------------------------------------------------------------------
# Service-level helpers: a tracker wired to fresh in-memory repos
# ---------------------------------------------------------------------------

ABC_ITEMS = (
    CurriculumItem.new(type="lesson", entity_id="A", title="Lesson A"),
    CurriculumItem.new(type="quiz", entity_id="B", title="Quiz B"),
    CurriculumItem.new(type="lesson", entity_id="C", title="Lesson C"),
)

QUIZ_B = Quiz(
    id="B",
    title="Quiz B",
    questions=(
        Question(
            id="b1",
            text="2 + 2?",
            type="multiple-choice",
            options=("3", "4"),
            correct_answer="4",
        ),
        Question(
            id="b2",
            text="Water is wet.",
            type="true-false",
            options=("True", "False"),
            correct_answer="True",
        ),
    ),
)

PASSING_B = {"b1": "4", "b2": "True"}
FAILING_B = {"b1": "3", "b2": "True"}


class FakeClock:
    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def courses() -> InMemoryCourseRepo:
    repo = InMemoryCourseRepo()
    repo.add(Course(id="abc", title="ABC", items=ABC_ITEMS))
    repo.add(Course(id="empty", title="Empty"))
    return repo


@pytest.fixture
def quizzes() -> InMemoryQuizRepo:
    repo = InMemoryQuizRepo()
    repo.add(QUIZ_B)
    return repo


@pytest.fixture
def store() -> InMemoryProgressRepo:
    return InMemoryProgressRepo()


@pytest.fixture
def tracker(
    courses: InMemoryCourseRepo,
    quizzes: InMemoryQuizRepo,
    store: InMemoryProgressRepo,
) -> ProgressTracker:
    return ProgressTracker(courses, quizzes, store, clock=FakeClock())
