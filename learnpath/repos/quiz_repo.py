from __future__ import annotations

from typing import Protocol

from learnpath.models.quiz import Question, Quiz


class QuizRepo(Protocol):
    async def get(self, quiz_id: str) -> Quiz | None: ...


class InMemoryQuizRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, Quiz] = {}

    async def get(self, quiz_id: str) -> Quiz | None:
        return self._by_id.get(quiz_id)

    def add(self, quiz: Quiz) -> None:
        if quiz.id in self._by_id:
            raise ValueError("quiz already exists")
        self._by_id[quiz.id] = quiz


SAMPLE_QUIZ = Quiz(
    id="hygiene",
    title="Hygiene Check",
    questions=(
        Question(
            id="q1",
            text="How long should you scrub your hands?",
            type="multiple-choice",
            options=("5 seconds", "20 seconds", "2 minutes"),
            correct_answer="20 seconds",
        ),
        Question(
            id="q2",
            text="Gloves replace handwashing.",
            type="true-false",
            options=("True", "False"),
            correct_answer="False",
        ),
        Question(
            id="q3",
            text="When must you wash your hands?",
            type="multiple-select",
            options=("After handling raw meat", "After a break", "Before a meeting"),
            correct_answers=("After handling raw meat", "After a break"),
        ),
    ),
)


def seed_sample_quiz(repo: InMemoryQuizRepo) -> None:
    if SAMPLE_QUIZ.id not in repo._by_id:
        repo.add(SAMPLE_QUIZ)
