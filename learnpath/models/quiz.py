from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

QuestionType = Literal["multiple-choice", "true-false", "multiple-select"]


@dataclass(frozen=True, slots=True)
class Question:
    id: str
    text: str
    type: QuestionType
    options: tuple[str, ...] = ()
    correct_answer: str | None = None  # multiple-choice | true-false
    correct_answers: tuple[str, ...] = ()  # multiple-select


@dataclass(frozen=True, slots=True)
class Quiz:
    id: str
    title: str
    questions: tuple[Question, ...] = ()
