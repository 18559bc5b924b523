"""Quiz attempt grading.

A quiz is passed only when every question is answered correctly.  A
quiz with no questions passes with a score of 100.  There is no partial
credit and no retry limit.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from learnpath.models.quiz import Question, Quiz

Answer = str | Sequence[str] | None


@dataclass(frozen=True, slots=True)
class QuizResult:
    score: int
    passed: bool
    incorrect_questions: tuple[int, ...] = ()  # 1-based question numbers


def is_correct(question: Question, answer: Answer) -> bool:
    if question.type == "multiple-select":
        if answer is None or isinstance(answer, str):
            return False
        return sorted(answer) == sorted(question.correct_answers)
    return isinstance(answer, str) and answer == question.correct_answer


def grade_quiz(quiz: Quiz, answers: Mapping[str, Answer]) -> QuizResult:
    total = len(quiz.questions)
    if total == 0:
        return QuizResult(score=100, passed=True)

    incorrect = tuple(
        n
        for n, question in enumerate(quiz.questions, start=1)
        if not is_correct(question, answers.get(question.id))
    )
    correct = total - len(incorrect)
    # round-half-up, not banker's rounding
    score = (200 * correct + total) // (2 * total)
    passed = correct == total
    return QuizResult(
        score=score,
        passed=passed,
        incorrect_questions=() if passed else incorrect,
    )
