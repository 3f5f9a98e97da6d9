from __future__ import annotations

import os
import socket
from typing import Any, List, Optional, Sequence

import pytest

from quiz_master.models import QuestionGenerationFailed, QuizQuestion


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. Set ALLOW_NETWORK=1 to allow it."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent accidental calls to the Gemini API from unit tests."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


def make_question(n: int, answer_index: int = 0) -> QuizQuestion:
    options = tuple(f"Option {n}-{i}" for i in range(4))
    return QuizQuestion(
        id=f"q{n}",
        question=f"Question number {n}?",
        options=options,
        answer=options[answer_index],
        explanation=f"Because option {answer_index} is right for question {n}.",
    )


class FakeProvider:
    """Deterministic stand-in for the Gemini provider."""

    def __init__(
        self,
        questions: Sequence[QuizQuestion] = (),
        error: Optional[Exception] = None,
    ):
        self.questions = tuple(questions)
        self.error = error
        self.topics: List[str] = []

    def fetch_questions(self, topic: str) -> Sequence[QuizQuestion]:
        self.topics.append(topic)
        if self.error is not None:
            raise self.error
        return self.questions


@pytest.fixture
def questions() -> List[QuizQuestion]:
    return [make_question(n) for n in range(1, 11)]


@pytest.fixture
def fake_provider(questions: List[QuizQuestion]) -> FakeProvider:
    return FakeProvider(questions)


@pytest.fixture
def failing_provider() -> FakeProvider:
    cause = ValueError("upstream quota exceeded")
    error = QuestionGenerationFailed("Question generation request failed")
    error.__cause__ = cause
    return FakeProvider(error=error)
