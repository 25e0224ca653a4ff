"""Pytest fixtures for bandwise tests.

The session container is booted from the repository's `config/` directory in
the test environment. No provider credentials are configured there, so any
client the container builds fails its requests; tests that need replies from
the generative-text service pass scripted clients instead.

Usage:
    def test_something(container: BandwiseContainer, reading_body: dict[str, t.Any]):
        ...
"""

from __future__ import annotations

import os
import typing as t
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pydantic as p
import pytest

import bandwise
from bandwise.core import BandwiseContainer
from bandwise.model import DeploymentEnvironment, ExamDocument

READING_QUESTIONS = 13


@pytest.fixture(scope="session")
def container() -> t.Generator[BandwiseContainer]:
    """Boot the DI container once for the test session."""
    ct = BandwiseContainer()
    root = Path(os.path.dirname(bandwise.__file__)).parent

    BandwiseContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


def scripted_client(*replies: str | Exception) -> MagicMock:
    """A completion client answering each call with the next reply, raising exceptions."""
    client = MagicMock()
    client.complete = AsyncMock(side_effect=list(replies))
    return client


@pytest.fixture
def scripted() -> t.Callable[..., MagicMock]:
    return scripted_client


@pytest.fixture
def reading_body() -> dict[str, t.Any]:
    """A reading module with one passage of thirteen questions, ids 1-13."""
    questions: list[dict[str, t.Any]] = []
    for i in range(1, READING_QUESTIONS + 1):
        if i % 3 == 0:
            questions.append({
                "id": i,
                "type": "true-false-ng",
                "text": f"Statement {i} agrees with the passage.",
                "options": ["TRUE", "FALSE", "NOT GIVEN"],
                "answer": "TRUE",
            })
        else:
            questions.append({
                "id": i,
                "type": "fill-blank",
                "text": f"The answer to question {i} is _____.",
                "answer": f"word{i}",
            })
    return {
        "passages": [
            {
                "title": "The History of Tea",
                "content": "Tea has a long and fascinating history...",
                "questions": questions,
            }
        ]
    }


@pytest.fixture
def reading_document(reading_body: dict[str, t.Any]) -> ExamDocument:
    return ExamDocument.model_validate({"reading": reading_body})


@pytest.fixture
def writing_body() -> dict[str, t.Any]:
    return {
        "tasks": [
            {
                "type": "task1",
                "instructions": "The graph below shows the population changes in a country...",
                "imageDescription": "Line graph showing population growth from 1990 to 2020",
            },
            {
                "type": "task2",
                "instructions": "Some people believe university education should be free. Discuss both views.",
            },
        ]
    }


@pytest.fixture
def speaking_body() -> dict[str, t.Any]:
    return {
        "parts": [
            {"part": 1, "questions": [{"text": "Do you enjoy traveling?", "followUpQuestions": ["Why?"]}]},
            {"part": 2, "questions": [{"text": "Describe a book that you enjoyed reading."}]},
        ]
    }


def correct_answers(body: dict[str, t.Any], wrong: t.Iterable[int] = ()) -> dict[str, str | list[str]]:
    """Answers to every question of an objective module body, wrong for the given ids."""
    wrong = set(wrong)
    answers: dict[str, str | list[str]] = {}
    for group in body.get("passages", body.get("sections", [])):
        for question in group["questions"]:
            qid = question["id"]
            answers[str(qid)] = "wrong" if qid in wrong else question["answer"]
    return answers


@pytest.fixture
def answer_key() -> t.Callable[..., dict[str, str | list[str]]]:
    return correct_answers
