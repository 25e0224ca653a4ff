"""Typed exam document produced by content synthesis."""

from __future__ import annotations

import re as regex
import typing as t

import pydantic as p

from .base import BaseModel
from .enum import ExamModule, QuestionKind, WritingTaskKind

CanonicalAnswer = str | list[str]

# spellings seen in generated content, keyed by their normalized form
KindAliases: dict[str, QuestionKind] = {
    "fill-in-the-blank": QuestionKind.FillBlank,
    "fill-in-blank": QuestionKind.FillBlank,
    "fill-in": QuestionKind.FillBlank,
    "gap-fill": QuestionKind.FillBlank,
    "blank": QuestionKind.FillBlank,
    "true-false-not-given": QuestionKind.TrueFalseNotGiven,
    "true-false-notgiven": QuestionKind.TrueFalseNotGiven,
    "true-false": QuestionKind.TrueFalseNotGiven,
    "tfng": QuestionKind.TrueFalseNotGiven,
    "yes-no-not-given": QuestionKind.TrueFalseNotGiven,
    "mcq": QuestionKind.MultipleChoice,
    "multiple-choices": QuestionKind.MultipleChoice,
    "multiple-choice-question": QuestionKind.MultipleChoice,
    "match": QuestionKind.Matching,
    "matching-headings": QuestionKind.Matching,
    "matching-information": QuestionKind.Matching,
    "matching-features": QuestionKind.Matching,
    "short-answer-question": QuestionKind.ShortAnswer,
    "short-answer-questions": QuestionKind.ShortAnswer,
    "sentence-complete": QuestionKind.SentenceCompletion,
    "summary-complete": QuestionKind.SummaryCompletion,
    "note-complete": QuestionKind.NoteCompletion,
    "notes-completion": QuestionKind.NoteCompletion,
    "table-complete": QuestionKind.TableCompletion,
    "form-complete": QuestionKind.FormCompletion,
}


def normalize_kind(value: str) -> str:
    """Map a free-form question type tag onto a `QuestionKind` value."""
    tag = regex.sub(r"[\s_/]+", "-", value.strip().lower()).strip("-")
    if tag in KindAliases:
        return KindAliases[tag].value
    return tag


def _stringify(value: t.Any) -> t.Any:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class Question(BaseModel):
    id: int
    type: QuestionKind
    text: str = ""
    options: list[str] | None = None
    answer: CanonicalAnswer

    @p.field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: t.Any) -> t.Any:
        if isinstance(v, str):
            return normalize_kind(v)
        return v

    @p.field_validator("answer", "options", mode="before")
    @classmethod
    def stringify(cls, v: t.Any) -> t.Any:
        if isinstance(v, list):
            return [_stringify(item) for item in t.cast(list[t.Any], v)]
        return _stringify(v)


class ObjectiveContent(BaseModel):
    """Common behaviour of the question-bearing modules."""

    AllowedKinds: t.ClassVar[frozenset[QuestionKind]] = frozenset(QuestionKind)

    def iter_questions(self) -> t.Iterator[Question]:
        raise NotImplementedError()

    @p.model_validator(mode="after")
    def check_questions(self) -> t.Self:
        seen: set[int] = set()
        for question in self.iter_questions():
            if question.type not in self.AllowedKinds:
                raise ValueError(f"question {question.id} has unsupported type {question.type.value!r}")
            if question.id in seen:
                raise ValueError(f"duplicate question id {question.id}")
            seen.add(question.id)
        return self


class ReadingPassage(BaseModel):
    title: str = ""
    content: str = ""
    questions: list[Question] = p.Field(min_length=1)


class ReadingContent(ObjectiveContent):
    AllowedKinds = frozenset(QuestionKind) - {QuestionKind.FormCompletion}

    passages: list[ReadingPassage] = p.Field(min_length=1)

    def iter_questions(self) -> t.Iterator[Question]:
        for passage in self.passages:
            yield from passage.questions


class ListeningSection(BaseModel):
    title: str = ""
    audio_text: str = p.Field(default="", alias="audioText")
    questions: list[Question] = p.Field(min_length=1)


class ListeningContent(ObjectiveContent):
    AllowedKinds = frozenset(QuestionKind) - {QuestionKind.TrueFalseNotGiven}

    sections: list[ListeningSection] = p.Field(min_length=1)

    def iter_questions(self) -> t.Iterator[Question]:
        for section in self.sections:
            yield from section.questions


class WritingTask(BaseModel):
    type: WritingTaskKind
    instructions: str
    content: str | None = None
    image_description: str | None = p.Field(default=None, alias="imageDescription")

    @p.field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: t.Any) -> t.Any:
        if isinstance(v, int):
            return f"task{v}"
        if isinstance(v, str):
            return regex.sub(r"[\s_-]+", "", v.strip().lower())
        return v


class WritingContent(BaseModel):
    tasks: list[WritingTask] = p.Field(min_length=1)

    def task(self, kind: WritingTaskKind) -> WritingTask | None:
        return next((task for task in self.tasks if task.type is kind), None)


class SpeakingQuestion(BaseModel):
    text: str
    follow_up_questions: list[str] = p.Field(default_factory=list, alias="followUpQuestions")


class SpeakingPart(BaseModel):
    part: int
    questions: list[SpeakingQuestion] = p.Field(min_length=1)


class SpeakingContent(BaseModel):
    parts: list[SpeakingPart] = p.Field(min_length=1)


ModuleContent = ReadingContent | ListeningContent | WritingContent | SpeakingContent

ContentModels: dict[ExamModule, type[BaseModel]] = {
    ExamModule.Reading: ReadingContent,
    ExamModule.Listening: ListeningContent,
    ExamModule.Writing: WritingContent,
    ExamModule.Speaking: SpeakingContent,
}


class ExamDocument(BaseModel):
    """A generated exam; a module key is present only if it was requested."""

    reading: ReadingContent | None = None
    listening: ListeningContent | None = None
    writing: WritingContent | None = None
    speaking: SpeakingContent | None = None

    @property
    def modules(self) -> tuple[ExamModule, ...]:
        return tuple(m for m in ExamModule if getattr(self, m.value) is not None)

    def module(self, module: ExamModule) -> ModuleContent | None:
        return getattr(self, module.value)


# the array each module body is built around, and the field its elements must expose
ModuleBodyKeys: dict[ExamModule, str] = {
    ExamModule.Reading: "passages",
    ExamModule.Listening: "sections",
    ExamModule.Writing: "tasks",
    ExamModule.Speaking: "parts",
}

ModuleItemFields: dict[ExamModule, str] = {
    ExamModule.Reading: "questions",
    ExamModule.Listening: "questions",
    ExamModule.Writing: "instructions",
    ExamModule.Speaking: "questions",
}
