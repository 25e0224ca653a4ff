import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Test = "test"
    Local = "local"


class ExamModule(enum.Enum):
    Reading = "reading"
    Listening = "listening"
    Writing = "writing"
    Speaking = "speaking"

    @property
    def is_objective(self) -> bool:
        return self in (ExamModule.Reading, ExamModule.Listening)

    @property
    def title(self) -> str:
        return self.value.capitalize()


class ExamVariant(enum.Enum):
    Academic = "academic"
    General = "general"

    @property
    def title(self) -> str:
        return "Academic" if self is ExamVariant.Academic else "General Training"


class QuestionKind(enum.Enum):
    FillBlank = "fill-blank"
    TrueFalseNotGiven = "true-false-ng"
    MultipleChoice = "multiple-choice"
    Matching = "matching"
    ShortAnswer = "short-answer"
    SentenceCompletion = "sentence-completion"
    SummaryCompletion = "summary-completion"
    NoteCompletion = "note-completion"
    TableCompletion = "table-completion"
    FormCompletion = "form-completion"


class WritingTaskKind(enum.Enum):
    Task1 = "task1"
    Task2 = "task2"


class FeedbackSource(enum.Enum):
    AI = "ai"
    Fallback = "fallback"
