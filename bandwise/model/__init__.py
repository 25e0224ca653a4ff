__all__ = [
    # Base
    "BaseModel",
    "FrozenModel",
    # Enums
    "DeploymentEnvironment",
    "ExamModule",
    "ExamVariant",
    "FeedbackSource",
    "QuestionKind",
    "WritingTaskKind",
    # Exam content
    "ContentModels",
    "ExamDocument",
    "ListeningContent",
    "ListeningSection",
    "ModuleBodyKeys",
    "ModuleContent",
    "ModuleItemFields",
    "Question",
    "ReadingContent",
    "ReadingPassage",
    "SpeakingContent",
    "SpeakingPart",
    "SpeakingQuestion",
    "WritingContent",
    "WritingTask",
    # Answers
    "AnswerMap",
    "SubmittedAnswer",
    # Scores and feedback
    "BandScore",
    "EvaluationResult",
    "FeedbackBundle",
    "ModuleFeedback",
    "ModuleScores",
    "OverallFeedback",
    "WritingFeedback",
]

from .answer import AnswerMap, SubmittedAnswer
from .base import BaseModel, FrozenModel
from .enum import DeploymentEnvironment, ExamModule, ExamVariant, FeedbackSource, QuestionKind, WritingTaskKind
from .exam import ContentModels, ExamDocument, ListeningContent, ListeningSection, ModuleBodyKeys, ModuleContent, \
    ModuleItemFields, Question, ReadingContent, ReadingPassage, SpeakingContent, SpeakingPart, SpeakingQuestion, \
    WritingContent, WritingTask
from .score import BandScore, EvaluationResult, FeedbackBundle, ModuleFeedback, ModuleScores, OverallFeedback, \
    WritingFeedback
