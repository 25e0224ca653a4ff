"""Static feedback used whenever generated feedback is missing or unusable."""

from __future__ import annotations

import enum
import typing as t

from bandwise.model import \
    ExamModule, FeedbackSource, ModuleFeedback, OverallFeedback, WritingFeedback, WritingTaskKind


class Tier(enum.Enum):
    High = "high"
    Middle = "middle"
    Low = "low"


def tier_for(band: float, high: float = 7.0, low: float = 4.0) -> Tier:
    if band >= high:
        return Tier.High
    if band <= low:
        return Tier.Low
    return Tier.Middle


ADVICE: dict[ExamModule, str] = {
    ExamModule.Reading: (
        "Practice reading a variety of texts and focus on improving your vocabulary and comprehension skills."
    ),
    ExamModule.Listening: (
        "Listen to various English media daily and practice note-taking while listening to improve your skills."
    ),
    ExamModule.Writing: (
        "Practice writing essays with clear structure and varied vocabulary, and get feedback from others when possible."
    ),
    ExamModule.Speaking: (
        "Speak English regularly and record yourself to identify areas for improvement in fluency and pronunciation."
    ),
}

# (strengths, weaknesses) per module and tier
OBSERVATIONS: dict[ExamModule, dict[Tier, tuple[tuple[str, ...], tuple[str, ...]]]] = {
    ExamModule.Reading: {
        Tier.High: (
            (
                "Strong comprehension of complex academic texts",
                "Excellent vocabulary knowledge",
                "Ability to identify implicit meanings",
            ),
            (
                "Minor difficulties with specialized vocabulary",
                "Occasional misinterpretation of nuanced details",
                "Time management on very complex questions",
            ),
        ),
        Tier.Middle: (
            (
                "Ability to identify main ideas in passages",
                "Understanding of basic vocabulary",
                "Identification of explicit information",
            ),
            (
                "Difficulty with complex vocabulary",
                "Limited understanding of implicit information",
                "Time management during the test",
            ),
        ),
        Tier.Low: (
            (
                "Recognition of basic vocabulary",
                "Ability to find explicitly stated information",
                "Understanding of simple sentences",
            ),
            (
                "Limited vocabulary affecting overall comprehension",
                "Difficulty understanding complex sentence structures",
                "Problems identifying the main ideas of passages",
            ),
        ),
    },
    ExamModule.Listening: {
        Tier.High: (
            (
                "Strong ability to follow complex discussions",
                "Good understanding of different accents",
                "Excellent detail recognition",
            ),
            (
                "Occasional difficulty with very specialized terminology",
                "Minor issues with rapid speech in academic contexts",
                "Slight inaccuracies in note-taking during complex sections",
            ),
        ),
        Tier.Middle: (
            (
                "Understanding of simple conversational English",
                "Ability to follow straightforward instructions",
                "Recognition of basic context and setting",
            ),
            (
                "Difficulty with fast speech and complex accents",
                "Missing specific details in longer passages",
                "Trouble with note-taking while listening",
            ),
        ),
        Tier.Low: (
            (
                "Understanding of simple, clearly spoken statements",
                "Recognition of familiar words and phrases",
                "Ability to follow slow, clear instructions",
            ),
            (
                "Significant difficulty with natural speech rate",
                "Limited vocabulary affecting overall comprehension",
                "Trouble following longer conversations or lectures",
            ),
        ),
    },
    ExamModule.Writing: {
        Tier.High: (
            (
                "Clear organization and logical development",
                "Good range of vocabulary and sentence structures",
                "Effective use of cohesive devices",
            ),
            (
                "Occasional imprecision in word choice",
                "Infrequent grammar errors in complex structures",
                "Room for more sophisticated argument development",
            ),
        ),
        Tier.Middle: (
            (
                "Basic organization of ideas",
                "Expressing simple opinions",
                "Use of common vocabulary",
            ),
            (
                "Limited sentence structure variety",
                "Grammar errors affecting clarity",
                "Inadequate development of ideas",
            ),
        ),
        Tier.Low: (
            (
                "Ability to communicate basic ideas",
                "Use of simple vocabulary",
                "Attempting to address the task",
            ),
            (
                "Frequent grammar errors affecting clarity",
                "Very limited vocabulary range",
                "Poor organization and paragraph structure",
            ),
        ),
    },
    ExamModule.Speaking: {
        Tier.High: (
            (
                "Fluent delivery with minimal hesitation",
                "Good range of vocabulary for most topics",
                "Clear pronunciation with natural intonation",
            ),
            (
                "Occasional difficulty with specialized topics",
                "Some minor errors in complex grammatical structures",
                "Room for improvement in idiomatic language use",
            ),
        ),
        Tier.Middle: (
            (
                "Ability to communicate basic ideas",
                "Responding to familiar questions",
                "Using simple vocabulary appropriately",
            ),
            (
                "Limited fluency and hesitation",
                "Pronunciation issues affecting understanding",
                "Restricted range of grammar and vocabulary",
            ),
        ),
        Tier.Low: (
            (
                "Ability to communicate some basic information",
                "Use of simple vocabulary for familiar topics",
                "Attempting to respond to questions",
            ),
            (
                "Limited range of expression causing communication breakdowns",
                "Pronunciation issues significantly affecting understanding",
                "Frequent long pauses and hesitations",
            ),
        ),
    },
}

TASK_FEEDBACK_FALLBACK = "No specific feedback available. Focus on improving structure, vocabulary, and grammar."

# used when a summary was generated but no study plan came with it
DEFAULT_NEXT_STEPS: tuple[str, ...] = (
    "Practice regular reading in English from a variety of sources",
    "Work on improving your vocabulary in different contexts",
    "Listen to English podcasts and news to improve comprehension",
    "Practice writing essays with a focus on structure and coherence",
    "Speak English whenever possible to build fluency",
)

# used when overall feedback could not be requested at all
FALLBACK_NEXT_STEPS: tuple[str, ...] = (
    "Focus on vocabulary development across different topics",
    "Practice reading academic texts and articles",
    "Listen to English media to improve comprehension",
    "Practice writing with proper structure and organization",
    "Speak English regularly to improve fluency and pronunciation",
)

DEFAULT_SUMMARY = (
    "Your performance shows both strengths and areas for improvement. Continue practicing to enhance your skills."
)


def module_feedback(module: ExamModule, band: float, high: float = 7.0, low: float = 4.0) -> ModuleFeedback:
    strengths, weaknesses = OBSERVATIONS[module][tier_for(band, high, low)]
    cls = WritingFeedback if module is ExamModule.Writing else ModuleFeedback
    return cls(strengths=strengths, weaknesses=weaknesses, advice=ADVICE[module], source=FeedbackSource.Fallback)


def writing_feedback(
    band: float, answered: t.Iterable[WritingTaskKind], high: float = 7.0, low: float = 4.0
) -> WritingFeedback:
    """Static writing feedback with the fallback critique for every answered task."""
    feedback = t.cast(WritingFeedback, module_feedback(ExamModule.Writing, band, high, low))
    return feedback.model_copy(update={f"{kind.value}_feedback": TASK_FEEDBACK_FALLBACK for kind in answered})


def overall_feedback(overall: float) -> OverallFeedback:
    return OverallFeedback(
        summary=(
            f"Your overall band score is {overall:.1f}. "
            "You've shown good progress in some areas, but there's room for improvement in others."
        ),
        next_steps=FALLBACK_NEXT_STEPS,
        source=FeedbackSource.Fallback,
    )
