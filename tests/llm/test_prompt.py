"""Tests for prompt construction."""

from __future__ import annotations

import json

import jinja2
import pytest

from bandwise.llm.prompt import build_generation_prompt, build_module_feedback_prompt, \
    build_overall_feedback_prompt, build_speaking_evaluation_prompt, build_writing_evaluation_prompt, \
    build_writing_task_feedback_prompt, create_prompt_env, example_document
from bandwise.model import ExamModule, ExamVariant, ModuleScores, WritingContent, WritingTaskKind


class TestGenerationPrompt(object):
    """Tests for the content generation prompt."""

    def test_lists_requested_modules_and_variant(self, llm_env: jinja2.Environment) -> None:
        prompt = build_generation_prompt(llm_env, ExamVariant.General, [ExamModule.Writing, ExamModule.Reading])

        assert "IELTS General Training test" in prompt
        assert "with the following modules: Reading, Writing." in prompt
        assert "No trailing commas" in prompt

    def test_example_holds_only_requested_modules(self) -> None:
        example = json.loads(example_document([ExamModule.Speaking]))
        assert list(example) == ["speaking"]
        assert example["speaking"]["parts"][0]["part"] == 1

    def test_example_is_embedded(self, llm_env: jinja2.Environment) -> None:
        prompt = build_generation_prompt(llm_env, ExamVariant.Academic, [ExamModule.Listening])
        assert '"audioText"' in prompt
        assert '"passages"' not in prompt

    def test_no_modules(self, llm_env: jinja2.Environment) -> None:
        with pytest.raises(ValueError):
            build_generation_prompt(llm_env, ExamVariant.Academic, [])

    def test_default_template_path(self) -> None:
        """The environment finds the packaged templates without configuration."""
        env = create_prompt_env()
        assert "IELTS Academic test" in build_generation_prompt(env, ExamVariant.Academic, [ExamModule.Reading])


class TestEvaluationPrompts(object):
    """Tests for the band estimation prompts."""

    def test_writing_prompt_pairs_instructions_and_responses(self, llm_env: jinja2.Environment) -> None:
        content = WritingContent.model_validate({
            "tasks": [
                {"type": "task1", "instructions": "Describe the chart."},
                {"type": "task2", "instructions": "Discuss both views."},
            ]
        })
        prompt = build_writing_evaluation_prompt(
            llm_env, ExamVariant.Academic, content, {"task1": "The chart shows...", "task2": ""}
        )

        assert "Task 1 Instructions: Describe the chart." in prompt
        assert "Task 1 Response: The chart shows..." in prompt
        assert "Task 2 Instructions: Discuss both views." in prompt
        assert "Overall Writing Score: [score]" in prompt

    def test_speaking_prompt_mentions_recordings(self, llm_env: jinja2.Environment) -> None:
        prompt = build_speaking_evaluation_prompt(llm_env, ExamVariant.Academic, None, [], recordings=2)
        assert "2 answer(s) were recorded" in prompt
        assert "intermediate to upper-intermediate" in prompt

    def test_speaking_prompt_with_transcripts(self, llm_env: jinja2.Environment) -> None:
        prompt = build_speaking_evaluation_prompt(llm_env, ExamVariant.Academic, None, ["I like to travel."])
        assert "- I like to travel." in prompt
        assert "recorded" not in prompt


class TestFeedbackPrompts(object):
    """Tests for the feedback prompts."""

    def test_module_prompt(self, llm_env: jinja2.Environment) -> None:
        prompt = build_module_feedback_prompt(llm_env, ExamVariant.Academic, ExamModule.Listening, 6.5)
        assert "scored 6.5 in the listening section of the Academic IELTS test" in prompt
        assert "Advice:" in prompt

    def test_task_prompt(self, llm_env: jinja2.Environment) -> None:
        prompt = build_writing_task_feedback_prompt(llm_env, WritingTaskKind.Task2, "Discuss.", "I think...")
        assert prompt.startswith("Evaluate this IELTS Writing Task 2 response.")
        assert "Response: I think..." in prompt

    def test_overall_prompt(self, llm_env: jinja2.Environment) -> None:
        prompt = build_overall_feedback_prompt(llm_env, ModuleScores(reading=7.0, writing=6.0))
        assert "Reading: 7.0" in prompt
        assert "Writing: 6.0" in prompt
        assert "Overall: 6.5" in prompt
