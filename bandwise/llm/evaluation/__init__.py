"""Evaluation pipeline for exam attempts."""

from .band import overall_band, percentage_to_band, round_band, snap_band
from .comparator import answers_match
from .config import ScoringSettings
from .feedback import generate_module_feedback, generate_overall_feedback, generate_writing_feedback
from .objective import tally_module
from .pipeline import EvaluationPipeline
from .subjective import evaluate_speaking, evaluate_writing, extract_band, extract_writing_band, heuristic_band

__all__ = [
    "EvaluationPipeline",
    "ScoringSettings",
    "answers_match",
    "evaluate_speaking",
    "evaluate_writing",
    "extract_band",
    "extract_writing_band",
    "generate_module_feedback",
    "generate_overall_feedback",
    "generate_writing_feedback",
    "heuristic_band",
    "overall_band",
    "percentage_to_band",
    "round_band",
    "snap_band",
    "tally_module",
]
