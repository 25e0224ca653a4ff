"""Exam content generation."""

from .synthesizer import ContentSynthesizer, requested_modules
from .validator import validate_document, validate_module

__all__ = [
    "ContentSynthesizer",
    "requested_modules",
    "validate_document",
    "validate_module",
]
