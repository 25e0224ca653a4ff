__all__ = [
    "BandwiseContainer",
    "LLMContainer",
    "TemplateContainer",
]

from .bandwise import BandwiseContainer
from .llm import LLMContainer
from .template import TemplateContainer
