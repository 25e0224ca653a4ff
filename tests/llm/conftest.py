"""Fixtures for LLM tests."""

from __future__ import annotations

import jinja2
import pytest

from bandwise.core import BandwiseContainer
from bandwise.llm.evaluation import ScoringSettings


@pytest.fixture(scope="session")
def llm_env(container: BandwiseContainer) -> jinja2.Environment:
    """Provide the LLM Jinja2 environment from the DI container."""
    return container.template().llm()


@pytest.fixture
def scoring() -> ScoringSettings:
    return ScoringSettings()
