"""Shared pytest fixtures for the interview coach tests."""

import json
import random

import pytest

from core.tag_selector import LabeledItem


# =============================================================================
# Mock Factories - fake LLM completions
# =============================================================================

def create_fake_completion(responses):
    """Create a stand-in for generate_completion.

    Args:
        responses: Items returned in order, one per call. An Exception instance
            is raised instead of returned.

    Returns:
        Callable with a `calls` list recording (prompt, kwargs) per call
    """
    queue = list(responses)

    def fake(prompt, **kwargs):
        fake.calls.append((prompt, kwargs))
        item = queue.pop(0) if queue else ""
        if isinstance(item, Exception):
            raise item
        return item

    fake.calls = []
    return fake


VALID_ANSWER_EVALUATION = {
    "preliminaryAnalysis": {"isValid": True, "reasoning": "On topic"},
    "performanceLevel": "Producer",
    "summary": "Good structure, light on numbers.",
    "strengths": [{"competency": "Structure", "description": "Clear opening"}],
    "improvements": [{"competency": "Data", "suggestion": "Quantify", "example": "Lifted CTR 12%"}],
    "followUpQuestion": "How would you measure success?",
    "expertGuidance": {"questionAnalysis": "qa", "answerFramework": "af"},
}


@pytest.fixture
def valid_evaluation_json():
    return json.dumps(VALID_ANSWER_EVALUATION, ensure_ascii=False)


@pytest.fixture
def fake_completion():
    return create_fake_completion


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def ten_tags():
    return [LabeledItem(title=f"tag-{i}", description=f"tag number {i}") for i in range(10)]


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("core.feedback_generator.time.sleep", lambda s: None)
