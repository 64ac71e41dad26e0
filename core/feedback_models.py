# core/feedback_models.py
from __future__ import annotations
from typing import List

from pydantic import BaseModel, Field

from core.tag_selector import LabeledItem


class OverallAssessment(BaseModel):
    level: str
    summary: str = ""


class QualitativeFeedback(BaseModel):
    """One practice session's qualitative feedback, as shown in practice history."""
    session_id: str
    practice_date: str                      # ISO date, YYYY-MM-DD
    question_text: str = ""
    overall_assessment: OverallAssessment
    highlights: List[LabeledItem] = Field(default_factory=list)
    suggestions: List[LabeledItem] = Field(default_factory=list)
    action_plan: List[LabeledItem] = Field(default_factory=list)


class CompetencyTagTrend(BaseModel):
    date: str
    tag_title: str
    tag_type: str                           # "highlight" | "suggestion"
    appeared: bool = True


class CompetencyOverview(BaseModel):
    competency: str
    description: str
    level: str
    highlight_count: int
    suggestion_count: int
