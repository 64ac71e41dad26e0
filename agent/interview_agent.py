# agent/interview_agent.py
from __future__ import annotations

from typing import List, Dict, Any, Optional, Sequence

from core.feedback_generator import Completion, evaluate_answer, evaluate_question_set
from core.tag_selector import LabeledItem, TagDiversitySelector


class InterviewAgent:
    """
    One practice stream (one user). Owns its tag selector, so two agents never
    share recency state, and a round counter that advances once per session.
    """

    def __init__(
        self,
        stage: str = "professional",
        selector: Optional[TagDiversitySelector] = None,
        completion: Optional[Completion] = None,
    ):
        self.stage = stage
        self.selector = selector or TagDiversitySelector()
        self.completion = completion
        self.round_index = 0
        self.evaluations: List[Dict[str, Any]] = []
        self.set_feedback: Dict[str, Any] | None = None

    # ------------------------- Evaluation -------------------------

    def evaluate_answer(
        self,
        question: str,
        answer: str,
        *,
        question_analysis: str,
        answer_framework: str,
    ) -> Dict[str, Any]:
        evaluation = evaluate_answer(
            question,
            answer,
            stage=self.stage,
            question_analysis=question_analysis,
            answer_framework=answer_framework,
            completion=self.completion,
        )
        self.evaluations.append({"question": question, "answer": answer, "evaluation": evaluation})
        return evaluation

    def evaluate_question_set(
        self,
        questions: List[str],
        answers: List[str],
        *,
        stage_title: str = "",
        set_index: int = 1,
    ) -> Dict[str, Any]:
        self.set_feedback = evaluate_question_set(
            self.stage,
            questions,
            answers,
            stage_title=stage_title,
            set_index=set_index,
            completion=self.completion,
        )
        return self.set_feedback

    # ------------------------- Feedback tags -------------------------

    def select_feedback_tags(
        self,
        highlights: Sequence[LabeledItem],
        suggestions: Sequence[LabeledItem],
        *,
        highlight_count: int = 2,
        suggestion_count: int = 2,
    ) -> Dict[str, List[LabeledItem]]:
        """Pick this session's tags, then move on to the next round."""
        picked = {
            "highlights": self.selector.select_tags(highlights, highlight_count, self.round_index),
            "suggestions": self.selector.select_tags(suggestions, suggestion_count, self.round_index),
        }
        self.round_index += 1
        return picked

    # ------------------------- Accessors / Utils -------------------------

    def valid_answer_count(self) -> int:
        return sum(
            1 for e in self.evaluations
            if e["evaluation"].get("preliminaryAnalysis", {}).get("isValid") is True
        )

    def restart(self) -> None:
        self.round_index = 0
        self.evaluations = []
        self.set_feedback = None
        self.selector.reset()
