# core/feedback_generator.py
from __future__ import annotations
import logging, time
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from core.response_parser import ParseOutcome, parse_response
from prompts.evaluation_prompts import (
    ANSWER_SYSTEM_PROMPT, SET_SYSTEM_PROMPT,
    get_answer_evaluation_prompt, get_question_set_prompt,
)
from utils import config

logger = logging.getLogger(__name__)

ANSWER_REQUIRED_FIELDS = (
    "preliminaryAnalysis", "performanceLevel", "summary", "strengths",
    "improvements", "followUpQuestion", "expertGuidance",
)
SET_REQUIRED_FIELDS = ("performanceLevel", "summary")

Completion = Callable[..., str]


class PreliminaryAnalysis(BaseModel):
    model_config = ConfigDict(extra="allow")
    isValid: StrictBool
    reasoning: str = ""


class AnswerEvaluation(BaseModel):
    model_config = ConfigDict(extra="allow")
    preliminaryAnalysis: PreliminaryAnalysis
    performanceLevel: str
    summary: str
    strengths: List[Any]
    improvements: List[Any]
    followUpQuestion: str


def _default_completion() -> Completion:
    from core.llm_service import generate_completion
    return generate_completion

# ---------- Public API ----------
def evaluate_answer(
    question: str,
    user_answer: str,
    *,
    stage: str = "professional",
    question_analysis: str = "",
    answer_framework: str = "",
    completion: Optional[Completion] = None,
    max_attempts: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Score a single answer against its playbook. Always returns a record with the
    ANSWER_REQUIRED_FIELDS keys; on any failure that record is the fallback
    evaluation with the reason in preliminaryAnalysis.reasoning.
    """
    if not question_analysis or not answer_framework:
        return fallback_answer_evaluation(
            question_analysis, answer_framework,
            "evaluation request is missing questionAnalysis or answerFramework",
        )

    prompt = get_answer_evaluation_prompt(question, user_answer, stage, question_analysis, answer_framework)
    completion = completion or _default_completion()
    attempts = max_attempts or config.EVALUATION_MAX_ATTEMPTS

    reason = "no attempt made"
    for attempt in range(attempts):
        if attempt:
            time.sleep(0.5 * attempt)
        try:
            raw = completion(
                prompt,
                system=ANSWER_SYSTEM_PROMPT,
                temperature=config.EVALUATION_TEMPERATURE,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.exception("Answer evaluation call failed (attempt %d)", attempt + 1)
            reason = str(e)
            continue

        outcome = parse_response(raw, ANSWER_REQUIRED_FIELDS)
        if not outcome.ok:
            reason = f"{outcome.reason.value}: {outcome.detail[:200]}"
            continue
        try:
            AnswerEvaluation.model_validate(outcome.record)
        except ValidationError as e:
            logger.warning("Answer evaluation failed validation: %s", e.errors()[:3])
            reason = "preliminaryAnalysis.isValid missing or not a boolean"
            continue
        return outcome.record

    logger.warning("Falling back to default answer evaluation: %s", reason)
    return fallback_answer_evaluation(question_analysis, answer_framework, reason)


def evaluate_question_set(
    stage: str,
    questions: List[str],
    answers: List[str],
    *,
    stage_title: str = "",
    set_index: int = 1,
    completion: Optional[Completion] = None,
) -> Dict[str, Any]:
    prompt = get_question_set_prompt(stage, questions, answers, stage_title, set_index)
    completion = completion or _default_completion()
    try:
        raw = completion(
            prompt,
            system=SET_SYSTEM_PROMPT,
            temperature=config.SET_EVALUATION_TEMPERATURE,
        )
    except Exception:
        logger.exception("Question set evaluation call failed")
        return fallback_set_evaluation(stage, answers)

    outcome = parse_response(raw, SET_REQUIRED_FIELDS)
    if not outcome.ok:
        logger.warning("Set evaluation unusable (%s), using fallback", outcome.reason.value)
        return fallback_set_evaluation(stage, answers)
    record = outcome.record
    if not record.get("performanceLevel") or not record.get("summary"):
        logger.warning("Set evaluation has empty performanceLevel/summary, using fallback")
        return fallback_set_evaluation(stage, answers)
    return record


def evaluate_batch(raw_outputs: Iterable[str], required_fields: Iterable[str] = ()) -> List[ParseOutcome]:
    """Recover every raw output in order; one bad output never stops the batch."""
    fields = tuple(required_fields)
    return [parse_response(raw, fields) for raw in raw_outputs]

# ---------- Fallbacks (no API required) ----------
def fallback_answer_evaluation(question_analysis: str, answer_framework: str, reason: str) -> Dict[str, Any]:
    return {
        "preliminaryAnalysis": {
            "isValid": False,
            "reasoning": f"Evaluation service error: {reason}",
        },
        "performanceLevel": "Cannot evaluate",
        "summary": "Sorry, the AI coach hit a snag and could not finish this evaluation.",
        "strengths": [],
        "improvements": [
            {
                "competency": "Service stability",
                "suggestion": "This is usually temporary, e.g. a network blip or a busy model endpoint.",
                "example": "Wait a moment and resubmit. If it keeps happening, contact support.",
            }
        ],
        "followUpQuestion": "Please try submitting again, we're looking forward to your answer!",
        "expertGuidance": {
            "questionAnalysis": question_analysis or "",
            "answerFramework": answer_framework or "",
        },
    }


_STAGE_FALLBACKS: Dict[str, Dict[str, Any]] = {
    "hr": {
        "summary_answered": (
            "Your answers play like a well-produced résumé documentary: the plot is complete but there "
            "is no highlight reel yet. The basics are solid; add more director's thinking to show your value."
        ),
        "summary_empty": "Looks like you're still preparing for this feature film. Answer every question first so we can read your script.",
        "improvements": [
            {
                "area": "From narrator to director",
                "suggestion": "Don't only say what you did, say why. Every project should show your decision-making.",
                "example": "On an AI support bot with 3.2/5 satisfaction I traced it to poor answer accuracy, "
                           "led a RAG rollout, and took satisfaction to 4.6 and accuracy from 78% to 94%.",
            },
            {
                "area": "Add quantified results",
                "suggestion": "Use concrete numbers to prove impact and make the story convincing.",
                "example": "State the business metric that moved, e.g. 'retention +30%' or 'cost down $70k'.",
            },
        ],
    },
    "professional": {
        "summary_answered": (
            "You know the technical concepts, like a diligent screenwriter. Turning technology into business "
            "value still needs more of a producer's commercial instinct."
        ),
        "summary_empty": "The professional round needs your technical and commercial thinking. Answer the questions so we can see your pitch.",
        "improvements": [
            {
                "area": "Turn tech into business value",
                "suggestion": "When you discuss technology, state the commercial reason for the choice and its measured effect.",
                "example": "Not 'we used RAG' but 'we chose RAG over fine-tuning, saving 60% compute while lifting accuracy to 92%'.",
            },
            {
                "area": "Show the data flywheel",
                "suggestion": "Explain the data-model-business loop and how it compounds value.",
                "example": "User data improves the model, a better model improves the experience, a better experience brings more data and revenue.",
            },
        ],
    },
    "final": {
        "summary_answered": (
            "You have a view on the industry, like a screenwriter with ideas. Strategic depth and a concrete "
            "execution path still need a director's big-picture view."
        ),
        "summary_empty": "The final round is about strategy and business insight. Answer the questions so we can see your blockbuster plan.",
        "improvements": [
            {
                "area": "Depth of strategic analysis",
                "suggestion": "Back strategic calls with data, and name your method and sources.",
                "example": "Not 'agents are promising' but 'a survey of 50 firms showed 80% want support automation; start with finance and target 15% share'.",
            },
            {
                "area": "Draw the business blueprint",
                "suggestion": "Cover market, competition and monetisation with a concrete execution plan.",
                "example": "Include market size, competitors, differentiation, pricing, acquisition cost and expected margin.",
            },
        ],
    },
}


def fallback_set_evaluation(stage: str, answers: List[str]) -> Dict[str, Any]:
    has_answers = any(a and a.strip() for a in answers)
    fb = _STAGE_FALLBACKS.get((stage or "").lower(), _STAGE_FALLBACKS["hr"])

    if has_answers:
        strengths = [
            {"area": "Basic understanding", "description": "You understood the questions and answered with some logic. A solid start, like a conscientious intern."},
            {"area": "Learning attitude", "description": "You showed up to practice, which is the foundation for growth."},
        ]
    else:
        strengths = [
            {"area": "Willingness to learn", "description": "Practising at all is the first step. The key now is to start answering."},
        ]

    return {
        "performanceLevel": "Writer level" if has_answers else "Assistant level",
        "summary": fb["summary_answered"] if has_answers else fb["summary_empty"],
        "strengths": strengths,
        "improvements": [dict(i) for i in fb["improvements"]],
        "nextSteps": [
            {
                "focus": "Build a case library",
                "actionable": "Within two weeks prepare 3-5 complete project stories: context, challenge, solution, result, reflection.",
            },
            {
                "focus": "AI product knowledge",
                "actionable": "Each week study one AI product's architecture, business model and user value, and write up your analysis.",
            },
        ],
        "encouragement": (
            "You've taken the first step. An AI PM is a director who balances technology, product and business; "
            "keep practising and you'll grow from assistant to director."
        ),
    }
