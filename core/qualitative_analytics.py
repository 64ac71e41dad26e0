# core/qualitative_analytics.py
from __future__ import annotations
from collections import Counter
from typing import List

from core.feedback_models import CompetencyOverview, CompetencyTagTrend, QualitativeFeedback

CORE_COMPETENCIES = {
    "Content quality": "Depth, accuracy and relevance of the answer",
    "Logical thinking": "Clarity of reasoning, argument and structure",
    "Communication": "Fluency, word choice and overall delivery",
    "Creative thinking": "Original ideas, fresh angles and inventive solutions",
    "Problem analysis": "Understanding of the problem, analysis framework and approach",
}

LEVEL_EXCELLENT = "Excellent"
LEVEL_PROFICIENT = "Proficient"
LEVEL_DEVELOPING = "Developing"


def most_frequent_suggestion(feedbacks: List[QualitativeFeedback]) -> str:
    counts = Counter(s.title for fb in feedbacks for s in fb.suggestions)
    if not counts:
        return "No suggestion data yet"
    return counts.most_common(1)[0][0]


def total_highlights(feedbacks: List[QualitativeFeedback]) -> int:
    return sum(len(fb.highlights) for fb in feedbacks)


def _mentions(item, competency: str) -> bool:
    description = getattr(item, "description", "") or ""
    return competency.lower() in item.title.lower() or competency.lower() in str(description).lower()


def _count_mentions(feedbacks: List[QualitativeFeedback], competency: str):
    highlights = sum(1 for fb in feedbacks for h in fb.highlights if _mentions(h, competency))
    suggestions = sum(1 for fb in feedbacks for s in fb.suggestions if _mentions(s, competency))
    return highlights, suggestions


def analyze_competency_level(competency: str, feedbacks: List[QualitativeFeedback]) -> str:
    """Level from the share of positive mentions: >=70% excellent, >=40% proficient."""
    highlights, suggestions = _count_mentions(feedbacks, competency)
    total = highlights + suggestions
    if total == 0:
        return LEVEL_DEVELOPING
    ratio = highlights / total
    if ratio >= 0.7:
        return LEVEL_EXCELLENT
    if ratio >= 0.4:
        return LEVEL_PROFICIENT
    return LEVEL_DEVELOPING


def generate_growth_advice(feedbacks: List[QualitativeFeedback]) -> str:
    if not feedbacks:
        return "Complete a few more practice sessions and we'll tailor growth advice for you."

    suggestions = Counter(s.title for fb in feedbacks for s in fb.suggestions)
    actions = Counter(a.title for fb in feedbacks for a in fb.action_plan)
    top_suggestions = [title for title, _ in suggestions.most_common(2)]
    top_actions = [title for title, _ in actions.most_common(2)]

    advice = "Based on your practice history, "
    if top_suggestions:
        advice += f"focus on improving {' and '.join(top_suggestions)}. "
    if top_actions:
        advice += f"Prioritise learning and practice around {' and '.join(top_actions)}. "
    advice += "Consistent practice will help you break through in these key areas."
    return advice


def competency_tag_trends(feedbacks: List[QualitativeFeedback]) -> List[CompetencyTagTrend]:
    trends: List[CompetencyTagTrend] = []
    for fb in feedbacks:
        for h in {h.title for h in fb.highlights}:
            trends.append(CompetencyTagTrend(date=fb.practice_date, tag_title=h, tag_type="highlight"))
        for s in {s.title for s in fb.suggestions}:
            trends.append(CompetencyTagTrend(date=fb.practice_date, tag_title=s, tag_type="suggestion"))
    # ISO dates sort lexically
    return sorted(trends, key=lambda t: (t.date, t.tag_type, t.tag_title))


def build_competency_overview(feedbacks: List[QualitativeFeedback]) -> List[CompetencyOverview]:
    overview = []
    for competency, description in CORE_COMPETENCIES.items():
        highlights, suggestions = _count_mentions(feedbacks, competency)
        overview.append(CompetencyOverview(
            competency=competency,
            description=description,
            level=analyze_competency_level(competency, feedbacks),
            highlight_count=highlights,
            suggestion_count=suggestions,
        ))
    return overview
