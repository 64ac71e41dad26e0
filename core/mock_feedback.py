# core/mock_feedback.py
from __future__ import annotations
import random
from datetime import date, timedelta
from typing import List, Optional

from core.feedback_models import OverallAssessment, QualitativeFeedback
from core.tag_selector import LabeledItem, TagDiversitySelector

SEVERITY_LEVELS = ("critical", "moderate", "minor")

MOCK_HIGHLIGHTS = [
    LabeledItem(title="Creative association", description="Showed strong creative thinking and associative range"),
    LabeledItem(title="Clear logical structure", description="Well-reasoned answer with clear layers"),
    LabeledItem(title="Fluent, natural delivery", description="Fluent delivery with accurate wording"),
    LabeledItem(title="Highly relevant content", description="Answer stayed on the question and hit the key points"),
    LabeledItem(title="Well-chosen examples", description="Used concrete cases to support the argument"),
    LabeledItem(title="Quick thinking", description="Got to the heart of the problem fast"),
    LabeledItem(title="Original viewpoint", description="Offered an original, valuable perspective"),
    LabeledItem(title="In-depth analysis", description="Analysed the problem thoroughly"),
]

MOCK_SUGGESTIONS = [
    LabeledItem(title="Content relevance", description="Tie the answer more closely to the question", severity="moderate"),
    LabeledItem(title="Logical coherence", description="Make the argument flow more coherently", severity="moderate"),
    LabeledItem(title="Concrete supporting examples", description="Add concrete cases to back up the points", severity="moderate"),
    LabeledItem(title="Depth of answer", description="Dig further into the root of the problem", severity="moderate"),
    LabeledItem(title="Logic breaks down", description="The reasoning is muddled; reorganise the answer", severity="critical"),
    LabeledItem(title="Strays far off topic", description="The answer misses the question; re-read what is being asked", severity="critical"),
    LabeledItem(title="Could be more concise", description="Tighten the wording", severity="minor"),
    LabeledItem(title="Word choice could be sharper", description="Some terms are imprecise", severity="minor"),
    LabeledItem(title="Time management", description="Keep the answer inside the time box", severity="moderate"),
    LabeledItem(title="Not enough interaction", description="Engage the interviewer more", severity="minor"),
]

MOCK_ACTION_PLANS = [
    LabeledItem(title="Product thinking basics", description="Study the core principles and methods of product design"),
    LabeledItem(title="Logic drills", description="Practise structured reasoning exercises"),
    LabeledItem(title="Case analysis practice", description="Work through business cases to build practical skill"),
    LabeledItem(title="Delivery technique", description="Practise clear, concise delivery"),
    LabeledItem(title="Time management practice", description="Answer completely within a fixed time"),
]

ASSESSMENT_LEVELS = ("Junior", "Assistant level", "Senior")


def ensure_severity_mix(
    selected: List[LabeledItem],
    pool: List[LabeledItem],
    rng: random.Random,
) -> List[LabeledItem]:
    """
    If a severity level is missing from `selected`, swap the last pick for an unused
    suggestion of one missing level. Only done when more than one item was picked.
    """
    present = {getattr(s, "severity", None) for s in selected}
    missing = [level for level in SEVERITY_LEVELS if level not in present]
    if not missing or len(selected) <= 1:
        return list(selected)

    target = rng.choice(missing)
    taken = {s.title for s in selected}
    options = [s for s in pool if getattr(s, "severity", None) == target and s.title not in taken]
    if not options:
        return list(selected)

    result = list(selected)
    result[-1] = rng.choice(options)
    return result


def generate_mock_feedback(
    count: int,
    selector: Optional[TagDiversitySelector] = None,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> List[QualitativeFeedback]:
    """Sample practice history for development; session i is dated i days before `today`."""
    rng = rng or random.Random()
    selector = selector or TagDiversitySelector(rng=rng)
    selector.reset()
    today = today or date.today()

    sessions: List[QualitativeFeedback] = []
    for i in range(max(0, count)):
        highlights = selector.select_tags(MOCK_HIGHLIGHTS, rng.randint(2, 3), i)
        suggestions = selector.select_tags(MOCK_SUGGESTIONS, rng.randint(2, 3), i, record=False)
        suggestions = ensure_severity_mix(suggestions, MOCK_SUGGESTIONS, rng)
        selector.record_selection(suggestions, i)

        sessions.append(QualitativeFeedback(
            session_id=f"session_{i + 1}",
            practice_date=(today - timedelta(days=i)).isoformat(),
            question_text=f"Mock interview question {i + 1}",
            overall_assessment=OverallAssessment(
                level=rng.choice(ASSESSMENT_LEVELS),
                summary="Solid overall, with a few standout moments and some clear areas to improve.",
            ),
            highlights=highlights,
            suggestions=suggestions,
            action_plan=MOCK_ACTION_PLANS[:rng.randint(1, 2)],
        ))
    return sessions
