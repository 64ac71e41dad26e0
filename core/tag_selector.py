# core/tag_selector.py
from __future__ import annotations
import logging, random, threading
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, constr

logger = logging.getLogger(__name__)

HIGHLIGHT_TAGS = [
    "Creative association", "Clear logical structure", "Fluent, natural delivery",
    "Highly relevant content", "Well-chosen examples", "Quick thinking",
    "Original viewpoint", "In-depth analysis",
]
SUGGESTION_TAGS = [
    "Content relevance", "Logical coherence", "Concrete supporting examples",
    "Depth of answer", "Logic breaks down", "Strays far off topic",
    "Could be more concise", "Word choice could be sharper", "Time management",
    "Not enough interaction",
]
DEFAULT_TAG_CATALOG = tuple(HIGHLIGHT_TAGS + SUGGESTION_TAGS)

DEFAULT_WEIGHT = 1.0
UNSEEN_MULTIPLIER = 2.0
# distance (rounds since last pick) -> multiplier; anything further out is 1.0
RECENCY_MULTIPLIERS = {1: 0.1, 2: 0.5}


class LabeledItem(BaseModel):
    """A diagnostic tag. `title` is the identity; any other field is opaque payload."""
    model_config = ConfigDict(frozen=True, extra="allow")

    title: constr(strip_whitespace=True, min_length=1)


T = TypeVar("T")


class TagDiversitySelector:
    """
    Picks feedback tags for consecutive practice rounds while steering away from
    titles shown in the last couple of rounds.

    One instance per selection stream (user, session, test run). Calls on the same
    instance are serialized; separate instances share nothing.
    """

    def __init__(
        self,
        catalog: Iterable[str] = DEFAULT_TAG_CATALOG,
        *,
        weights: Optional[Mapping[str, float]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._catalog = tuple(catalog)
        self._weight_overrides = dict(weights or {})
        for title, w in self._weight_overrides.items():
            if w <= 0:
                raise ValueError(f"Base weight for {title!r} must be positive, got {w}")
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self.recent_selections: Dict[str, int] = {}
        self.base_weights: Dict[str, float] = {}
        self._init_weights()

    def _init_weights(self) -> None:
        self.base_weights = {title: DEFAULT_WEIGHT for title in self._catalog}
        self.base_weights.update(self._weight_overrides)

    # ------------------------- Scoring -------------------------

    def diversity_score(self, title: str, round_index: int) -> float:
        base = self.base_weights.get(title, DEFAULT_WEIGHT)
        last = self.recent_selections.get(title)
        if last is None:
            return base * UNSEEN_MULTIPLIER
        distance = round_index - last
        return base * RECENCY_MULTIPLIERS.get(distance, 1.0)

    # ------------------------- Selection -------------------------

    def select_tags(
        self,
        candidates: Sequence[T],
        count: int,
        round_index: int,
        *,
        record: bool = True,
    ) -> List[T]:
        """
        Weighted draw without replacement from the `2 * count` best-scoring candidates.
        Returns picks in draw order and records them against `round_index`. With
        `record=False` the caller adjusts the picks and calls `record_selection` itself.
        """
        if not candidates or count <= 0:
            return []

        with self._lock:
            scored = [(item, self.diversity_score(item.title, round_index)) for item in candidates]
            scored.sort(key=lambda pair: pair[1], reverse=True)
            pool = scored[:min(count * 2, len(scored))]

            selected: List[T] = []
            while len(selected) < count and pool:
                idx = self._weighted_index([score for _, score in pool])
                item, _ = pool.pop(idx)
                selected.append(item)

            if record:
                for item in selected:
                    self.recent_selections[item.title] = round_index

        logger.debug("Round %d selected tags: %s", round_index, [s.title for s in selected])
        return selected

    def record_selection(self, items: Iterable[T], round_index: int) -> None:
        with self._lock:
            for item in items:
                self.recent_selections[item.title] = round_index

    def _weighted_index(self, scores: List[float]) -> int:
        remaining = self._rng.random() * sum(scores)
        for i, score in enumerate(scores):
            remaining -= score
            if remaining <= 0:
                return i
        return len(scores) - 1  # float rounding left a sliver

    def reset(self) -> None:
        with self._lock:
            self.recent_selections.clear()
            self._init_weights()


__all__ = [
    "LabeledItem", "TagDiversitySelector",
    "DEFAULT_TAG_CATALOG", "HIGHLIGHT_TAGS", "SUGGESTION_TAGS",
]
