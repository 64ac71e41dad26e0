"""Tests for diversity-aware tag selection.

Run with: pytest tests/test_tag_selector.py
"""

import random
import threading

import pytest

from core.tag_selector import DEFAULT_TAG_CATALOG, LabeledItem, TagDiversitySelector


@pytest.mark.unit
def test_recency_multipliers(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(0))
    title = ten_tags[0].title

    assert selector.diversity_score(title, 5) == pytest.approx(2.0)

    selector.recent_selections[title] = 5
    assert selector.diversity_score(title, 6) == pytest.approx(0.1)
    assert selector.diversity_score(title, 7) == pytest.approx(0.5)
    assert selector.diversity_score(title, 8) == pytest.approx(1.0)
    assert selector.diversity_score(title, 50) == pytest.approx(1.0)
    assert selector.diversity_score(title, 8) > selector.diversity_score(title, 6)


@pytest.mark.unit
def test_selected_title_scores_low_next_round(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(3))
    for n in range(20):
        for item in selector.select_tags(ten_tags, 3, n):
            assert selector.diversity_score(item.title, n + 1) == pytest.approx(0.1)
            assert selector.diversity_score(item.title, n + 3) > 0.1


@pytest.mark.unit
def test_base_weight_scales_score():
    selector = TagDiversitySelector(["x"], weights={"heavy": 3.0}, rng=random.Random(0))
    assert selector.base_weights == {"x": 1.0, "heavy": 3.0}
    assert selector.diversity_score("heavy", 0) == pytest.approx(6.0)
    assert selector.diversity_score("not-in-catalog", 0) == pytest.approx(2.0)
    assert "not-in-catalog" not in selector.base_weights


@pytest.mark.unit
def test_non_positive_weight_rejected():
    with pytest.raises(ValueError):
        TagDiversitySelector(weights={"x": 0})


@pytest.mark.unit
def test_empty_candidates():
    assert TagDiversitySelector().select_tags([], 3, 0) == []


@pytest.mark.unit
@pytest.mark.parametrize("count", [0, -2])
def test_non_positive_count(ten_tags, count):
    selector = TagDiversitySelector()
    assert selector.select_tags(ten_tags, count, 0) == []
    assert selector.recent_selections == {}


@pytest.mark.unit
def test_count_larger_than_pool_returns_everything(ten_tags):
    five = ten_tags[:5]
    picked = TagDiversitySelector(rng=random.Random(9)).select_tags(five, 100, 0)
    assert len(picked) == 5
    assert {p.title for p in picked} == {t.title for t in five}


@pytest.mark.unit
def test_selection_records_round(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(1))
    picked = selector.select_tags(ten_tags, 3, 4)
    assert len(picked) == 3
    assert len({p.title for p in picked}) == 3
    assert selector.recent_selections == {p.title: 4 for p in picked}


@pytest.mark.unit
def test_pool_limited_to_best_scored(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(2))
    # six of ten titles were shown last round, so the 2*count pool is the four fresh ones
    for item in ten_tags[:6]:
        selector.recent_selections[item.title] = 0
    picked = selector.select_tags(ten_tags, 2, 1)
    fresh = {t.title for t in ten_tags[6:]}
    assert len(picked) == 2
    assert {p.title for p in picked} <= fresh


@pytest.mark.unit
def test_same_seed_same_sequence(ten_tags):
    a = TagDiversitySelector(rng=random.Random(42))
    b = TagDiversitySelector(rng=random.Random(42))
    for n in range(10):
        assert a.select_tags(ten_tags, 3, n) == b.select_tags(ten_tags, 3, n)


@pytest.mark.unit
def test_repeat_rate_at_distance_one(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(2024))
    rounds = 1000
    previous = set()
    repeats = {t.title: 0 for t in ten_tags}
    for n in range(rounds):
        current = {p.title for p in selector.select_tags(ten_tags, 3, n)}
        assert len(current) == 3
        for title in current & previous:
            repeats[title] += 1
        previous = current
    assert max(repeats.values()) / rounds <= 0.15


@pytest.mark.unit
def test_reset_matches_fresh_selector(ten_tags):
    used = TagDiversitySelector(weights={"tag-1": 2.5}, rng=random.Random(5))
    for n in range(5):
        used.select_tags(ten_tags, 3, n)
    used.base_weights["tag-2"] = 9.0
    used.reset()

    fresh = TagDiversitySelector(weights={"tag-1": 2.5}, rng=random.Random(5))
    assert used.recent_selections == {}
    assert used.base_weights == fresh.base_weights
    for t in ten_tags:
        assert used.diversity_score(t.title, 0) == fresh.diversity_score(t.title, 0)


@pytest.mark.unit
def test_default_catalog_seeded():
    selector = TagDiversitySelector()
    assert set(selector.base_weights) == set(DEFAULT_TAG_CATALOG)
    assert all(w == 1.0 for w in selector.base_weights.values())


@pytest.mark.unit
def test_labeled_item_is_frozen_with_payload():
    item = LabeledItem(title="Time management", severity="moderate")
    assert item.severity == "moderate"
    with pytest.raises(Exception):
        item.title = "other"


@pytest.mark.unit
def test_instances_do_not_share_state(ten_tags):
    a = TagDiversitySelector(rng=random.Random(1))
    b = TagDiversitySelector(rng=random.Random(1))
    a.select_tags(ten_tags, 3, 0)
    assert b.recent_selections == {}


@pytest.mark.unit
def test_concurrent_calls_on_one_instance(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(8))
    results = []

    def worker(offset):
        for n in range(50):
            results.append(selector.select_tags(ten_tags, 3, offset + n))

    threads = [threading.Thread(target=worker, args=(k * 100,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 200
    assert all(len(r) == 3 and len({p.title for p in r}) == 3 for r in results)


@pytest.mark.unit
def test_unrecorded_selection_then_explicit_record(ten_tags):
    selector = TagDiversitySelector(rng=random.Random(4))
    picked = selector.select_tags(ten_tags, 3, 2, record=False)
    assert len(picked) == 3
    assert selector.recent_selections == {}

    selector.record_selection(picked[:2], 2)
    assert selector.recent_selections == {p.title: 2 for p in picked[:2]}
