# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: test_similarity_ranker.py
# -----------------------------------------------------------------------------
import math
import random

import pytest

from observation.Observation import Observation
from vectorstore.SimilarityRanker import CosineSimilarityRanker, SimilarityRanker, cosine_similarity


def _obs(text, vec):
    return Observation(text=text, embedding=list(vec))


def test_cosine_similarity_is_symmetric():
    rng = random.Random(7)
    for _ in range(50):
        a = [rng.uniform(-1, 1) for _ in range(16)]
        b = [rng.uniform(-1, 1) for _ in range(16)]
        assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_cosine_similarity_self_and_negation():
    v = [0.3, -1.2, 4.0, 0.01]
    assert cosine_similarity(v, v) == pytest.approx(1.0)
    assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)


def test_cosine_similarity_zero_vector_is_zero_not_nan():
    zero = [0.0, 0.0, 0.0]
    score = cosine_similarity(zero, [1.0, 2.0, 3.0])
    assert score == 0.0
    assert not math.isnan(cosine_similarity(zero, zero))


def test_cosine_similarity_rejects_dimension_mismatch():
    with pytest.raises(ValueError):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_rank_returns_min_k_n_sorted_descending():
    ranker = CosineSimilarityRanker()
    candidates = [
        _obs("a", [1.0, 0.0]),
        _obs("b", [0.0, 1.0]),
        _obs("c", [1.0, 1.0]),
        _obs("d", [-1.0, 0.0]),
    ]

    top2 = ranker.rank([1.0, 0.1], candidates, k=2)
    assert [o.text for o, _ in top2] == ["a", "c"]

    everything = ranker.rank([1.0, 0.1], candidates, k=10)
    assert len(everything) == 4
    scores = [s for _, s in everything]
    assert scores == sorted(scores, reverse=True)
    assert everything[-1][0].text == "d"


def test_rank_ties_keep_original_order_and_is_deterministic():
    ranker = CosineSimilarityRanker()
    candidates = [_obs(f"t{i}", [2.0, 2.0]) for i in range(5)] + [_obs("zero", [0.0, 0.0])]

    first = ranker.rank([1.0, 1.0], candidates, k=6)
    second = ranker.rank([1.0, 1.0], candidates, k=6)

    assert [o.text for o, _ in first] == ["t0", "t1", "t2", "t3", "t4", "zero"]
    assert [(o.text, s) for o, s in first] == [(o.text, s) for o, s in second]
    assert first[-1][1] == 0.0


def test_rank_edge_cases():
    ranker = CosineSimilarityRanker()
    assert ranker.rank([1.0], [], k=5) == []
    assert ranker.rank([1.0], [_obs("a", [1.0])], k=0) == []
    with pytest.raises(ValueError):
        ranker.rank([1.0, 0.0], [_obs("a", [1.0, 0.0, 0.0])], k=1)


def test_rank_zero_query_scores_everything_zero():
    ranker = CosineSimilarityRanker()
    out = ranker.rank([0.0, 0.0], [_obs("a", [1.0, 0.0]), _obs("b", [0.0, 1.0])], k=2)
    assert [s for _, s in out] == [0.0, 0.0]
    assert [o.text for o, _ in out] == ["a", "b"]


def test_rank_scores_match_pairwise_cosine():
    ranker = CosineSimilarityRanker()
    rng = random.Random(3)
    candidates = [_obs(str(i), [rng.uniform(-1, 1) for _ in range(8)]) for i in range(20)]
    query = [rng.uniform(-1, 1) for _ in range(8)]

    for obs, score in ranker.rank(query, candidates, k=20):
        assert score == pytest.approx(cosine_similarity(query, obs.embedding))


def test_cosine_ranker_satisfies_protocol():
    assert isinstance(CosineSimilarityRanker(), SimilarityRanker)
