# =============================================================================
# Unit Tests — Relevance Ranker
# =============================================================================
#
# Pure functions only: cosine similarity, category keyword matching and the
# boosted ranking. No API keys, database or embeddings model needed.
# =============================================================================

from __future__ import annotations

import math

import pytest

from app.services.ranker import (
    TemplateEntry,
    cosine_similarity,
    matches_category,
    rank_documents,
    score_documents,
)

# ---------------------------------------------------------------------------
# Test: Cosine Similarity
# ---------------------------------------------------------------------------


class TestCosineSimilarity:
    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_scale_invariant(self):
        assert cosine_similarity([1.0, 2.0], [10.0, 20.0]) == pytest.approx(1.0)

    def test_known_angle(self):
        # 45 degrees
        assert cosine_similarity([1.0, 0.0], [1.0, 1.0]) == pytest.approx(1 / math.sqrt(2))

    def test_zero_vector_is_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="same length"):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])


# ---------------------------------------------------------------------------
# Test: Category Matching
# ---------------------------------------------------------------------------


class TestMatchesCategory:
    def test_kdp_keyword(self):
        assert matches_category("POA I - Petru Nedelku - KDP ed (1)", "kdp-acx-merch")

    def test_case_insensitive(self):
        assert matches_category("poa i - someone - inauthentic ed", "inauthenticity-supply-chain")

    def test_multi_word_keyword(self):
        assert matches_category("POA I - Adrian Vizireanu. Brand Registry ed", "brand-registry")

    def test_whole_word_only(self):
        # "BR" must not match inside "Brothers"
        assert not matches_category("FINAL Iron Brothers Supplements", "brand-registry")

    def test_short_keyword_as_word(self):
        assert matches_category("BR POA I (1)", "brand-registry")

    def test_no_match(self):
        assert not matches_category("Erica Sutton hacked POA", "kdp-acx-merch")

    def test_other_never_matches(self):
        assert not matches_category("Other POA", "other")

    def test_unknown_type_never_matches(self):
        assert not matches_category("POA I - KDP", "not-a-type")


# ---------------------------------------------------------------------------
# Test: Ranking
# ---------------------------------------------------------------------------


def _entries() -> list[TemplateEntry]:
    return [
        TemplateEntry(text="hacked letter", embedding=[1.0, 0.0], name="Erica Sutton hacked POA"),
        TemplateEntry(text="kdp letter", embedding=[0.8, 0.6], name="POA I - Petru Nedelku - KDP ed"),
        TemplateEntry(text="far letter", embedding=[0.0, 1.0], name="POA US"),
    ]


class TestScoreDocuments:
    def test_unboosted_order_is_by_similarity(self):
        ranked = score_documents([1.0, 0.0], _entries(), "other", boost=1.5)
        assert [r.text for r in ranked] == ["hacked letter", "kdp letter", "far letter"]
        assert not any(r.boosted for r in ranked)

    def test_boost_reorders(self):
        # kdp: 0.8 * 1.5 = 1.2 > hacked: 1.0
        ranked = score_documents([1.0, 0.0], _entries(), "kdp-acx-merch", boost=1.5)
        assert ranked[0].text == "kdp letter"
        assert ranked[0].boosted
        assert ranked[0].similarity == pytest.approx(0.8)
        assert ranked[0].score == pytest.approx(1.2)

    def test_default_boost_is_one_and_a_half(self):
        ranked = score_documents([1.0, 0.0], _entries(), "kdp-acx-merch")
        kdp = next(r for r in ranked if r.boosted)
        assert kdp.name == "POA I - Petru Nedelku - KDP ed"
        assert kdp.score == pytest.approx(kdp.similarity * 1.5)
        assert all(r.score == pytest.approx(r.similarity) for r in ranked if not r.boosted)

    def test_ties_keep_corpus_order(self):
        entries = [
            TemplateEntry(text="first", embedding=[1.0, 0.0], name="A"),
            TemplateEntry(text="second", embedding=[2.0, 0.0], name="B"),
        ]
        ranked = score_documents([1.0, 0.0], entries, "other")
        assert [r.text for r in ranked] == ["first", "second"]

    def test_accepts_plain_tuples(self):
        ranked = score_documents([1.0, 0.0], [("t", [1.0, 0.0], "n")], "other")
        assert ranked[0].name == "n"


class TestRankDocuments:
    def test_returns_texts_limited_to_top_k(self):
        result = rank_documents([1.0, 0.0], _entries(), "other", top_k=2)
        assert result == ["hacked letter", "kdp letter"]

    def test_top_k_larger_than_corpus(self):
        result = rank_documents([1.0, 0.0], _entries(), "other", top_k=20)
        assert len(result) == 3

    def test_default_top_k_is_twenty(self):
        entries = [
            TemplateEntry(text=f"letter {i}", embedding=[1.0, i / 25], name=f"POA {i}")
            for i in range(25)
        ]
        result = rank_documents([1.0, 0.0], entries, "other")
        assert len(result) == 20
        assert result[0] == "letter 0"

    def test_empty_corpus(self):
        assert rank_documents([1.0, 0.0], [], "other", top_k=5) == []

    def test_dimension_mismatch_propagates(self):
        with pytest.raises(ValueError):
            rank_documents([1.0, 0.0, 0.0], _entries(), "other")
