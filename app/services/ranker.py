# =============================================================================
# Relevance Ranker — Cosine Similarity with Category Boost
# =============================================================================
#
# Picks which template letters go into the prompt. The corpus is small
# (~40 documents), so every candidate is scored in Python:
#
#   score = cosine(query, template)
#   score *= category_boost   if the template's NAME matches a keyword
#                             of the seller's appeal category
#
# Template names carry the appeal category by convention
# ("POA I - ... - Inauthentic ed", "Escalation I - ... - KDP ed"), so a name
# match is a strong signal the letter is the right kind of exemplar even
# when its wording is far from the seller's case.
#
# Sorting is stable: equal scores keep corpus order.
# =============================================================================

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple

from app.config import settings

logger = logging.getLogger(__name__)


class TemplateEntry(NamedTuple):
    """A ranking candidate: template text, its embedding, and its name."""

    text: str
    embedding: list[float]
    name: str


@dataclass
class RankedDocument:
    """One scored candidate, in ranking order."""

    name: str
    text: str
    similarity: float  # raw cosine similarity
    score: float  # similarity after the category boost
    boosted: bool


# ---------------------------------------------------------------------------
# Category Keywords
# ---------------------------------------------------------------------------
# Matched case-insensitively as whole words/phrases against the document
# name (file base name without extension). "other" and unknown categories
# have no keywords and never boost.
# ---------------------------------------------------------------------------

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "inauthenticity-supply-chain": ("inauthentic", "inauthenticity", "supply chain"),
    "intellectual-property": ("IP", "copyright", "trademark", "infringement", "design"),
    "seller-code-conduct": ("review manipulation", "code of conduct"),
    "related-account": ("related account", "multiple accounts"),
    "drop-shipping": ("dropshipping", "drop-shipping", "drop shipping"),
    "restricted-products": ("restricted", "disease claims", "supplements"),
    "used-sold-as-new": ("used sold as new", "ODR", "unsuitable inventory"),
    "high-cancellation": ("cancelled shipments", "cancellation", "sales velocity"),
    "marketplace-pricing": ("fair pricing", "pricing"),
    "verification-failure": ("verification",),
    "account-compromised": ("hacked", "compromised"),
    "deceptive-activity": ("deceptive", "fraud", "funds"),
    "detail-page-abuse": ("detail page abuse", "detail page"),
    "category-approval": ("category", "approval", "CPC"),
    "kdp-acx-merch": ("KDP", "ACX", "Merc", "Merch"),
    "fba-shipping": ("FBA",),
    "amazon-relay": ("relay",),
    "brand-registry": ("brand registry", "BR"),
    "safety-suspension": ("safety",),
    "variation-abuse": ("variation",),
    "merch-termination": ("Merch", "Merc", "MBA"),
}


def keywords_for(appeal_type: str) -> tuple[str, ...]:
    return CATEGORY_KEYWORDS.get(appeal_type, ())


@lru_cache(maxsize=64)
def _keyword_pattern(appeal_type: str) -> re.Pattern | None:
    keywords = keywords_for(appeal_type)
    if not keywords:
        return None
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


def matches_category(name: str, appeal_type: str) -> bool:
    """True if the document name contains one of the category's keywords."""
    pattern = _keyword_pattern(appeal_type)
    return bool(pattern and pattern.search(name))


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|).

    Raises:
        ValueError: If the vectors differ in length.

    A zero-norm vector has no direction; its similarity to anything is 0.0.
    """
    if len(a) != len(b):
        raise ValueError(
            f"Vectors must have the same length (got {len(a)} and {len(b)})"
        )

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def score_documents(
    query_vector: Sequence[float],
    candidates: Sequence[TemplateEntry | tuple[str, Sequence[float], str]],
    appeal_type: str,
    boost: float | None = None,
) -> list[RankedDocument]:
    """Score every candidate and return them all, best first."""
    _boost = settings.category_boost if boost is None else boost

    ranked: list[RankedDocument] = []
    for text, vector, name in candidates:
        similarity = cosine_similarity(query_vector, vector)
        boosted = matches_category(name, appeal_type)
        ranked.append(RankedDocument(
            name=name,
            text=text,
            similarity=similarity,
            score=similarity * _boost if boosted else similarity,
            boosted=boosted,
        ))

    # list.sort is stable, so ties keep corpus order
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked


def rank_documents(
    query_vector: Sequence[float],
    candidates: Sequence[TemplateEntry | tuple[str, Sequence[float], str]],
    appeal_type: str,
    top_k: int | None = None,
) -> list[str]:
    """Texts of the top_k best-scoring candidates (default retrieval_top_k)."""
    _top_k = settings.retrieval_top_k if top_k is None else top_k

    ranked = score_documents(query_vector, candidates, appeal_type)

    logger.info(
        "Ranked %d templates for '%s' (%d boosted)",
        len(ranked), appeal_type, sum(1 for r in ranked if r.boosted),
    )
    for position, doc in enumerate(ranked[:min(10, _top_k)], start=1):
        logger.info(
            "  %d. score=%.4f similarity=%.4f%s %s",
            position, doc.score, doc.similarity,
            " [boost]" if doc.boosted else "", doc.name,
        )

    return [doc.text for doc in ranked[:_top_k]]
