"""
Similarity Matcher
app/scoring/similarity.py

Compares researchers by their per-category activity counts.

For each category where at least one side is nonzero:
    s = (max(a, b) - |a - b|) / max(a, b)
A category is included when s > 0.5. The similarity percentage is the mean
of the included s values, rounded half-up; 0 when nothing is included.
Categories where both sides are zero carry no signal.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Mapping, Optional, Sequence, Tuple

from app.models.enumerations import ActivityCategory
from app.models.scoring import SimilarityResult
from app.scoring.utils import mean_percent

INCLUSION_THRESHOLD = Decimal("0.5")

ActivityVector = Mapping[ActivityCategory, int]


def category_similarity(a: int, b: int) -> Optional[Decimal]:
    """Per-category closeness in [0, 1]; None when both counts are zero."""
    high = max(a, b)
    if high <= 0:
        return None
    return Decimal(high - abs(a - b)) / Decimal(high)


def similarity(a: ActivityVector, b: ActivityVector) -> int:
    """Similarity percentage (0..100) between two activity vectors."""
    included: List[Decimal] = []
    for category in ActivityCategory:
        s = category_similarity(a.get(category, 0), b.get(category, 0))
        if s is not None and s > INCLUSION_THRESHOLD:
            included.append(s)
    return mean_percent(included)


def find_similar(
    target_id: int,
    target_vector: ActivityVector,
    population: Sequence[Tuple[int, ActivityVector]],
    min_similarity_percent: int = 30,
    top_k: int = 5,
) -> List[SimilarityResult]:
    """
    Peers most similar to the target.

    Args:
        target_id: Excluded from the results
        target_vector: The target's category counts
        population: (peer_id, vector) pairs, in population order
        min_similarity_percent: Peers must score strictly above this
        top_k: Maximum number of results

    Returns:
        Results sorted by similarity descending; ties keep population order.
    """
    scored: List[SimilarityResult] = []
    for peer_id, vector in population:
        if peer_id == target_id:
            continue
        percent = similarity(target_vector, vector)
        if percent > min_similarity_percent:
            scored.append(SimilarityResult(peer_id=peer_id, similarity_percent=percent))
    scored.sort(key=lambda result: -result.similarity_percent)
    return scored[:max(top_k, 0)]

