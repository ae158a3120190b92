"""
Fuzzy relevance filtering of scraped product names against the user's query.

Scores are distances in [0, 1] where 0 is a perfect match. A candidate is
kept when its score is under the threshold and the aligned span covers
enough of the query to rule out accidental two-letter hits.
"""

import logging
import math
from dataclasses import dataclass

from rapidfuzz import fuzz

from pharmaprice.config import settings
from pharmaprice.utils.extraction import RawCandidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchScore:
    score: float  # 0.0 = perfect
    span: int  # characters of the candidate covered by the match


def min_match_length(query: str) -> int:
    """Shortest matched span accepted for this query."""
    return max(settings.min_match_length, math.floor(len(query) * settings.min_match_ratio))


def score_candidate(query: str, text: str) -> MatchScore:
    """Distance between query and candidate name, plus the aligned span length."""
    q = query.casefold().strip()
    t = text.casefold()
    if not q or not t:
        return MatchScore(score=1.0, span=0)

    # Users often type an exact fragment of the product name
    if q in t:
        return MatchScore(score=0.0, span=len(q))

    alignment = fuzz.partial_ratio_alignment(q, t)
    if alignment is None:
        return MatchScore(score=1.0, span=0)
    return MatchScore(
        score=round(1.0 - alignment.score / 100.0, 4),
        span=alignment.dest_end - alignment.dest_start,
    )


def match_candidates(
    candidates: list[RawCandidate],
    query: str,
    limit: int | None = None,
) -> list[RawCandidate]:
    """
    Keep candidates relevant to query, best first, capped at limit.

    Ties keep page order.
    """
    limit = settings.max_results_per_source if limit is None else limit
    query = query.strip()
    if not query or limit <= 0:
        return []

    min_span = min_match_length(query)
    accepted: list[tuple[float, int, RawCandidate]] = []
    for position, candidate in enumerate(candidates):
        result = score_candidate(query, candidate.text)
        if result.score < settings.match_threshold and result.span >= min_span:
            accepted.append((result.score, position, candidate))
        else:
            logger.debug(f"Rejected {candidate.text!r} for {query!r} (score={result.score}, span={result.span})")

    accepted.sort(key=lambda item: (item[0], item[1]))
    return [candidate for _, _, candidate in accepted[:limit]]
