"""Affinity scoring between a subject and a sample of reviewers."""

import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from .models import AnalysisResult, Review, ReviewerRecord

logger = logging.getLogger(__name__)


def build_verdict_map(reviews: Iterable[Review]) -> Dict[str, bool]:
    """Map game id to verdict; later duplicates overwrite earlier ones."""
    lookup = {}
    for review in reviews:
        lookup[review.game_id] = review.is_positive
    return lookup


def compare_reviews(subject_map: Dict[str, bool], reviews: Iterable[Review]) -> Tuple[int, int]:
    """Return ``(overlap, agreement)`` of a reviewer against the subject."""
    overlap = 0
    agreement = 0
    for review in reviews:
        if review.game_id in subject_map:
            overlap += 1
            if subject_map[review.game_id] == review.is_positive:
                agreement += 1
    return overlap, agreement


def similarity_pct(agreement: int, overlap: int) -> float:
    """Agreement as a percentage of overlap; 0 when nothing overlaps."""
    if overlap <= 0:
        return 0.0
    return agreement / overlap * 100


def target_verdict(reviews: Iterable[Review], target_game_id: str) -> Optional[bool]:
    """First verdict the reviewer gave on the target game, if any."""
    for review in reviews:
        if review.game_id == target_game_id:
            return review.is_positive
    return None


def is_matching(overlap: int, agreement: int, min_overlap: int, min_similarity: float) -> bool:
    if overlap < min_overlap:
        return False
    return similarity_pct(agreement, overlap) >= min_similarity


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def calculate_score(
    subject_reviews: List[Review],
    reviewers: List[ReviewerRecord],
    target_game_id: str,
    min_overlap: int,
    min_similarity: int,
) -> AnalysisResult:
    """Share of taste-matching reviewers who recommend the target game.

    A reviewer matches when they reviewed at least ``min_overlap`` of the
    subject's games and agreed on at least ``min_similarity`` percent of
    them. Matching reviewers with no verdict on the target game count
    towards ``matching_reviewers`` but not ``positive_count``.
    """
    target_game_id = str(target_game_id)
    subject_map = build_verdict_map(subject_reviews)
    
    matching = 0
    positive = 0
    total_overlap = 0
    
    for reviewer in reviewers:
        overlap, agreement = compare_reviews(subject_map, reviewer.reviews)
        if not is_matching(overlap, agreement, min_overlap, min_similarity):
            continue
        matching += 1
        total_overlap += overlap
        if target_verdict(reviewer.reviews, target_game_id):
            positive += 1
    
    score = round_half_up(positive / matching * 100) if matching > 0 else 0
    avg_overlap = total_overlap / matching if matching > 0 else 0
    
    logger.debug(f"Scored {len(reviewers)} reviewers: {matching} matching, {positive} positive")
    
    return AnalysisResult(
        score_pct=score,
        total_reviewers_scanned=len(reviewers),
        matching_reviewers=matching,
        positive_count=positive,
        avg_overlap=avg_overlap,
        min_overlap=min_overlap,
        min_similarity_pct=min_similarity,
    )
