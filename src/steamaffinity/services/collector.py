"""Sequential, rate-limited collection of reviewer histories."""

import logging
from typing import Callable, List, Optional

from ..core.cancellation import CancellationToken
from ..core.config import Settings, settings as default_settings
from ..core.constants import LogConstants
from ..core.exceptions import AnalysisCancelled
from ..core.identity import profile_reviews_url, vanity_reviews_url
from ..core.models import (
    CollectionOutcome,
    CollectionStats,
    Review,
    ReviewerIdentity,
    ReviewerRecord,
)
from ..core.scoring import round_half_up
from .profile_client import ProfileReviewFetcher

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, int], None]


class BulkProfileCollector:
    """Runs the profile fetcher over every discovered reviewer, in order.
    
    Reviewers are processed one at a time. After every ``cooldown_every``
    reviewers the collector pauses for ``batch_cooldown`` seconds. A
    reviewer whose history cannot be read is left out of the result; no
    single reviewer can abort the run.
    """
    
    def __init__(self, fetcher: ProfileReviewFetcher, token: CancellationToken = None,
                 config: Settings = None):
        self.fetcher = fetcher
        self.token = token or fetcher.token
        self.config = config or fetcher.config or default_settings
    
    def candidate_urls(self, reviewer: ReviewerIdentity) -> List[str]:
        base = self.config.steam_community_url
        return [profile_reviews_url(reviewer.id, base), vanity_reviews_url(reviewer.id, base)]
    
    def _fetch_reviewer(self, reviewer: ReviewerIdentity) -> Optional[List[Review]]:
        """Try each location form in turn; None means every attempt raised."""
        last_error = None
        any_succeeded = False
        for url in self.candidate_urls(reviewer):
            if self.token.cancelled:
                break
            try:
                reviews = self.fetcher.fetch_reviews(url, reviewer.id)
            except AnalysisCancelled:
                break
            except Exception as e:
                last_error = e
                logger.debug(f"Location {url} failed for {reviewer.id}: {e}")
                continue
            any_succeeded = True
            if reviews:
                return reviews
        if not any_succeeded and last_error is not None:
            raise last_error
        return []
    
    def collect(self, reviewers: List[ReviewerIdentity],
                on_progress: ProgressCallback = None) -> CollectionOutcome:
        stats = CollectionStats(total=len(reviewers))
        records: List[ReviewerRecord] = []
        total = len(reviewers)
        
        logger.info(f"Starting to fetch review data from {total} profiles")
        
        for reviewer in reviewers:
            if self.token.cancelled:
                stats.cancelled = True
                logger.warning(f"Collection cancelled after {stats.processed}/{total} profiles")
                break
            
            stats.processed += 1
            percent = round_half_up(stats.processed / total * 100)
            logger.info(f"[{stats.processed}/{total}] ({percent}%) Fetching reviews for steamid {reviewer.id}...")
            
            try:
                reviews = self._fetch_reviewer(reviewer)
            except Exception as e:
                stats.errored += 1
                logger.error(f"  Error fetching reviews for {reviewer.id}: {e}")
            else:
                if reviews:
                    stats.succeeded += 1
                    records.append(ReviewerRecord(id=reviewer.id, reviews=reviews))
                    logger.info(f"  Found {len(reviews)} reviews from this profile", extra=LogConstants.SUCCESS)
                else:
                    stats.empty += 1
                    logger.warning("  Profile appears to be private or has no reviews (skipping)")
            
            if on_progress:
                on_progress(stats.processed, total, percent)
            
            if (self.config.cooldown_every > 0 and stats.processed % self.config.cooldown_every == 0
                    and stats.processed < total):
                logger.info(f"Rate limiting: Pausing for {self.config.batch_cooldown:g}s...")
                self.token.sleep(self.config.batch_cooldown)
        
        logger.info("Profile scanning complete!", extra=LogConstants.SUCCESS)
        logger.info(f"  Successfully scanned: {stats.succeeded}", extra=LogConstants.SUCCESS)
        logger.warning(f"  Private/empty profiles: {stats.empty}")
        if stats.errored:
            logger.warning(f"  Errors: {stats.errored}")
        else:
            logger.info("  Errors: 0")
        
        return CollectionOutcome(records=records, stats=stats)
