"""Discovery of reviewers through the public app review feed."""

import json
import logging
from typing import Callable, List, Optional

from ..core.cancellation import CancellationToken
from ..core.config import Settings, settings as default_settings
from ..core.constants import LogConstants, SteamConstants
from ..core.identity import profile_reviews_url
from ..core.models import ReviewerIdentity

logger = logging.getLogger(__name__)


class ReviewerDiscovery:
    """Builds the candidate reviewer list for a game, one feed batch at a time."""
    
    def __init__(self, transport, token: CancellationToken = None, config: Settings = None):
        self.transport = transport
        self.token = token or CancellationToken()
        self.config = config or default_settings
    
    def feed_url(self, app_id: str) -> str:
        return self.config.steam_store_url.rstrip("/") + SteamConstants.REVIEW_FEED_PATH + str(app_id)
    
    def feed_params(self, cursor: str) -> dict:
        return {
            "json": 1,
            "filter": "all",
            "language": "all",
            "day_range": SteamConstants.UNRESTRICTED_DAY_RANGE,
            "cursor": cursor,
            "review_type": "all",
            "purchase_type": "all",
            "num_per_page": self.config.feed_page_size,
        }
    
    def _parse_batch(self, body: str) -> Optional[dict]:
        try:
            data = json.loads(body)
        except (TypeError, ValueError) as e:
            logger.warning(f"Review feed returned a malformed body, stopping: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning("Review feed returned an unexpected payload, stopping")
            return None
        return data
    
    def _to_identity(self, entry) -> Optional[ReviewerIdentity]:
        try:
            steam_id = str(entry["author"]["steamid"] or "")
        except (KeyError, TypeError):
            return None
        if not steam_id.isdigit():
            return None
        return ReviewerIdentity(
            id=steam_id,
            profile_ref=profile_reviews_url(steam_id, self.config.steam_community_url),
            initial_verdict=bool(entry.get("voted_up", False)),
        )
    
    def discover(self, app_id: str, max_profiles: int,
                 on_progress: Callable[[int, int], None] = None) -> List[ReviewerIdentity]:
        """Return up to ``max_profiles`` reviewers of ``app_id`` in feed order.
        
        TransportError propagates to the caller; malformed bodies end the
        walk quietly.
        """
        reviewers: List[ReviewerIdentity] = []
        cursor = SteamConstants.INITIAL_CURSOR
        page_size = self.config.feed_page_size
        request_count = 0
        
        logger.info("Fetching reviewers from Steam API...")
        
        while len(reviewers) < max_profiles:
            if self.token.cancelled:
                logger.info("Reviewer discovery cancelled")
                break
            request_count += 1
            logger.info(f"API request #{request_count}: Fetching up to {page_size} reviews")
            
            body = self.transport.fetch(self.feed_url(app_id), params=self.feed_params(cursor))
            data = self._parse_batch(body)
            if data is None:
                break
            if not data.get("success"):
                logger.warning("API returned success=false, stopping")
                break
            batch = data.get("reviews") or []
            if not isinstance(batch, list) or not batch:
                logger.info("No more reviews available")
                break
            
            logger.info(f"Received {len(batch)} reviews from API", extra=LogConstants.SUCCESS)
            dropped = 0
            for entry in batch:
                identity = self._to_identity(entry)
                if identity is None:
                    dropped += 1
                    continue
                reviewers.append(identity)
            if dropped:
                logger.warning(f"Ignored {dropped} feed entries without an author id")
            
            if on_progress:
                on_progress(len(reviewers), max_profiles)
            logger.info(f"Total reviewers collected: {len(reviewers)}/{max_profiles}")
            
            next_cursor = data.get("cursor")
            if not next_cursor:
                logger.info("Stopping: no more pages")
                break
            if len(reviewers) >= max_profiles:
                logger.info("Stopping: reached limit")
                break
            if len(batch) < page_size:
                logger.info("Stopping: last page")
                break
            
            cursor = next_cursor
            self.token.sleep(self.config.discovery_delay)
        
        trimmed = reviewers[:max_profiles]
        recommended = sum(1 for r in trimmed if r.initial_verdict)
        logger.info(f"Collected {len(trimmed)} reviewer profiles ({recommended} recommend the game)",
                    extra=LogConstants.SUCCESS)
        return trimmed
