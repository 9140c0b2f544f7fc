"""Paginated collection of a profile's review history."""

import logging
from typing import List

from ..core.cancellation import CancellationToken
from ..core.config import Settings, settings as default_settings
from ..core.constants import LogConstants, SteamConstants
from ..core.exceptions import AnalysisCancelled, TransportError
from ..core.extractor import extract_reviews
from ..core.models import Review

logger = logging.getLogger(__name__)


class ProfileReviewFetcher:
    """Walks the pages of one profile's review history."""
    
    def __init__(self, transport, token: CancellationToken = None, config: Settings = None):
        self.transport = transport
        self.token = token or CancellationToken()
        self.config = config or default_settings
    
    @staticmethod
    def page_url(base_url: str, page: int) -> str:
        if page == 1:
            return base_url
        sep = "&" if "?" in base_url else "?"
        return f"{base_url}{sep}{SteamConstants.PAGE_PARAM}={page}"
    
    def fetch_reviews(self, base_url: str, label: str = "Profile") -> List[Review]:
        """Collect reviews page by page until the history runs out.
        
        Stops on an empty page, on a page shorter than
        ``last_page_threshold``, after ``max_pages`` pages, or on cancel.
        A failed first page raises TransportError; a failure on a later
        page ends pagination and keeps what was already gathered.
        Reviews are not de-duplicated across pages.
        """
        reviews: List[Review] = []
        page = 0
        
        while page < self.config.max_pages:
            if self.token.cancelled:
                logger.info(f"  Stopping {label} at page {page + 1}: cancelled")
                break
            page += 1
            url = self.page_url(base_url, page)
            logger.info(f"  Fetching page {page} from {label}...")
            
            try:
                html = self.transport.fetch(url)
            except AnalysisCancelled:
                logger.info(f"  Stopping {label} at page {page}: cancelled")
                break
            except TransportError as e:
                logger.error(f"  ERROR on page {page}: {e}")
                if page == 1:
                    raise
                break
            
            extraction = extract_reviews(html, self.config.lookback_window)
            if extraction.skipped:
                logger.warning(f"  Skipped {extraction.skipped} entries (no app ID found)")
            if extraction.failed:
                logger.warning(f"  {extraction.failed} entries could not be parsed")
            
            found = len(extraction.reviews)
            logger.info(f"    Found {found} reviews on page {page}", extra=LogConstants.SUCCESS)
            
            if found == 0:
                break
            reviews.extend(extraction.reviews)
            if found < self.config.last_page_threshold:
                break
            if page < self.config.max_pages:
                self.token.sleep(self.config.page_delay)
        
        logger.info(f"  TOTAL for {label}: {len(reviews)} reviews from {page} page(s)",
                    extra=LogConstants.SUCCESS)
        return reviews
