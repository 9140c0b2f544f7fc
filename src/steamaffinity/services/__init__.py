"""Services for SteamAffinity."""

from .transport import SteamTransport
from .profile_client import ProfileReviewFetcher
from .review_feed import ReviewerDiscovery
from .collector import BulkProfileCollector
from .orchestrator import AnalysisOrchestrator

__all__ = [
    "SteamTransport",
    "ProfileReviewFetcher",
    "ReviewerDiscovery",
    "BulkProfileCollector",
    "AnalysisOrchestrator",
]
