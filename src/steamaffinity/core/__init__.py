"""Core modules for SteamAffinity."""

from .models import *
from .config import settings
from .exceptions import *
from .extractor import extract_reviews
from .scoring import *

__all__ = [
    "settings",
    "extract_reviews",
    "calculate_score",
    "Review",
    "ReviewerIdentity",
    "ReviewerRecord",
    "AnalysisParameters",
    "AnalysisResult",
    "SteamAffinityError",
    "InvalidParametersError",
    "TransportError",
    "AnalysisCancelled",
]
