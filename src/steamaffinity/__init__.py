"""SteamAffinity - personalized game scores from reviewers who share your taste."""

__version__ = "1.0.0"
__author__ = "SteamAffinity Team"

from .core.models import *
from .core.config import settings
from .core.scoring import calculate_score
from .services.orchestrator import AnalysisOrchestrator

__all__ = [
    "settings",
    "calculate_score",
    "AnalysisOrchestrator",
    "AnalysisParameters",
    "AnalysisResult",
    "AnalysisSnapshot",
    "AnalysisPhase",
    "Review",
    "ReviewerIdentity",
    "ReviewerRecord",
]
