"""Data models for SteamAffinity."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import settings
from .exceptions import InvalidParametersError
from .identity import parse_app_id, parse_steam_id


@dataclass(frozen=True)
class Review:
    """A single thumbs-up/down verdict on a game."""
    game_id: str
    is_positive: bool


# Reviews of one identity, in collection order
ReviewSet = List[Review]


@dataclass(frozen=True)
class ReviewerIdentity:
    """A reviewer found in the target game's review feed."""
    id: str
    profile_ref: str
    initial_verdict: bool  # vote on the target game as reported by the feed


@dataclass
class ReviewerRecord:
    """A reviewer together with their scraped review history."""
    id: str
    reviews: ReviewSet


@dataclass
class PageExtraction:
    """Reviews parsed from one page plus counters for what was dropped."""
    reviews: ReviewSet = field(default_factory=list)
    skipped: int = 0  # markers with no game link inside the lookback window
    failed: int = 0  # markers that raised while being resolved
    duplicates: int = 0


@dataclass
class CollectionStats:
    """Running counters kept by the bulk collector."""
    total: int = 0
    processed: int = 0
    succeeded: int = 0
    empty: int = 0
    errored: int = 0
    cancelled: bool = False


@dataclass
class CollectionOutcome:
    records: List[ReviewerRecord]
    stats: CollectionStats


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate affinity metrics for one run."""
    score_pct: int
    total_reviewers_scanned: int
    matching_reviewers: int
    positive_count: int
    avg_overlap: float
    min_overlap: int
    min_similarity_pct: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AnalysisPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class LogEntry:
    """One line of the observable activity log."""
    timestamp: str
    text: str
    severity: str  # info, success, warning, error


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Point-in-time copy of the orchestrator state handed to observers."""
    phase: AnalysisPhase
    progress_text: str
    progress_percent: Optional[int]
    logs: List[LogEntry]
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def running(self) -> bool:
        return self.phase is AnalysisPhase.RUNNING


class AnalysisParameters(BaseModel):
    """Fully resolved inputs of one analysis run."""
    
    model_config = ConfigDict(frozen=True)
    
    target_game_id: str = Field(..., description="Numeric Steam app id (or a store URL containing one)")
    subject_identity: str = Field(..., description="steamID64, custom URL name, or profile URL")
    min_overlap: int = Field(default_factory=lambda: settings.default_min_overlap, ge=0)
    min_similarity_pct: int = Field(default_factory=lambda: settings.default_min_similarity, ge=0, le=100)
    max_profiles: int = Field(default_factory=lambda: settings.default_max_profiles, gt=0)
    
    @field_validator("target_game_id", mode="before")
    @classmethod
    def _resolve_target(cls, value):
        app_id = parse_app_id(value)
        if not app_id:
            raise ValueError("could not find a game id; open a Steam store game page or pass the app id")
        return app_id
    
    @field_validator("subject_identity", mode="before")
    @classmethod
    def _resolve_subject(cls, value):
        steam_id = parse_steam_id(value)
        if not steam_id:
            raise ValueError(
                "invalid Steam ID format; enter either your steamID64 (numbers) or custom URL username"
            )
        return steam_id
    
    @classmethod
    def build(cls, **values) -> "AnalysisParameters":
        """Validate raw input, raising InvalidParametersError on any problem."""
        values = {k: v for k, v in values.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidParametersError(problems) from e
