"""Analysis orchestration: sequencing, cancellation and observable state."""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.cancellation import CancellationToken
from ..core.config import Settings, settings as default_settings
from ..core.constants import LogConstants, NotificationConstants
from ..core.exceptions import (
    AnalysisCancelled,
    NoReviewersError,
    NoSubjectReviewsError,
    SteamAffinityError,
)
from ..core.identity import subject_reviews_url
from ..core.models import (
    AnalysisParameters,
    AnalysisPhase,
    AnalysisResult,
    AnalysisSnapshot,
    LogEntry,
)
from ..core.scoring import calculate_score
from .collector import BulkProfileCollector
from .notifier import LogNotifier, send_notification
from .profile_client import ProfileReviewFetcher
from .review_feed import ReviewerDiscovery
from .transport import SteamTransport

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]


class ActivityLogHandler(logging.Handler):
    """Copies package log records from the worker thread into the activity log."""
    
    def __init__(self, orchestrator: "AnalysisOrchestrator", thread_id: int):
        super().__init__(level=logging.INFO)
        self._orchestrator = orchestrator
        self._thread_id = thread_id
    
    def emit(self, record: logging.LogRecord) -> None:
        if record.thread != self._thread_id:
            return
        try:
            severity = getattr(record, "severity", None)
            if severity is None:
                if record.levelno >= logging.ERROR:
                    severity = "error"
                elif record.levelno >= logging.WARNING:
                    severity = "warning"
                else:
                    severity = "info"
            timestamp = datetime.fromtimestamp(record.created).strftime(LogConstants.ACTIVITY_TIME_FORMAT)
            self._orchestrator._append_log(LogEntry(timestamp=timestamp, text=record.getMessage(),
                                                    severity=severity))
        except Exception:
            self.handleError(record)


class AnalysisOrchestrator:
    """Runs one affinity analysis at a time and exposes its progress.
    
    The state moves ``IDLE -> RUNNING -> COMPLETE | CANCELLED | FAILED``.
    Only the worker running the pipeline writes to it; observers read it
    through :meth:`snapshot` or receive ``(kind, payload)`` events through
    :meth:`subscribe`, where kind is ``"progress"``, ``"log"`` or ``"phase"``.
    """
    
    def __init__(self, config: Settings = None,
                 transport_factory: Callable[[CancellationToken], Any] = None,
                 notifier: Optional[Callable[[str, str], None]] = None):
        self.config = config or default_settings
        self._transport_factory = transport_factory or (lambda token: SteamTransport(token, self.config))
        self.notifier = LogNotifier() if notifier is None else notifier
        
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._logging_enabled = self.config.activity_log_enabled
        self._thread: Optional[threading.Thread] = None
        self._token: Optional[CancellationToken] = None
        
        self._phase = AnalysisPhase.IDLE
        self._progress_text = ""
        self._progress_percent: Optional[int] = None
        self._logs: List[LogEntry] = []
        self._result: Optional[AnalysisResult] = None
        self._error: Optional[str] = None
    
    # ------------------------------------------------------------------
    # Observer interface
    # ------------------------------------------------------------------
    
    @property
    def running(self) -> bool:
        with self._lock:
            return self._phase is AnalysisPhase.RUNNING
    
    def snapshot(self) -> AnalysisSnapshot:
        with self._lock:
            return AnalysisSnapshot(
                phase=self._phase,
                progress_text=self._progress_text,
                progress_percent=self._progress_percent,
                logs=list(self._logs),
                result=self._result,
                error=self._error,
            )
    
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        with self._lock:
            self._listeners.append(listener)
        
        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe
    
    def set_logging_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._logging_enabled = bool(enabled)
    
    # ------------------------------------------------------------------
    # Control interface
    # ------------------------------------------------------------------
    
    def start(self, params: Union[AnalysisParameters, Dict[str, Any]]) -> bool:
        """Start a run in a background thread.
        
        Returns False without doing anything when a run is already in
        progress. Invalid parameters raise InvalidParametersError before
        any state changes.
        """
        params = self._resolve(params)
        if not self._begin():
            logger.info("Analysis already running; start request ignored")
            return False
        self._thread = threading.Thread(target=self._execute, args=(params,),
                                        name="steamaffinity-analysis", daemon=True)
        self._thread.start()
        return True
    
    def run(self, params: Union[AnalysisParameters, Dict[str, Any]]) -> bool:
        """Run synchronously in the calling thread; same contract as start()."""
        params = self._resolve(params)
        if not self._begin():
            logger.info("Analysis already running; run request ignored")
            return False
        self._execute(params)
        return True
    
    def cancel(self) -> bool:
        """Ask the active run to stop at its next checkpoint."""
        with self._lock:
            if self._phase is not AnalysisPhase.RUNNING or self._token is None:
                return False
            self._token.cancel()
        return True
    
    def wait(self, timeout: float = None) -> bool:
        """Block until the background run finishes; True when idle afterwards."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.running
    
    # ------------------------------------------------------------------
    # State updates (worker only)
    # ------------------------------------------------------------------
    
    @staticmethod
    def _resolve(params) -> AnalysisParameters:
        if isinstance(params, AnalysisParameters):
            return params
        return AnalysisParameters.build(**dict(params))
    
    def _begin(self) -> bool:
        with self._lock:
            if self._phase is AnalysisPhase.RUNNING:
                return False
            self._phase = AnalysisPhase.RUNNING
            self._token = CancellationToken()
            self._progress_text = "Starting analysis..."
            self._progress_percent = None
            self._logs = []
            self._result = None
            self._error = None
        self._emit("phase", AnalysisPhase.RUNNING)
        return True
    
    def _emit(self, kind: str, payload: Any) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(kind, payload)
            except Exception as e:
                logger.debug(f"Listener failed on {kind} event: {e}")
    
    def _set_progress(self, text: str, percent: Optional[int] = None) -> None:
        with self._lock:
            self._progress_text = text
            self._progress_percent = percent
        self._emit("progress", text)
    
    def _append_log(self, entry: LogEntry) -> None:
        with self._lock:
            if not self._logging_enabled:
                return
            self._logs.append(entry)
        self._emit("log", entry)
    
    def _on_collect_progress(self, index: int, total: int, percent: int) -> None:
        self._set_progress(f"Analyzing profile {index}/{total} ({percent}%)...", percent)
    
    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    
    def _execute(self, params: AnalysisParameters) -> None:
        token = self._token
        package_logger = logging.getLogger(LogConstants.PACKAGE_LOGGER)
        handler = ActivityLogHandler(self, threading.get_ident())
        previous_level = package_logger.level
        package_logger.addHandler(handler)
        if not package_logger.isEnabledFor(logging.INFO):
            package_logger.setLevel(logging.INFO)
        
        transport = None
        phase, result, error = AnalysisPhase.FAILED, None, None
        try:
            transport = self._transport_factory(token)
            result = self._pipeline(params, transport, token)
            phase = AnalysisPhase.COMPLETE
        except AnalysisCancelled:
            self._set_progress("Cancelling...")
            phase = AnalysisPhase.CANCELLED
        except SteamAffinityError as e:
            error = str(e)
        except Exception as e:
            logger.exception("Unexpected failure during analysis")
            error = str(e) or e.__class__.__name__
        
        try:
            if phase is AnalysisPhase.COMPLETE:
                send_notification(
                    self.notifier, NotificationConstants.COMPLETE_TITLE,
                    f"Score: {result.score_pct}% positive from {result.matching_reviewers} matching reviewers",
                )
                logger.info("Analysis complete! Notification sent.", extra=LogConstants.SUCCESS)
            elif phase is AnalysisPhase.CANCELLED:
                logger.warning("Analysis cancelled")
            else:
                logger.error(f"Analysis failed: {error}")
                send_notification(self.notifier, NotificationConstants.FAILED_TITLE, error)
        finally:
            package_logger.removeHandler(handler)
            package_logger.setLevel(previous_level)
            close = getattr(transport, "close", None)
            if close is not None:
                close()
        
        progress = {
            AnalysisPhase.COMPLETE: "Complete",
            AnalysisPhase.CANCELLED: "Cancelled",
            AnalysisPhase.FAILED: "Error",
        }[phase]
        with self._lock:
            self._phase = phase
            self._result = result
            self._error = error
            self._progress_text = progress
            self._progress_percent = 100 if phase is AnalysisPhase.COMPLETE else None
            self._token = None
        self._emit("progress", progress)
        self._emit("phase", phase)
    
    def _pipeline(self, params: AnalysisParameters, transport, token: CancellationToken) -> AnalysisResult:
        fetcher = ProfileReviewFetcher(transport, token, self.config)
        discovery = ReviewerDiscovery(transport, token, self.config)
        collector = BulkProfileCollector(fetcher, token, self.config)
        
        # Step 1: subject history
        self._set_progress("Fetching your review history...")
        logger.info("Fetching your review history...")
        subject_url = subject_reviews_url(params.subject_identity, self.config.steam_community_url)
        subject_reviews = fetcher.fetch_reviews(subject_url, "Your profile")
        token.raise_if_cancelled()
        if not subject_reviews:
            raise NoSubjectReviewsError(
                "No reviews found for your profile. Make sure your Steam ID is correct and your profile is public."
            )
        logger.info(f"Found {len(subject_reviews)} of your reviews", extra=LogConstants.SUCCESS)
        
        # Step 2: reviewers of the target game
        self._set_progress(f"Found {len(subject_reviews)} reviews")
        logger.info(f"Fetching game reviewers (limit: {params.max_profiles})...")
        reviewers = discovery.discover(
            params.target_game_id, params.max_profiles,
            on_progress=lambda found, limit: self._set_progress(f"Collected {found} reviewers..."),
        )
        token.raise_if_cancelled()
        if not reviewers:
            raise NoReviewersError("No reviewers found for this game.")
        logger.info(f"Found {len(reviewers)} reviewers to analyze", extra=LogConstants.SUCCESS)
        
        # Step 3: reviewer histories
        self._set_progress(f"Analyzing {len(reviewers)} profiles...", 0)
        logger.info("Beginning profile analysis (this will take a while)...")
        outcome = collector.collect(reviewers, on_progress=self._on_collect_progress)
        token.raise_if_cancelled()
        
        # Step 4: score
        logger.info("Comparing reviews and calculating final score...")
        self._set_progress("Calculating final score...")
        result = calculate_score(
            subject_reviews, outcome.records, params.target_game_id,
            params.min_overlap, params.min_similarity_pct,
        )
        logger.info(f"Analysis complete! Found {result.matching_reviewers} matching reviewers",
                    extra=LogConstants.SUCCESS)
        return result
