"""Command-line interface for SteamAffinity."""

import argparse
import logging
import sys

from .core.config import settings
from .core.constants import LogConstants
from .core.exceptions import SteamAffinityError
from .core.identity import parse_app_id, parse_steam_id, subject_reviews_url
from .core.models import AnalysisParameters, AnalysisPhase
from .services.orchestrator import AnalysisOrchestrator
from .services.profile_client import ProfileReviewFetcher
from .services.review_feed import ReviewerDiscovery
from .services.transport import SteamTransport
from .utils.data_prep import export_to_json, prepare_export

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5
SEVERITY_MARKS = {"info": " ", "success": "+", "warning": "!", "error": "x"}


def setup_logging(level: str = None):
    """Setup logging configuration."""
    numeric = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    # package logger sits at INFO while a run is active; the handler keeps console output at the requested level
    handler = logging.StreamHandler()
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LogConstants.LOG_FORMAT))
    logging.basicConfig(level=numeric, handlers=[handler])


def print_result(result) -> None:
    print(f"\nAffinity score: {result.score_pct}% positive")
    print(f"  Reviewers scanned:  {result.total_reviewers_scanned}")
    print(f"  Matching reviewers: {result.matching_reviewers}")
    print(f"  Recommending:       {result.positive_count}")
    print(f"  Average overlap:    {result.avg_overlap:.1f} games")
    print(f"  Thresholds:         overlap >= {result.min_overlap}, similarity >= {result.min_similarity_pct}%")


def cmd_analyze(args):
    """Analyze command: run the full pipeline and follow its progress."""
    params = AnalysisParameters.build(
        target_game_id=args.target,
        subject_identity=args.subject,
        min_overlap=args.min_overlap,
        min_similarity_pct=args.min_similarity,
        max_profiles=args.max_profiles,
    )
    print(f"Starting analysis for game {params.target_game_id}")
    print(f"Parameters: overlap={params.min_overlap}, similarity={params.min_similarity_pct}%, "
          f"maxProfiles={params.max_profiles}")
    
    orchestrator = AnalysisOrchestrator()
    orchestrator.set_logging_enabled(not args.no_activity)
    orchestrator.start(params)
    
    shown = 0
    last_progress = None
    try:
        while True:
            finished = orchestrator.wait(POLL_INTERVAL)
            state = orchestrator.snapshot()
            for entry in state.logs[shown:]:
                print(f"[{entry.timestamp}] {SEVERITY_MARKS.get(entry.severity, ' ')} {entry.text}")
            shown = len(state.logs)
            if args.no_activity and state.progress_text != last_progress:
                print(state.progress_text)
            last_progress = state.progress_text
            if finished:
                break
    except KeyboardInterrupt:
        print("\nCancelling analysis...")
        orchestrator.cancel()
        orchestrator.wait()
        state = orchestrator.snapshot()
    
    if state.phase is AnalysisPhase.COMPLETE:
        print_result(state.result)
        if args.out:
            export_to_json(prepare_export(state.result, params), args.out)
            print(f"Results exported to {args.out}")
        return 0
    if state.phase is AnalysisPhase.CANCELLED:
        print("Analysis cancelled")
        return 130
    print(f"Analysis failed: {state.error}")
    return 1


def cmd_reviews(args):
    """Reviews command: list the verdicts scraped from a profile."""
    steam_id = parse_steam_id(args.subject)
    if not steam_id:
        print("Invalid Steam ID format. Enter either your steamID64 (numbers) or custom URL username.")
        return 1
    
    transport = SteamTransport()
    try:
        fetcher = ProfileReviewFetcher(transport, transport.token)
        reviews = fetcher.fetch_reviews(subject_reviews_url(steam_id), steam_id)
    finally:
        transport.close()
    
    print(f"Found {len(reviews)} reviews for '{steam_id}'")
    for review in reviews:
        print(f"  {review.game_id}: {'thumbs up' if review.is_positive else 'thumbs down'}")
    return 0


def cmd_reviewers(args):
    """Reviewers command: list reviewers found in a game's review feed."""
    app_id = parse_app_id(args.target)
    if not app_id:
        print("Could not find a game id. Pass an app id or a store page URL.")
        return 1
    
    transport = SteamTransport()
    try:
        discovery = ReviewerDiscovery(transport, transport.token)
        reviewers = discovery.discover(app_id, args.max_profiles or settings.default_max_profiles)
    finally:
        transport.close()
    
    print(f"Found {len(reviewers)} reviewers for app {app_id}")
    for reviewer in reviewers:
        print(f"  {reviewer.id}: {'recommended' if reviewer.initial_verdict else 'not recommended'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SteamAffinity - game scores from reviewers who share your taste")
    parser.add_argument('--log-level', help='Logging level (defaults to LOG_LEVEL setting)')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    
    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Score a game against reviewers with similar taste')
    analyze_parser.add_argument('subject', help='Your steamID64, custom URL name, or profile URL')
    analyze_parser.add_argument('target', help='App id or Steam store page URL')
    analyze_parser.add_argument('--min-overlap', type=int, help='Minimum number of shared games')
    analyze_parser.add_argument('--min-similarity', type=int, help='Minimum agreement percentage (0-100)')
    analyze_parser.add_argument('--max-profiles', type=int, help='Maximum reviewers to scan')
    analyze_parser.add_argument('--out', help='Output JSON file')
    analyze_parser.add_argument('--no-activity', action='store_true', help='Hide the activity log, show progress only')
    
    # Reviews command
    reviews_parser = subparsers.add_parser('reviews', help='List the reviews on a profile')
    reviews_parser.add_argument('subject', help='steamID64, custom URL name, or profile URL')
    
    # Reviewers command
    reviewers_parser = subparsers.add_parser('reviewers', help="List reviewers from a game's review feed")
    reviewers_parser.add_argument('target', help='App id or Steam store page URL')
    reviewers_parser.add_argument('--max-profiles', type=int, help='Maximum reviewers to list')
    
    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if not args.command:
        parser.print_help()
        return
    
    # analyze prints its own activity log
    quiet = args.command == "analyze" and not args.no_activity
    setup_logging(args.log_level or ("WARNING" if quiet else None))
    
    commands = {
        'analyze': cmd_analyze,
        'reviews': cmd_reviews,
        'reviewers': cmd_reviewers,
    }
    try:
        code = commands[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        code = 130
    except SteamAffinityError as e:
        print(f"Error: {e}")
        code = 1
    except Exception as e:
        logger.error(f"Command failed: {e}")
        code = 1
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
