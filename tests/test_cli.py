"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest
from steamaffinity import cli
from steamaffinity.core.models import AnalysisParameters, AnalysisResult, Review, ReviewerIdentity
from steamaffinity.utils.data_prep import export_to_json, prepare_export

RESULT = AnalysisResult(score_pct=75, total_reviewers_scanned=40, matching_reviewers=8, positive_count=6,
                        avg_overlap=4.5, min_overlap=3, min_similarity_pct=60)


class TestParser:
    
    def test_analyze_arguments(self):
        args = cli.build_parser().parse_args([
            "analyze", "bob", "https://store.steampowered.com/app/620/", "--min-overlap", "4",
            "--min-similarity", "70", "--max-profiles", "25", "--out", "result.json",
        ])
        assert args.command == "analyze"
        assert (args.subject, args.target) == ("bob", "https://store.steampowered.com/app/620/")
        assert (args.min_overlap, args.min_similarity, args.max_profiles) == (4, 70, 25)
        assert args.out == "result.json"
        assert not args.no_activity
    
    def test_optional_thresholds_default_to_none(self):
        args = cli.build_parser().parse_args(["analyze", "bob", "620"])
        assert args.min_overlap is None and args.min_similarity is None and args.max_profiles is None


class TestCommands:
    
    def test_no_command_prints_help(self, capsys):
        cli.main([])
        assert "analyze" in capsys.readouterr().out
    
    def test_analyze_rejects_bad_subject(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["analyze", "https://steamcommunity.com/market/", "620"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().out
    
    def test_reviews_command(self, capsys):
        with patch.object(cli, "SteamTransport"), patch.object(cli, "ProfileReviewFetcher") as fetcher_cls:
            fetcher_cls.return_value.fetch_reviews.return_value = [Review("620", True), Review("400", False)]
            cli.main(["reviews", "https://steamcommunity.com/id/bob/"])
        
        out = capsys.readouterr().out
        assert "Found 2 reviews for 'bob'" in out
        assert "620: thumbs up" in out
        assert "400: thumbs down" in out
        url = fetcher_cls.return_value.fetch_reviews.call_args.args[0]
        assert url.endswith("/id/bob/recommended/")
    
    def test_reviewers_command(self, capsys):
        identity = ReviewerIdentity(id="7", profile_ref="https://steamcommunity.com/profiles/7/recommended/",
                                    initial_verdict=False)
        with patch.object(cli, "SteamTransport"), patch.object(cli, "ReviewerDiscovery") as discovery_cls:
            discovery_cls.return_value.discover.return_value = [identity]
            cli.main(["reviewers", "620", "--max-profiles", "5"])
        
        assert "7: not recommended" in capsys.readouterr().out
        discovery_cls.return_value.discover.assert_called_once_with("620", 5)
    
    def test_reviewers_rejects_bad_target(self, capsys):
        with pytest.raises(SystemExit):
            cli.main(["reviewers", "portal"])


class TestExport:
    
    def test_prepare_and_export(self, tmp_path):
        params = AnalysisParameters.build(target_game_id="620", subject_identity="bob",
                                          min_overlap=3, min_similarity_pct=60, max_profiles=40)
        path = tmp_path / "result.json"
        export_to_json(prepare_export(RESULT, params), str(path))
        
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["target_game_id"] == "620"
        assert data["subject"] == "bob"
        assert data["result"]["score_pct"] == 75
        assert data["parameters"]["max_profiles"] == 40
        assert data["metadata"]["export_timestamp"]
    
    def test_print_result(self, capsys):
        cli.print_result(RESULT)
        out = capsys.readouterr().out
        assert "75% positive" in out
        assert "Matching reviewers: 8" in out
