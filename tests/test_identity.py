"""Tests for identity parsing and analysis parameter validation."""

import pytest
from steamaffinity.core.exceptions import InvalidParametersError
from steamaffinity.core.identity import (
    parse_app_id,
    parse_steam_id,
    profile_reviews_url,
    subject_reviews_url,
    vanity_reviews_url,
)
from steamaffinity.core.models import AnalysisParameters


class TestParseSteamId:
    
    @pytest.mark.parametrize("raw,expected", [
        ("76561198000000001", "76561198000000001"),
        ("  gabelogannewell  ", "gabelogannewell"),
        ("gabelogannewell///", "gabelogannewell"),
        ("https://steamcommunity.com/profiles/76561198000000001/", "76561198000000001"),
        ("https://steamcommunity.com/profiles/76561198000000001/recommended/", "76561198000000001"),
        ("steamcommunity.com/id/gabelogannewell", "gabelogannewell"),
        ("https://steamcommunity.com/id/gabelogannewell/recommended/?p=2", "gabelogannewell"),
    ])
    def test_valid(self, raw, expected):
        assert parse_steam_id(raw) == expected
    
    @pytest.mark.parametrize("raw", [None, "", "   ", "///", "https://steamcommunity.com/market/"])
    def test_invalid(self, raw):
        assert parse_steam_id(raw) is None


class TestParseAppId:
    
    @pytest.mark.parametrize("raw,expected", [
        ("620", "620"),
        (620, "620"),
        ("https://store.steampowered.com/app/620/Portal_2/", "620"),
        ("store.steampowered.com/app/1145360?snr=1_4_4__40_1", "1145360"),
    ])
    def test_valid(self, raw, expected):
        assert parse_app_id(raw) == expected
    
    @pytest.mark.parametrize("raw", [None, "", "portal", "https://store.steampowered.com/search/"])
    def test_invalid(self, raw):
        assert parse_app_id(raw) is None


class TestReviewUrls:
    
    def test_forms(self):
        assert profile_reviews_url("1", "https://steamcommunity.com") == "https://steamcommunity.com/profiles/1/recommended/"
        assert vanity_reviews_url("bob", "https://steamcommunity.com/") == "https://steamcommunity.com/id/bob/recommended/"
    
    def test_subject_form_follows_identity(self):
        assert "/profiles/76561198000000001/" in subject_reviews_url("76561198000000001")
        assert "/id/bob/" in subject_reviews_url("bob")


class TestAnalysisParameters:
    
    def test_build_resolves_inputs(self):
        params = AnalysisParameters.build(
            target_game_id="https://store.steampowered.com/app/620/Portal_2/",
            subject_identity="https://steamcommunity.com/id/bob/",
            min_overlap=2,
            min_similarity_pct=50,
            max_profiles=20,
        )
        assert params.target_game_id == "620"
        assert params.subject_identity == "bob"
        assert (params.min_overlap, params.min_similarity_pct, params.max_profiles) == (2, 50, 20)
    
    def test_defaults_from_settings(self):
        params = AnalysisParameters.build(target_game_id="620", subject_identity="bob",
                                          min_overlap=None, max_profiles=None)
        assert params.min_overlap >= 0
        assert 0 <= params.min_similarity_pct <= 100
        assert params.max_profiles > 0
    
    @pytest.mark.parametrize("overrides", [
        {"subject_identity": ""},
        {"subject_identity": "https://steamcommunity.com/market/"},
        {"target_game_id": "not-a-game"},
        {"min_overlap": -1},
        {"min_similarity_pct": 101},
        {"min_similarity_pct": -5},
        {"max_profiles": 0},
    ])
    def test_invalid_inputs(self, overrides):
        values = {"target_game_id": "620", "subject_identity": "bob", **overrides}
        with pytest.raises(InvalidParametersError):
            AnalysisParameters.build(**values)
    
    def test_missing_subject(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            AnalysisParameters.build(target_game_id="620")
        assert "subject_identity" in str(exc_info.value)
    
    def test_frozen(self):
        params = AnalysisParameters.build(target_game_id="620", subject_identity="bob")
        with pytest.raises(Exception):
            params.max_profiles = 5
