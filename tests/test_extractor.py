"""Tests for the review page extractor."""

import pytest
from steamaffinity.core.extractor import extract_reviews
from steamaffinity.core.models import Review

from conftest import THUMBS_DOWN, THUMBS_UP, make_page, review_block


class TestExtractReviews:
    """Test parsing of profile review-history pages."""
    
    def test_well_formed_page(self):
        """Every marker with a preceding link becomes a review."""
        page = make_page([("10", True), ("20", True), ("30", False), ("40", True), ("50", False)])
        result = extract_reviews(page)
        
        assert result.reviews == [
            Review("10", True), Review("20", True), Review("30", False),
            Review("40", True), Review("50", False),
        ]
        assert result.skipped == 0
        assert result.failed == 0
    
    def test_positive_and_negative_counts(self):
        positives = [(str(i), True) for i in range(100, 107)]
        negatives = [(str(i), False) for i in range(200, 204)]
        result = extract_reviews(make_page(positives + negatives))
        
        assert len(result.reviews) == 11
        assert sum(r.is_positive for r in result.reviews) == 7
        assert sum(not r.is_positive for r in result.reviews) == 4
    
    def test_reparse_is_identical(self):
        page = make_page([("1", True), ("2", False), ("1", True)])
        assert extract_reviews(page).reviews == extract_reviews(page).reviews
    
    def test_duplicates_within_page_dropped(self):
        page = make_page([("1", True), ("1", True), ("2", False)])
        result = extract_reviews(page)
        
        assert result.reviews == [Review("1", True), Review("2", False)]
        assert result.duplicates == 1
    
    def test_contradicting_verdicts_both_kept(self):
        """De-duplication is on the (game, verdict) pair, not the game alone."""
        page = make_page([("1", True), ("1", False)])
        assert extract_reviews(page).reviews == [Review("1", True), Review("1", False)]
    
    def test_marker_without_link_is_skipped(self):
        page = f'<div><img src="{THUMBS_UP}"></div>' + make_page([("7", False)])
        result = extract_reviews(page)
        
        assert result.reviews == [Review("7", False)]
        assert result.skipped == 1
    
    def test_link_outside_window_is_ignored(self):
        page = '<a href="https://steamcommunity.com/app/99">x</a>' + " " * 3000 + f'<img src="{THUMBS_DOWN}">'
        result = extract_reviews(page)
        
        assert result.reviews == []
        assert result.skipped == 1
    
    def test_custom_lookback(self):
        page = '<a href="/app/5">x</a>' + " " * 50 + f'<img src="{THUMBS_UP}">'
        assert extract_reviews(page, lookback=20).skipped == 1
        assert extract_reviews(page, lookback=200).reviews == [Review("5", True)]
    
    def test_nearest_preceding_link_wins(self):
        page = ('<a href="/app/1">one</a><a href="/app/2">two</a>'
                f'<img src="{THUMBS_UP}"><a href="/app/3">three</a>')
        assert extract_reviews(page).reviews == [Review("2", True)]
    
    def test_case_insensitive_markup(self):
        page = f'<A HREF="/APP/42">x</A><IMG SRC="{THUMBS_UP.replace("icon_thumbsUp", "ICON_THUMBSUP")}">'
        assert extract_reviews(page).reviews == [Review("42", True)]
    
    def test_game_ids_are_strings(self):
        result = extract_reviews(review_block(730))
        assert result.reviews[0].game_id == "730"
    
    @pytest.mark.parametrize("markup", [None, "", "<html><body>nothing here</body></html>", "<<<>>>\x00", 12345])
    def test_malformed_input_never_raises(self, markup):
        result = extract_reviews(markup)
        assert result.reviews == []
    
    def test_truncated_markup_gives_partial_result(self):
        page = make_page([("1", True), ("2", False)])
        cut = page[: page.rfind("icon_thumbsDown") - 5]
        assert extract_reviews(cut).reviews == [Review("1", True)]
