"""Extraction of thumbs-up/down verdicts from profile review pages."""

import logging
import re
from typing import Optional

from .config import settings
from .constants import SteamConstants
from .models import PageExtraction, Review

logger = logging.getLogger(__name__)

VOTE_IMG_RE = re.compile(r'<img[^>]+src="([^"]*icon_thumbs(Up|Down)[^"]*)"', re.I)
APP_LINK_RE = re.compile(r'href="[^"]*/app/(\d+)', re.I)


def extract_reviews(markup: Optional[str], lookback: int = None) -> PageExtraction:
    """Parse one review-history page into verdicts.

    Every vote glyph is paired with the nearest preceding ``/app/<id>`` link
    found within ``lookback`` characters before it. Glyphs without such a
    link are counted as skipped. Pairs are de-duplicated on
    ``(game_id, is_positive)`` within the page, first seen wins.
    Never raises; malformed input gives an empty or partial result.
    """
    result = PageExtraction()
    if not markup or not isinstance(markup, str):
        return result
    
    window = settings.lookback_window if lookback is None else lookback
    seen = set()
    
    try:
        matches = list(VOTE_IMG_RE.finditer(markup))
    except Exception as e:
        logger.error(f"Critical error while scanning review markup: {e}")
        return result
    
    for match in matches:
        try:
            is_positive = match.group(2).capitalize() == SteamConstants.THUMBS_UP
            position = match.start()
            context = markup[max(0, position - window):position]
            
            game_id = None
            for link in APP_LINK_RE.finditer(context):
                game_id = link.group(1)
            if game_id is None:
                result.skipped += 1
                continue
            
            key = (game_id, is_positive)
            if key in seen:
                result.duplicates += 1
                continue
            seen.add(key)
            result.reviews.append(Review(game_id=game_id, is_positive=is_positive))
        except Exception as e:
            result.failed += 1
            logger.debug(f"Failed to resolve vote marker at {match.start()}: {e}")
    
    return result
