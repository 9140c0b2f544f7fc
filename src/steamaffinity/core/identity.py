"""Parsing of Steam profile and game identifiers."""

import re
from typing import Optional

from .config import settings
from .constants import SteamConstants

PROFILE_URL_RE = re.compile(r"steamcommunity\.com/profiles/(\d+)")
VANITY_URL_RE = re.compile(r"steamcommunity\.com/id/([^/\s]+)")
APP_URL_RE = re.compile(r"/app/(\d+)")
NUMERIC_RE = re.compile(r"^\d+$")


def parse_steam_id(value: Optional[str]) -> Optional[str]:
    """Return the steamID64 or vanity name found in user input, or None.

    Accepts a bare steamID64, a custom URL name, or a full
    ``steamcommunity.com/profiles/<id>`` / ``steamcommunity.com/id/<name>`` URL.
    """
    if not value:
        return None
    value = value.strip()
    if "steamcommunity.com" in value:
        m = PROFILE_URL_RE.search(value)
        if m:
            return m.group(1)
        m = VANITY_URL_RE.search(value)
        if m:
            return m.group(1)
        return None
    value = value.rstrip("/")
    return value or None


def parse_app_id(value) -> Optional[str]:
    """Return the numeric app id from an id or a store page URL, or None."""
    if value is None:
        return None
    value = str(value).strip()
    if NUMERIC_RE.match(value):
        return value
    m = APP_URL_RE.search(value)
    return m.group(1) if m else None


def is_steam_id64(value: str) -> bool:
    return bool(NUMERIC_RE.match(value or ""))


def profile_reviews_url(steam_id: str, base_url: str = None) -> str:
    """Review history location using the numeric profile form."""
    base = (base_url or settings.steam_community_url).rstrip("/")
    return base + SteamConstants.PROFILE_PATH.format(steam_id=steam_id)


def vanity_reviews_url(name: str, base_url: str = None) -> str:
    """Review history location using the custom URL form."""
    base = (base_url or settings.steam_community_url).rstrip("/")
    return base + SteamConstants.VANITY_PATH.format(name=name)


def subject_reviews_url(identity: str, base_url: str = None) -> str:
    """Pick the location form that matches a parsed subject identity."""
    if is_steam_id64(identity):
        return profile_reviews_url(identity, base_url)
    return vanity_reviews_url(identity, base_url)
