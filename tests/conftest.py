"""Shared fixtures for SteamAffinity tests."""

import json

import pytest

from steamaffinity.core.cancellation import CancellationToken
from steamaffinity.core.config import Settings
from steamaffinity.core.exceptions import TransportError

THUMBS_UP = "https://community.akamai.steamstatic.com/public/shared/images/userreviews/icon_thumbsUp.png"
THUMBS_DOWN = "https://community.akamai.steamstatic.com/public/shared/images/userreviews/icon_thumbsDown.png"


def review_block(app_id, positive=True):
    """Markup of one review box as it appears on a profile's history page."""
    thumb = THUMBS_UP if positive else THUMBS_DOWN
    return (
        '<div class="review_box">'
        f'<div class="leftcol"><a href="https://steamcommunity.com/app/{app_id}">'
        f'<img src="https://cdn.akamai.steamstatic.com/steam/apps/{app_id}/capsule_184x69.jpg"></a></div>'
        '<div class="rightcol"><div class="vote_header tooltip">'
        f'<a href="https://steamcommunity.com/id/someone/recommended/{app_id}/">'
        f'<div class="thumb"><img src="{thumb}" width="40" height="40"></div></a>'
        '<div class="title">Recommended</div><div class="hours">12.5 hrs on record</div>'
        '</div></div></div>'
    )


def make_page(reviews):
    """Wrap ``(app_id, positive)`` pairs into a history page."""
    body = "".join(review_block(app_id, positive) for app_id, positive in reviews)
    return f'<html><body><div id="leftContents">{body}</div></body></html>'


def full_page(start, count=10, positive=True):
    return make_page([(str(start + i), positive) for i in range(count)])


def feed_body(steam_ids, cursor="next", success=True, voted_up=True):
    payload = {
        "success": 1 if success else 0,
        "reviews": [{"author": {"steamid": sid}, "voted_up": voted_up} for sid in steam_ids],
    }
    if cursor is not None:
        payload["cursor"] = cursor
    return json.dumps(payload)


class FakeTransport:
    """Transport double answering from a responder function.
    
    The responder receives ``(url, params)`` and returns a body, or an
    exception instance to raise.
    """
    
    def __init__(self, responder, token=None):
        self.responder = responder
        self.token = token or CancellationToken()
        self.calls = []
        self.closed = False
    
    def fetch(self, url, params=None, headers=None):
        self.calls.append((url, dict(params) if params else None))
        self.token.raise_if_cancelled()
        body = self.responder(url, params)
        if isinstance(body, Exception):
            raise body
        return body
    
    def close(self):
        self.closed = True


def transport_error(url="https://example.invalid"):
    return TransportError(url, f"Request to {url} failed after 3 attempts: boom")


@pytest.fixture
def fast_settings():
    """Settings with every pacing delay disabled."""
    return Settings(
        _env_file=None,
        page_delay=0,
        discovery_delay=0,
        batch_cooldown=0,
        retry_delay=0,
    )


@pytest.fixture
def token():
    return CancellationToken()
