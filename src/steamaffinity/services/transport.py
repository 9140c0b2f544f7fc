"""HTTP transport with retry and cooperative cancellation."""

import logging
from typing import Dict, Optional

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from ..core.cancellation import CancellationToken
from ..core.config import Settings, settings as default_settings
from ..core.constants import HeaderConstants
from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)


class SteamTransport:
    """Fetches raw response bodies from Steam.

    Each request is attempted up to ``max_retries`` times; the n-th retry
    waits ``retry_delay * n`` seconds. A cancel observed before an attempt
    raises AnalysisCancelled instead of retrying.
    """
    
    def __init__(self, token: CancellationToken = None, config: Settings = None,
                 session: requests.Session = None):
        self.token = token or CancellationToken()
        self.config = config or default_settings
        self.session = session or requests.Session()
        self.headers = {"User-Agent": self.config.user_agent, **HeaderConstants.BROWSER_HEADERS}
    
    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(requests.exceptions.RequestException),
            stop=stop_after_attempt(max(1, self.config.max_retries)),
            wait=wait_incrementing(start=self.config.retry_delay, increment=self.config.retry_delay),
            sleep=self.token.sleep,
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            reraise=True,
        )
    
    def _get(self, url: str, params: Optional[Dict], headers: Dict) -> str:
        self.token.raise_if_cancelled()
        resp = self.session.get(url, params=params, headers=headers,
                                timeout=self.config.request_timeout)
        resp.raise_for_status()
        return resp.text
    
    def fetch(self, url: str, params: Optional[Dict] = None, headers: Optional[Dict] = None) -> str:
        """Return the body at ``url`` or raise TransportError after retries."""
        merged = {**self.headers, **(headers or {})}
        try:
            return self._retrying()(self._get, url, params, merged)
        except requests.exceptions.RequestException as e:
            attempts = max(1, self.config.max_retries)
            logger.error(f"Fetch failed after {attempts} attempts: {e}")
            raise TransportError(url, f"Request to {url} failed after {attempts} attempts: {e}") from e
    
    def close(self) -> None:
        self.session.close()
