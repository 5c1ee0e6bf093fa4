from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_USER_AGENT = "GrantKeywordDashboard/0.1"
logger = logging.getLogger(__name__)
_SLOW_REQUEST_SECONDS = 5.0
_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


@dataclass(slots=True)
class CsvHttpClient:
    """One-shot fetcher for dataset and keyword files served over HTTP(S)."""

    timeout_seconds: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    max_retries: int = 0
    backoff_factor: float = 0.5
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent, "Accept": "text/csv, text/plain, */*"})

        retry = Retry(
            total=self.max_retries,
            connect=self.max_retries,
            read=self.max_retries,
            status=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=_RETRY_STATUS_CODES,
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def __enter__(self) -> CsvHttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def get_text(self, url: str) -> str:
        started_at = time.monotonic()
        response: Response = self._session.get(url, timeout=self.timeout_seconds)
        elapsed = time.monotonic() - started_at
        if elapsed > _SLOW_REQUEST_SECONDS:
            logger.warning("Slow HTTP GET %.3fs %s", elapsed, url)
        response.raise_for_status()
        if response.encoding is None:
            response.encoding = "utf-8"
        return response.text
