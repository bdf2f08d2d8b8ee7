from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Optional, Union
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from ..models import CrawlSettings, PublisherConfig
from ..utils.logging import get_logger

logger = get_logger("newsarchive.fetchers.http")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded retry with a fixed delay between attempts.

    ``max_attempts`` counts every request, the first one included. Only
    responses whose status is in ``retryable_statuses`` are retried.
    """

    max_attempts: int = 3
    delay_seconds: float = 1.0
    retryable_statuses: FrozenSet[int] = frozenset({429})

    @classmethod
    def from_settings(cls, settings: CrawlSettings) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, settings.max_retries),
            delay_seconds=settings.retry_delay_seconds,
            retryable_statuses=frozenset(settings.retry_status_codes),
        )

    def should_retry(self, status_code: int, attempt: int) -> bool:
        return status_code in self.retryable_statuses and attempt < self.max_attempts


@dataclass(slots=True)
class Document:
    """A fetched and parsed HTML page.

    ``url`` is the final URL after redirects and serves as the base for
    resolving relative links.
    """

    url: str
    soup: BeautifulSoup
    status_code: int = 200

    @classmethod
    def from_html(cls, url: str, html: str | bytes, *, status_code: int = 200) -> "Document":
        return cls(url=url, soup=BeautifulSoup(html, "html.parser"), status_code=status_code)


@dataclass(frozen=True, slots=True)
class FetchFailure:
    url: str
    reason: str
    status_code: Optional[int] = None
    attempts: int = 0


FetchResult = Union[Document, FetchFailure]


def _validated_url(url: str) -> Optional[str]:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


@dataclass
class FetchClient:
    """Politely delayed, retry-aware HTTP GET returning parsed documents.

    A fixed politeness delay precedes every attempt, the first one included.
    Failures are returned as ``FetchFailure`` and never raised.
    """

    request_delay: float = 0.3
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    timeout: float = 30.0
    headers: Dict[str, str] = field(default_factory=dict)
    session: requests.Session = field(default_factory=requests.Session)
    sleep: Callable[[float], None] = time.sleep

    @classmethod
    def for_publisher(cls, publisher: PublisherConfig, *, session: Optional[requests.Session] = None) -> "FetchClient":
        settings = publisher.settings
        headers = {"User-Agent": settings.user_agent, **publisher.headers}
        return cls(
            request_delay=settings.request_delay_seconds,
            retry_policy=RetryPolicy.from_settings(settings),
            timeout=settings.request_timeout_seconds,
            headers=headers,
            session=session or requests.Session(),
        )

    def fetch(self, url: str) -> FetchResult:
        if _validated_url(url) is None:
            logger.warning("Refusing to fetch non-HTTP URL: %s", url)
            return FetchFailure(url=url, reason="invalid_url")

        policy = self.retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            self.sleep(self.request_delay)
            try:
                resp = self.session.get(url, headers=self.headers, timeout=self.timeout)
            except requests.RequestException as exc:
                logger.error("Request error for %s: %s", url, exc)
                return FetchFailure(url=url, reason=f"request_error: {exc}", attempts=attempt)

            status = resp.status_code
            if status < 400:
                logger.debug("Fetched %s (%s) on attempt %d", url, status, attempt)
                return Document.from_html(resp.url or url, resp.content, status_code=status)

            if status not in policy.retryable_statuses:
                logger.error("HTTP %s for %s; giving up", status, url)
                return FetchFailure(url=url, reason=f"http_{status}", status_code=status, attempts=attempt)

            if not policy.should_retry(status, attempt):
                logger.error("Max retries reached for %s (last status %s)", url, status)
                return FetchFailure(url=url, reason="retries_exhausted", status_code=status, attempts=attempt)

            logger.warning(
                "Received %s for %s. Attempt %d/%d, retrying in %.1fs",
                status,
                url,
                attempt,
                policy.max_attempts,
                policy.delay_seconds,
            )
            self.sleep(policy.delay_seconds)

        return FetchFailure(url=url, reason="retries_exhausted", attempts=policy.max_attempts)

    def close(self) -> None:
        self.session.close()

