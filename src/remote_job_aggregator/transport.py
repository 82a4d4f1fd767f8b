import asyncio
import logging
from urllib.parse import urljoin

import httpx

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5
RETRY_DELAY = 0.5  # seconds
RATE_LIMIT_STATUS = 403

FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.9, */*;q=0.8"
JSON_ACCEPT = "application/json"


class FetchError(Exception):
    """Raised when a URL cannot be fetched."""

    def __init__(self, url: str, status: int | None = None, reason: str | None = None) -> None:
        self.url = url
        self.status = status
        self.reason = reason
        parts = [f"HTTP {status}" if status is not None else None, reason]
        detail = ", ".join(p for p in parts if p) or "unknown error"
        super().__init__(f"Failed to fetch {url}: {detail}")


async def fetch_body(
    client: httpx.AsyncClient,
    url: str,
    accept: str = FEED_ACCEPT,
    user_agent: str | None = None,
    max_redirects: int = MAX_REDIRECTS,
    retry_delay: float = RETRY_DELAY,
) -> str:
    """
    Fetch a URL and return the response body as text.

    Redirects are followed manually (the client must not follow them itself),
    up to max_redirects hops. A 403 on the first attempt is retried once
    after retry_delay seconds.
    """
    headers = {"Accept": accept, "Cache-Control": "no-cache"}
    if user_agent:
        headers["User-Agent"] = user_agent

    current_url = url
    hops = 0
    retried = False

    while True:
        try:
            response = await client.get(current_url, headers=headers, follow_redirects=False)
        except httpx.HTTPError as e:
            raise FetchError(current_url, reason=str(e) or type(e).__name__) from e

        if 300 <= response.status_code < 400:
            location = response.headers.get("location")
            if not location:
                raise FetchError(current_url, status=response.status_code, reason="redirect-without-location")
            hops += 1
            if hops > max_redirects:
                raise FetchError(url, reason="too-many-redirects")
            current_url = urljoin(current_url, location)
            logger.debug(f"Redirect {hops}/{max_redirects}: {current_url}")
            continue

        if response.status_code == RATE_LIMIT_STATUS and not retried:
            retried = True
            logger.warning(f"HTTP {response.status_code} from {current_url}. Retrying in {retry_delay}s...")
            await asyncio.sleep(retry_delay)
            continue

        if not response.is_success:
            raise FetchError(current_url, status=response.status_code)

        return response.text
