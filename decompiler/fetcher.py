"""
Asset retrieval over HTTP with a browser-like request identity
"""
import requests
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class RetrievalError(Exception):
    """Raised when a URL cannot be fetched"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class AssetRetriever:
    """Fetches documents and bundles; never retries"""

    USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

    # Seconds, by call site
    HTML_TIMEOUT = 15
    BUNDLE_TIMEOUT = 30
    SOURCEMAP_TIMEOUT = 10

    def __init__(self, max_size: Optional[int] = 10 * 1024 * 1024, session: Optional[requests.Session] = None):
        self.max_size = max_size
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': self.USER_AGENT
        })

    def fetch(self, url: str, timeout: float = BUNDLE_TIMEOUT) -> str:
        """Fetch a URL and return its body as text"""
        try:
            with self.session.get(url, timeout=timeout, stream=True) as resp:
                resp.raise_for_status()

                # Check size; an unparseable Content-Length is ignored
                declared = self._declared_length(resp)
                if self.max_size and declared is not None and declared > self.max_size:
                    raise RetrievalError(url, f"too large ({declared} bytes)")

                content = resp.content
                if self.max_size and len(content) > self.max_size:
                    raise RetrievalError(url, f"too large ({len(content)} bytes)")
        except requests.RequestException as e:
            raise RetrievalError(url, str(e)) from e

        logger.debug(f"Fetched {url} ({len(content)} bytes)")
        return content.decode('utf-8', errors='ignore')

    @staticmethod
    def _declared_length(resp) -> Optional[int]:
        content_length = resp.headers.get('Content-Length')
        if not content_length:
            return None
        try:
            return int(content_length)
        except ValueError:
            logger.debug(f"Ignoring malformed Content-Length: {content_length!r}")
            return None

    def fetch_html(self, url: str) -> str:
        return self.fetch(url, timeout=self.HTML_TIMEOUT)

    def fetch_bundle(self, url: str) -> str:
        return self.fetch(url, timeout=self.BUNDLE_TIMEOUT)

    def fetch_sourcemap(self, url: str) -> str:
        return self.fetch(url, timeout=self.SOURCEMAP_TIMEOUT)
