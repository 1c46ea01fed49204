"""
Bundle discovery from a site's root HTML document
"""
import logging
from typing import List, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from decompiler.fetcher import AssetRetriever, RetrievalError
from decompiler.models import BundleRef

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Fatal: the root document could not be analyzed or held no bundles"""


def bundle_filename(reference: str, default: str) -> str:
    """Last path segment of the reference itself, or ``default`` when there is none"""
    return urlparse(reference).path.split('/')[-1] or default


class BundleDiscoverer:
    """Enumerates script and stylesheet references in the root document"""

    HTML_FILENAME = 'index.html'

    def __init__(self, base_url: str, retriever: AssetRetriever):
        self.base_url = base_url
        self.retriever = retriever

    def fetch_html(self) -> str:
        try:
            return self.retriever.fetch_html(self.base_url)
        except RetrievalError as e:
            logger.error(f"Failed to fetch HTML: {e}")
            raise DiscoveryError('Failed to analyze HTML structure') from e

    def extract_bundles(self, html: str) -> List[BundleRef]:
        """Scripts first, then stylesheets, each in document order"""
        try:
            soup = BeautifulSoup(html, 'html.parser')
        except Exception as e:
            raise DiscoveryError('Failed to analyze HTML structure') from e

        bundles = []

        # <script src="...">
        for script in soup.find_all('script', src=True):
            src = script.get('src', '').strip()
            if src:
                full_url = urljoin(self.base_url, src)
                bundles.append(BundleRef(full_url, 'js', bundle_filename(src, 'script.js')))

        # <link rel="stylesheet" href="...">
        for link in soup.find_all('link', href=True):
            if 'stylesheet' not in [r.lower() for r in link.get('rel') or []]:
                continue
            href = link.get('href', '').strip()
            if href:
                full_url = urljoin(self.base_url, href)
                bundles.append(BundleRef(full_url, 'css', bundle_filename(href, 'style.css')))

        return bundles

    def discover(self) -> Tuple[str, List[BundleRef]]:
        """Fetch the root document and return (html, bundles)"""
        html = self.fetch_html()
        bundles = self.extract_bundles(html)

        js_count = sum(1 for b in bundles if b.kind == 'js')
        logger.info(f"[+] Found {js_count} JavaScript and {len(bundles) - js_count} CSS bundles")

        if not bundles:
            raise DiscoveryError('No bundles found to decompile')

        return html, bundles
