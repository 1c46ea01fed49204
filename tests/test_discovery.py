"""Tests for bundle discovery from the root document."""

from urllib.parse import urljoin

import pytest

from decompiler.discovery import BundleDiscoverer, DiscoveryError, bundle_filename
from decompiler.fetcher import RetrievalError
from tests._fixtures.fake_site import SITE, FakeRetriever

PAGE = """\
<html><head>
  <script src="/static/js/runtime.js"></script>
  <link rel="stylesheet" href="css/main.css">
  <link rel="icon" href="/favicon.ico">
  <script>console.log("inline")</script>
  <link rel="preload stylesheet" href="https://cdn.example.net/fonts.css?v=3">
</head><body>
  <script src="//cdn.example.net/lib/vendor.min.js"></script>
  <script type="module" src="../app.js?v=12"></script>
</body></html>
"""


class TestExtractBundles:

    def test_counts_and_order(self) -> None:
        discoverer = BundleDiscoverer(SITE, FakeRetriever())
        bundles = discoverer.extract_bundles(PAGE)
        assert [(b.kind, b.filename) for b in bundles] == [
            ("js", "runtime.js"),
            ("js", "vendor.min.js"),
            ("js", "app.js"),
            ("css", "main.css"),
            ("css", "fonts.css"),
        ]

    def test_urls_resolved_against_base(self) -> None:
        base = "https://example.com/shop/index.html"
        discoverer = BundleDiscoverer(base, FakeRetriever())
        urls = [b.url for b in discoverer.extract_bundles(PAGE)]
        refs = [
            "/static/js/runtime.js",
            "//cdn.example.net/lib/vendor.min.js",
            "../app.js?v=12",
            "css/main.css",
            "https://cdn.example.net/fonts.css?v=3",
        ]
        assert urls == [urljoin(base, ref) for ref in refs]
        assert urls[3] == "https://example.com/shop/css/main.css"

    def test_placeholder_filenames(self) -> None:
        html = '<script src="?v=1"></script><link rel="stylesheet" href="/">'
        bundles = BundleDiscoverer(SITE, FakeRetriever()).extract_bundles(html)
        assert [b.filename for b in bundles] == ["script.js", "style.css"]

    def test_placeholder_filenames_with_root_path(self) -> None:
        html = '<script src="?v=1"></script><link rel="stylesheet" href="?theme=dark">'
        bundles = BundleDiscoverer("https://example.com/shop/app", FakeRetriever()).extract_bundles(html)
        assert [b.filename for b in bundles] == ["script.js", "style.css"]
        assert bundles[0].url == "https://example.com/shop/app?v=1"

    def test_query_reference_does_not_shadow_index_html(self) -> None:
        html = '<script src="?v=1"></script>'
        bundles = BundleDiscoverer("https://example.com/index.html", FakeRetriever()).extract_bundles(html)
        assert bundles[0].filename == "script.js"

    def test_no_references(self) -> None:
        assert BundleDiscoverer(SITE, FakeRetriever()).extract_bundles("<p>hi</p>") == []


class TestDiscover:

    def test_returns_html_and_bundles(self) -> None:
        retriever = FakeRetriever({SITE: PAGE})
        html, bundles = BundleDiscoverer(SITE, retriever).discover()
        assert html == PAGE
        assert len(bundles) == 5
        assert retriever.fetched("html") == [SITE]

    def test_fetch_failure_is_fatal(self) -> None:
        retriever = FakeRetriever({SITE: RetrievalError(SITE, "Read timed out")})
        with pytest.raises(DiscoveryError, match="Failed to analyze HTML structure"):
            BundleDiscoverer(SITE, retriever).discover()

    def test_no_bundles_is_fatal(self) -> None:
        retriever = FakeRetriever({SITE: "<html><body>static</body></html>"})
        with pytest.raises(DiscoveryError, match="No bundles found"):
            BundleDiscoverer(SITE, retriever).discover()


def test_bundle_filename() -> None:
    assert bundle_filename("https://a.com/x/y/app.js?v=2", "script.js") == "app.js"
    assert bundle_filename("https://a.com/", "style.css") == "style.css"
    assert bundle_filename("?v=1", "script.js") == "script.js"
    assert bundle_filename("../lib/app.js?v=12", "script.js") == "app.js"
