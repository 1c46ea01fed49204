"""
Decompilation pipeline: discovery, source map recovery, per-bundle processing
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from decompiler.beautifier import BeautifyError, beautify_css, beautify_js
from decompiler.discovery import BundleDiscoverer
from decompiler.extractor import StructuralExtractor
from decompiler.fetcher import AssetRetriever, RetrievalError
from decompiler.models import AnalysisResult, BundleRef
from decompiler.sourcemap import SourceMapRecoverer

logger = logging.getLogger(__name__)


class DecompilationError(Exception):
    """Fatal job failure; no result is produced"""


class WebDecompiler:
    """Runs one decompilation job for one root URL"""

    def __init__(self, url: str, job_id: str, retriever: Optional[AssetRetriever] = None,
                 recover_sourcemaps: bool = True, max_workers: int = 1):
        self.base_url = url
        self.retriever = retriever or AssetRetriever()
        self.recover_sourcemaps = recover_sourcemaps
        self.max_workers = max_workers
        self.extractor = StructuralExtractor()
        self.results = AnalysisResult(job_id=job_id, url=url)

    def analyze_html(self) -> List[BundleRef]:
        discoverer = BundleDiscoverer(self.base_url, self.retriever)
        html, bundles = discoverer.discover()
        self.results.add_original(BundleDiscoverer.HTML_FILENAME, html)
        self.results.bundles = bundles
        return bundles

    def try_sourcemap_recovery(self):
        """Fetch <bundle>.map for every JS bundle; absence is the common case"""
        recoverer = SourceMapRecoverer(self.retriever)
        for bundle in self.results.bundles:
            if bundle.kind != 'js':
                continue
            for source in recoverer.recover(bundle.url):
                self.results.add_recovered(source)

    def fetch_bundle(self, bundle: BundleRef) -> Optional[str]:
        try:
            return self.retriever.fetch_bundle(bundle.url)
        except RetrievalError as e:
            logger.error(f"Error processing {bundle.url}: {e}")
            return None

    def fetch_all(self, bundles: List[BundleRef]) -> Dict[int, Optional[str]]:
        """Fetch bundle bodies keyed by discovery index"""
        if self.max_workers <= 1:
            return {i: self.fetch_bundle(b) for i, b in enumerate(bundles)}

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            contents = list(pool.map(self.fetch_bundle, bundles))
        return dict(enumerate(contents))

    def decompile_js(self, bundle: BundleRef, content: str):
        self.results.add_original(bundle.filename, content)

        try:
            beautified = beautify_js(content)
        except BeautifyError as e:
            logger.warning(f"Could not beautify {bundle.filename}: {e}")
            self.results.add_raw(bundle.filename, content)
            return

        self.results.add_beautified_js(bundle.filename, beautified)

        for component in self.extractor.extract_components(beautified, bundle.filename):
            self.results.add_component(component)
        for module in self.extractor.extract_modules(beautified, bundle.filename):
            self.results.add_module(module)

    def decompile_css(self, bundle: BundleRef, content: str):
        self.results.add_original(bundle.filename, content)
        self.results.add_beautified_css(bundle.filename, beautify_css(content))

    def process_bundles(self, bundles: List[BundleRef]):
        contents = self.fetch_all(bundles)

        # Applied in discovery order regardless of fetch completion order
        for i, bundle in enumerate(bundles):
            content = contents[i]
            if content is None:
                continue
            if bundle.kind == 'js':
                self.decompile_js(bundle, content)
            elif bundle.kind == 'css':
                self.decompile_css(bundle, content)
            logger.debug(f"  Processed {bundle.url}")

    def run_full_decompilation(self) -> AnalysisResult:
        """Run every stage; raises DecompilationError on fatal failure"""
        logger.info(f"[+] Starting decompilation of {self.base_url}...")

        try:
            bundles = self.analyze_html()
        except Exception as e:
            logger.error(f"Decompilation failed: {e}")
            raise DecompilationError(str(e)) from e

        if self.recover_sourcemaps:
            logger.info("[+] Trying source map recovery...")
            self.try_sourcemap_recovery()

        logger.info(f"[+] Processing {len(bundles)} bundles...")
        self.process_bundles(bundles)

        summary = self.results.analysis
        logger.info(f"[+] Decompilation complete: {summary.js_files} JS, {summary.css_files} CSS, "
                    f"{summary.components} components, {summary.modules} modules")
        return self.results
