"""
Source map fetching and original source recovery
Recovers pre-bundling files from the sourcesContent of an adjacent .map file
"""
import json
import logging
from typing import Dict, List, Optional

from decompiler.fetcher import AssetRetriever, RetrievalError
from decompiler.models import RecoveredSource

logger = logging.getLogger(__name__)


def clean_source_path(source_path: str) -> str:
    """Strip the webpack:// scheme and leading relative segments"""
    path = source_path
    if path.startswith('webpack://'):
        path = path[len('webpack://'):]
    while path.startswith(('../', './')):
        path = path[3:] if path.startswith('../') else path[2:]
    return path


class SourceMapRecoverer:
    """Opportunistically recovers original sources for JS bundles"""

    HEADER = '// Recovered from source map: {bundle_url}\n// Original path: {source_path}\n\n'

    def __init__(self, retriever: AssetRetriever):
        self.retriever = retriever

    def fetch_sourcemap(self, bundle_url: str) -> Optional[Dict]:
        """Fetch and parse ``<bundle_url>.map``; None when unavailable"""
        map_url = f"{bundle_url}.map"
        try:
            data = json.loads(self.retriever.fetch_sourcemap(map_url))
        except RetrievalError as e:
            logger.debug(f"No sourcemap for {bundle_url}: {e}")
            return None
        except ValueError as e:
            logger.debug(f"Invalid sourcemap {map_url}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        return data

    def extract_sources(self, sourcemap_data: Dict, bundle_url: str) -> List[RecoveredSource]:
        """Build RecoveredSource entries for every source with content"""
        sources = sourcemap_data.get('sources')
        sources_content = sourcemap_data.get('sourcesContent')
        if not isinstance(sources, list) or not isinstance(sources_content, list):
            return []

        recovered = []
        for i, source_path in enumerate(sources):
            content = sources_content[i] if i < len(sources_content) else None
            if not isinstance(source_path, str) or not isinstance(content, str):
                continue
            if not source_path or not content:
                continue

            clean_path = clean_source_path(source_path)
            filename = f"source_{clean_path.split('/')[-1] or 'unknown.js'}"
            header = self.HEADER.format(bundle_url=bundle_url, source_path=source_path)
            recovered.append(RecoveredSource(
                filename=filename,
                content=header + content,
                source_path=source_path,
                bundle_url=bundle_url
            ))

        return recovered

    def recover(self, bundle_url: str) -> List[RecoveredSource]:
        sourcemap_data = self.fetch_sourcemap(bundle_url)
        if not sourcemap_data:
            return []

        recovered = self.extract_sources(sourcemap_data, bundle_url)
        if recovered:
            logger.info(f"[+] Recovered {len(recovered)} original sources from {bundle_url}.map")
        return recovered
