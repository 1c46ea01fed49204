"""
Records produced by a decompilation job
"""
import time
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class BundleRef:
    """A JS or CSS asset referenced by the root document"""
    url: str
    kind: str  # 'js' or 'css'
    filename: str

    def to_dict(self) -> Dict:
        return {'url': self.url, 'type': self.kind, 'filename': self.filename}


@dataclass
class ComponentCandidate:
    """A function or class that looks like a UI component"""
    name: str
    code: str
    source: str

    def to_dict(self) -> Dict:
        return {'name': self.name, 'code': self.code, 'source': self.source}


@dataclass
class ModuleEdge:
    """An exported name, imported path or required path"""
    identifier: str
    match: str
    source: str

    def to_dict(self) -> Dict:
        return {'identifier': self.identifier, 'match': self.match, 'source': self.source}


@dataclass
class RecoveredSource:
    """Original source file recovered from a bundle's source map"""
    filename: str
    content: str
    source_path: str
    bundle_url: str


@dataclass
class AnalysisSummary:
    js_files: int = 0
    css_files: int = 0
    components: int = 0
    modules: int = 0

    def to_dict(self) -> Dict:
        return {
            'jsFiles': self.js_files,
            'cssFiles': self.css_files,
            'components': self.components,
            'modules': self.modules
        }


@dataclass
class AnalysisResult:
    """
    Accumulated output of one job.

    Counters in ``analysis`` are maintained by the mutators below; code that
    appends to the lists directly breaks the summary.
    """
    job_id: str
    url: str
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))
    bundles: List[BundleRef] = field(default_factory=list)
    components: List[ComponentCandidate] = field(default_factory=list)
    modules: List[ModuleEdge] = field(default_factory=list)
    original_files: Dict[str, str] = field(default_factory=dict)
    beautified_files: Dict[str, str] = field(default_factory=dict)
    analysis: AnalysisSummary = field(default_factory=AnalysisSummary)

    def add_original(self, filename: str, content: str):
        self.original_files[filename] = content

    def add_recovered(self, source: RecoveredSource):
        # Recovered sources share the originals namespace
        self.original_files[source.filename] = source.content

    def add_beautified_js(self, filename: str, content: str):
        self.beautified_files[f'beautified_{filename}'] = content
        self.analysis.js_files += 1

    def add_beautified_css(self, filename: str, content: str):
        self.beautified_files[f'beautified_{filename}'] = content
        self.analysis.css_files += 1

    def add_raw(self, filename: str, content: str):
        self.beautified_files[f'raw_{filename}'] = content

    def add_component(self, component: ComponentCandidate):
        self.components.append(component)
        self.analysis.components += 1

    def add_module(self, module: ModuleEdge):
        self.modules.append(module)
        self.analysis.modules += 1

    @property
    def total_files(self) -> int:
        return len(self.original_files) + len(self.beautified_files)

    def to_dict(self) -> Dict:
        return {
            'jobId': self.job_id,
            'url': self.url,
            'timestamp': self.timestamp,
            'bundles': [b.to_dict() for b in self.bundles],
            'components': [c.to_dict() for c in self.components],
            'modules': [m.to_dict() for m in self.modules],
            'originalFiles': dict(self.original_files),
            'beautifiedFiles': dict(self.beautified_files),
            'analysis': self.analysis.to_dict()
        }
