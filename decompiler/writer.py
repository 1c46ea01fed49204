"""
Output writing: ZIP archive of a job's artifacts plus report and README
"""
import io
import json
import re
import logging
import zipfile
from datetime import datetime, timezone
from typing import Dict
from urllib.parse import urlparse

from decompiler.explorer import component_filename
from decompiler.models import AnalysisResult

logger = logging.getLogger(__name__)


README_TEMPLATE = """# Decompilation Results

Source URL: {url}
Generated: {generated}

## Analysis Summary
- JavaScript files: {js_files}
- CSS files: {css_files}
- React components: {components}
- Modules: {modules}

## Structure
- `original/` - Original minified files
- `beautified/` - Beautified versions
- `extracted/components/` - Extracted React components
- `extracted/modules/` - Module information
- `analysis_report.json` - Detailed analysis

## Note
This is a best-effort decompilation. Some functionality may be missing or incomplete.
"""


def _timestamp(result: AnalysisResult) -> datetime:
    return datetime.fromtimestamp(result.timestamp / 1000, tz=timezone.utc)


class ArchiveWriter:
    """Packages an AnalysisResult into a downloadable ZIP"""

    def generate_report(self, result: AnalysisResult) -> Dict:
        return {
            'url': result.url,
            'timestamp': _timestamp(result).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'analysis': result.analysis.to_dict(),
            'bundles': [b.to_dict() for b in result.bundles],
            'totalFiles': result.total_files,
            'extractedComponents': len(result.components),
            'extractedModules': len(result.modules)
        }

    def generate_readme(self, result: AnalysisResult) -> str:
        summary = result.analysis
        return README_TEMPLATE.format(
            url=result.url,
            generated=_timestamp(result).strftime('%Y-%m-%d %H:%M:%S UTC'),
            js_files=summary.js_files,
            css_files=summary.css_files,
            components=summary.components,
            modules=summary.modules
        )

    def build(self, result: AnalysisResult) -> bytes:
        """Build the archive in memory"""
        buffer = io.BytesIO()

        with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
            for filename, content in result.original_files.items():
                zf.writestr(f"original/{filename}", content)

            for filename, content in result.beautified_files.items():
                zf.writestr(f"beautified/{filename}", content)

            for i, component in enumerate(result.components):
                content = f"// Extracted from: {component.source}\n// Component: {component.name}\n\n{component.code}"
                zf.writestr(f"extracted/components/{component_filename(component.name, i)}", content)

            modules = [m.to_dict() for m in result.modules]
            zf.writestr('extracted/modules/modules.json', json.dumps(modules, indent=2))

            zf.writestr('analysis_report.json', json.dumps(self.generate_report(result), indent=2))
            zf.writestr('README.md', self.generate_readme(result))

        data = buffer.getvalue()
        logger.info(f"[+] Generated archive with {result.total_files} files, "
                    f"{len(result.components)} components ({len(data)} bytes)")
        return data

    def archive_filename(self, result: AnalysisResult) -> str:
        domain = re.sub(r'[^a-zA-Z0-9]', '_', urlparse(result.url).hostname or '')
        return f"decompiled_{domain}_{result.job_id}.zip"

    def write(self, data: bytes, output_path: str):
        """Write archive to file"""
        with open(output_path, 'wb') as f:
            f.write(data)
        logger.info(f"[+] Wrote archive to {output_path}")


class ResultWriter:
    """Writes the full result record as JSON"""

    def write(self, result: AnalysisResult, output_path: str):
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"[+] Wrote results to {output_path}")
