"""
Heuristic recovery of UI components and module boundaries from beautified JS
"""
import re
import logging
from typing import List

from decompiler.models import ComponentCandidate, ModuleEdge

logger = logging.getLogger(__name__)


class StructuralExtractor:
    """
    Regex-based extraction over beautified JavaScript.

    Not a parser: expect both misses and false positives. Input must be
    beautified, the patterns rely on keyword spacing.
    """

    COMPONENT_PATTERNS = [
        # function Name(...) { ... return ...jsx... }
        re.compile(r'function\s+([A-Z][a-zA-Z0-9]*)\s*\([^)]*\)\s*\{[^}]*return\s+[^}]*jsx?[^}]*\}'),
        # const Name = (...) => { ... return ...jsx... }
        re.compile(r'const\s+([A-Z][a-zA-Z0-9]*)\s*=\s*\([^)]*\)\s*=>\s*\{[^}]*return[^}]*jsx?[^}]*\}'),
        # class Name extends X { ... render() { ... return ... }
        re.compile(r'class\s+([A-Z][a-zA-Z0-9]*)\s+extends\s+[^{]*\{[^}]*render\s*\(\s*\)\s*\{[^}]*return[^}]*\}'),
    ]

    MODULE_PATTERNS = [
        # export [default] function|class|const|let|var name
        re.compile(r'export\s+(?:default\s+)?(?:function|class|const|let|var)\s+([a-zA-Z_$][a-zA-Z0-9_$]*)'),
        # module.exports = ...
        re.compile(r'module\.exports\s*=\s*([^;]+)'),
        # exports.name =
        re.compile(r'exports\.([a-zA-Z_$][a-zA-Z0-9_$]*)\s*='),
        # import ... from "path" / import "path"
        re.compile(r'import\s+(?:[^from]+from\s+)?["\']([^"\']+)["\']'),
        # require("path")
        re.compile(r'require\(["\']([^"\']+)["\']\)'),
    ]

    def extract_components(self, content: str, source: str) -> List[ComponentCandidate]:
        """Find component-shaped functions and classes with PascalCase names"""
        components = []

        for pattern in self.COMPONENT_PATTERNS:
            for match in pattern.finditer(content):
                name = match.group(1)
                if name and name[0].isupper():
                    components.append(ComponentCandidate(
                        name=name,
                        code=match.group(0),
                        source=source
                    ))

        logger.debug(f"  {source}: {len(components)} component candidates")
        return components

    def extract_modules(self, content: str, source: str) -> List[ModuleEdge]:
        """Find exports, imports and requires"""
        modules = []

        for pattern in self.MODULE_PATTERNS:
            for match in pattern.finditer(content):
                identifier = match.group(1)
                if identifier:
                    modules.append(ModuleEdge(
                        identifier=identifier,
                        match=match.group(0),
                        source=source
                    ))

        logger.debug(f"  {source}: {len(modules)} module references")
        return modules
