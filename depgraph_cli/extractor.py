"""Import specifier extraction for TypeScript / JavaScript sources.

Two interchangeable backends share one contract: given a file's text, return
the ordered, de-duplicated list of raw import specifiers it references.

- :class:`RegexImportExtractor` is pattern based. It never raises and
  tolerates broken or partial code, at the cost of occasional false positives
  from strings or comments that merely look like imports.
- :class:`TreeSitterImportExtractor` walks an error-tolerant Tree-sitter
  syntax tree, so commented-out imports are ignored.
"""

from __future__ import annotations

import logging
import re
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Pattern, Type, Union

logger = logging.getLogger(__name__)

# import X from 'p' / import { X } from 'p' / import * as X from 'p' /
# import type { X } from 'p' / import 'p'
_ES_IMPORT_RE = re.compile(
    r"""import\s+(?:type\s+)?"""
    r"""(?:(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)(?:\s*,\s*(?:\{[^}]*\}|\*\s+as\s+\w+))?\s+from\s+)?"""
    r"""['"]([^'"]+)['"]"""
)

# require('p')
_REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)""")

# export { X } from 'p' / export * from 'p' / export * as ns from 'p'
_REEXPORT_RE = re.compile(
    r"""export\s+(?:type\s+)?(?:\{[^}]*\}|\*(?:\s+as\s+\w+)?)\s+from\s+['"]([^'"]+)['"]"""
)

# import('p') with a string literal only
_DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*['"]([^'"]+)['"]\s*\)""")

IMPORT_PATTERNS: List[Pattern[str]] = [
    _ES_IMPORT_RE,
    _REQUIRE_RE,
    _REEXPORT_RE,
    _DYNAMIC_IMPORT_RE,
]


class ExtractorUnavailableError(RuntimeError):
    """Raised when a requested extraction backend cannot be loaded."""


# ===================================================================
# Abstract Extractor Interface
# ===================================================================

class ImportExtractor(ABC):
    """Abstract base class for import extractors."""

    name: str = ""

    @abstractmethod
    def extract(self, text: str) -> List[str]:
        """Return the ordered, de-duplicated specifiers referenced in *text*."""
        ...

    def extract_content(self, content: Union[str, bytes], path: str = "") -> List[str]:
        """Extract from raw file content, treating undecodable bytes as opaque."""
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as exc:
                logger.warning("Skipping non UTF-8 file %s: %s", path or "<memory>", exc)
                return []
        return self.extract(content)


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


# ===================================================================
# Regex Extractor (default)
# ===================================================================

class RegexImportExtractor(ImportExtractor):
    """Pattern-based extractor; patterns run in a fixed order."""

    name = "regex"

    def __init__(self, patterns: Optional[List[Pattern[str]]] = None) -> None:
        self.patterns = patterns if patterns is not None else IMPORT_PATTERNS

    def extract(self, text: str) -> List[str]:
        sources: List[str] = []
        for pattern in self.patterns:
            for match in pattern.finditer(text):
                if match.group(1):
                    sources.append(match.group(1))
        return _dedupe(sources)


# ===================================================================
# Tree-sitter Extractor
# ===================================================================

class TreeSitterImportExtractor(ImportExtractor):
    """Syntax-tree extractor built on the Tree-sitter TSX grammar.

    TSX is a superset of JavaScript, JSX and TypeScript syntax, so one
    grammar covers every code extension the graph builder parses.
    """

    name = "tree-sitter"

    def __init__(self) -> None:
        try:
            import tree_sitter_typescript  # type: ignore[import-untyped]
            from tree_sitter import Language, Parser as TSParser  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ExtractorUnavailableError(
                "Tree-sitter extraction needs the grammar packages. "
                "Install with: pip install tree-sitter tree-sitter-typescript"
            ) from exc

        self._language = Language(tree_sitter_typescript.language_tsx())
        self._parser_cls = TSParser
        # Parsers are not shared between threads
        self._local = threading.local()
        logger.info("Using Tree-sitter import extractor (TSX grammar)")

    def extract(self, text: str) -> List[str]:
        tree = self._thread_parser().parse(text.encode("utf-8"))
        sources: List[str] = []

        # Iterative pre-order walk keeps source order without recursion limits
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            spec = self._specifier_of(node)
            if spec:
                sources.append(spec)
            stack.extend(reversed(node.children))

        return _dedupe(sources)

    def _thread_parser(self) -> Any:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = self._parser_cls(self._language)
            self._local.parser = parser
        return parser

    @staticmethod
    def _specifier_of(node: Any) -> Optional[str]:
        if node.type in ("import_statement", "export_statement", "import_require_clause"):
            source = node.child_by_field_name("source")
            return _string_value(source) if source is not None else None

        if node.type == "call_expression":
            func = node.child_by_field_name("function")
            args = node.child_by_field_name("arguments")
            if func is None or args is None:
                return None
            is_require = func.type == "identifier" and func.text == b"require"
            if not (is_require or func.type == "import"):
                return None
            literals = [a for a in args.named_children if a.type == "string"]
            if len(args.named_children) == 1 and literals:
                return _string_value(literals[0])
        return None


def _string_value(node: Any) -> Optional[str]:
    if node.type != "string":
        return None
    raw = node.text.decode("utf-8", errors="replace")
    if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
        raw = raw[1:-1]
    return raw or None


# ===================================================================
# Backend selection
# ===================================================================

EXTRACTORS: Dict[str, Type[ImportExtractor]] = {
    RegexImportExtractor.name: RegexImportExtractor,
    TreeSitterImportExtractor.name: TreeSitterImportExtractor,
}


def get_extractor(name: str = "regex") -> ImportExtractor:
    """Instantiate the extractor registered under *name*.

    Raises:
        ValueError: For an unknown backend name.
        ExtractorUnavailableError: If the backend's libraries are missing.
    """
    try:
        cls = EXTRACTORS[name]
    except KeyError:
        raise ValueError(
            f"Unknown extractor '{name}'. Choose one of: {', '.join(sorted(EXTRACTORS))}"
        ) from None
    return cls()
