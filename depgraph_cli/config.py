"""Configuration paths and analysis defaults for DepGraph."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Pattern

BASE_DIR = Path(os.environ.get("DEPGRAPH_HOME", str(Path.home() / ".depgraph"))).expanduser()

# ---------------------------------------------------------------------------
# Resolution defaults (bundler-style: exact -> extension -> index)
# ---------------------------------------------------------------------------
DEFAULT_ALIASES: Dict[str, str] = {"@/": "/src/"}
RESOLVE_EXTENSIONS: List[str] = [".ts", ".tsx", ".js", ".jsx", ".json"]
INDEX_FILES: List[str] = ["index.ts", "index.tsx", "index.js", "index.jsx"]
CODE_EXTENSIONS: List[str] = [".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs"]

# ---------------------------------------------------------------------------
# Discovery defaults
# ---------------------------------------------------------------------------
FEATURE_PATTERNS: List[str] = [
    r"Service\.tsx?$",
    r"Manager\.tsx?$",
    r"Provider\.tsx?$",
    r"Engine\.tsx?$",
    r"Agent\.tsx?$",
    r"Controller\.tsx?$",
    r"Handler\.tsx?$",
    r"Workflow\.tsx?$",
    r"Store\.tsx?$",
    r"Hook\.tsx?$",
]

EXCLUDED_PATTERNS: List[str] = [
    r"node_modules",
    r"\.test\.",
    r"\.spec\.",
    r"__tests__",
    r"\.d\.ts$",
    r"index\.ts$",
]

ENTRY_PATTERNS: List[str] = [
    r"/page\.tsx?$",
    r"/layout\.tsx?$",
    r"/route\.ts$",
    r"/middleware\.ts$",
    r"/App\.tsx?$",
    r"/main\.tsx?$",
    r"/index\.tsx?$",
]

DEFAULT_EXTRACTOR = "regex"

# Non-active features handed to a purpose inferrer per scan
MAX_INFERENCES = 30


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass
class AnalysisConfig:
    """Every tunable of graph construction and feature discovery."""

    aliases: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    resolve_extensions: List[str] = field(default_factory=lambda: list(RESOLVE_EXTENSIONS))
    index_files: List[str] = field(default_factory=lambda: list(INDEX_FILES))
    code_extensions: List[str] = field(default_factory=lambda: list(CODE_EXTENSIONS))
    feature_patterns: List[str] = field(default_factory=lambda: list(FEATURE_PATTERNS))
    excluded_patterns: List[str] = field(default_factory=lambda: list(EXCLUDED_PATTERNS))
    entry_patterns: List[str] = field(default_factory=lambda: list(ENTRY_PATTERNS))
    extractor: str = DEFAULT_EXTRACTOR
    max_workers: int = 1

    def is_code_file(self, path: str) -> bool:
        return any(path.endswith(ext) for ext in self.code_extensions)


def compile_patterns(patterns: Iterable[str], label: str = "pattern") -> List[Pattern[str]]:
    """Compile regex strings, reporting the offending entry on failure."""
    compiled: List[Pattern[str]] = []
    for raw in patterns:
        try:
            compiled.append(re.compile(raw))
        except re.error as exc:
            raise ConfigError(f"Invalid {label} {raw!r}: {exc}") from exc
    return compiled
