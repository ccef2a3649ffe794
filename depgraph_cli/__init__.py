"""DepGraph CLI: import graph, impact analysis, and orphaned-feature discovery."""

__version__ = "0.1.0"
