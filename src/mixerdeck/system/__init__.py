"""System domain package.

This package contains system-level components:
- PathResolver: Path resolution for config, settings and external tools
"""

from mixerdeck.system.path_resolver import PathResolver

__all__ = [
    "PathResolver",
]
