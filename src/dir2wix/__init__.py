"""Directory to WiX harvesting utilities.

This package provides tools for harvesting directory trees into WiX source
fragments whose identifiers are derived from paths, so that regenerating the
fragment for an unchanged tree reproduces it exactly.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dir2wix")
except PackageNotFoundError:
    __version__ = "unknown"
