"""
depbump version information.

This module provides a single source of truth for the package version.
It follows Semantic Versioning: https://semver.org/
"""

__version__ = "0.3.0"
