"""
gitvendor - vendor file subsets from git repositories

Provides the sibling cascade orchestrator that re-synchronizes every
vendoring-enabled project under a common root in dependency order.
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
