"""
facetsearch command-line interface.
"""

from facetsearch import __version__

__all__ = ["__version__"]
