"""
facetsearch - faceted filter and query composition engine.

Registered filter strategies read their values from request parameters,
sanitize them and compose into one structured listing query.
"""

__version__ = "1.0.0"
