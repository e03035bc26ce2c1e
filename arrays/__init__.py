"""
arrays/
-------
Data layer.  Public API:

    from arrays import DataSource
"""

from arrays.source import DataSource, MIN_VALUE, MAX_VALUE

__all__ = [
    "DataSource",
    "MIN_VALUE",
    "MAX_VALUE",
]
