"""
Utility functions for Release Tour.
"""
from releasetour.utils.rwlock import ReadWriteLock

__all__ = [
    "ReadWriteLock",
]
