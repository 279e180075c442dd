"""
Shared helpers.
"""

from .retry import RetryError, RetryPolicy

__all__ = [
    "RetryError",
    "RetryPolicy",
]
