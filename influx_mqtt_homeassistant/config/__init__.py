"""
Environment-based configuration.
"""

from .loader import ConfigLoader
from .schema import Config, ConfigError, FailurePolicy

__all__ = [
    "Config",
    "ConfigError",
    "ConfigLoader",
    "FailurePolicy",
]
