"""Configuration enums for type-safe settings.

They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class LogFormat(str, Enum):
    """Log record rendering.

    TEXT is meant for terminals, JSON for log shippers.
    """

    TEXT = "text"
    JSON = "json"
