"""Configuration module using Pydantic Settings.

Usage:
    from turnstate.config import StateSettings

    settings = StateSettings(fingerprint_algorithm="sha256")
"""

from turnstate.config.settings import StateSettings

__all__ = [
    "StateSettings",
]
