"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for state
managers.

Usage:
    from turnstate.config import StateSettings

    # Load from environment variables (TURNSTATE_*)
    settings = StateSettings()

    # Or override with explicit values
    settings = StateSettings(fingerprint_algorithm="blake2b")
"""

from __future__ import annotations

import hashlib

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StateSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for state managers.

    Attributes:
        fingerprint_algorithm: hashlib algorithm used to fingerprint documents.

    Environment Variables:
        TURNSTATE_FINGERPRINT_ALGORITHM
    """

    model_config = SettingsConfigDict(
        env_prefix="TURNSTATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fingerprint_algorithm: str = "sha256"

    @field_validator("fingerprint_algorithm")
    @classmethod
    def validate_fingerprint_algorithm(cls, value: str) -> str:
        algorithm = value.strip().lower()
        # shake digests need an explicit length
        if algorithm not in hashlib.algorithms_available or algorithm.startswith("shake_"):
            raise ValueError(f"unknown hash algorithm: {value!r}")
        return algorithm
