"""Global configuration for scriptenv.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class ScriptEnvConfig(BaseSettings):
    """scriptenv configuration settings.

    Values can be overridden via environment variables with SCRIPTENV_ prefix.
    Example: SCRIPTENV_SELF_NAME=this makes `Binding.self()` resolve `this`.
    """

    # Well-known names
    self_name: str = Field(
        default="self",
        min_length=1,
        description="Variable name behind Binding.self()",
    )
    context_name: str = Field(
        default="context",
        min_length=1,
        description="Variable name behind Binding.context()",
    )

    # Concurrency
    thread_safe: bool = Field(
        default=True,
        description="Guard each Binding's maps with a re-entrant lock",
    )

    # Snapshots
    max_snapshot_depth: int = Field(
        default=256,
        ge=1,
        le=10000,
        description="Deepest scope chain a snapshot will capture",
    )

    model_config = {
        "env_prefix": "SCRIPTENV_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> ScriptEnvConfig:
    """Get cached configuration instance.

    Returns:
        ScriptEnvConfig singleton instance.
    """
    return ScriptEnvConfig()


def reload_config() -> ScriptEnvConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh ScriptEnvConfig instance.
    """
    get_config.cache_clear()
    return get_config()
