"""Core module containing configuration and value models."""

from scriptenv.core.config import ScriptEnvConfig, get_config, reload_config
from scriptenv.core.models import (
    BindingSnapshot,
    Metadata,
    ScriptValue,
    VariableEntry,
)

__all__ = [
    "BindingSnapshot",
    "Metadata",
    "ScriptEnvConfig",
    "ScriptValue",
    "VariableEntry",
    "get_config",
    "reload_config",
]
