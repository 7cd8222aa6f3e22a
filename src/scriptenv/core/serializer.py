"""Scope chain snapshots.

This module captures a Binding chain into pydantic models, serializes those
to JSON, and rebuilds equivalent chains from them. Parent links are expressed
by nesting: a snapshot of a Binding contains the snapshot of its parent.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from scriptenv.binding import Binding
from scriptenv.core.config import get_config
from scriptenv.core.models import BindingSnapshot, VariableEntry

logger = logging.getLogger(__name__)


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def _validation_details(e: ValidationError) -> str:
    error_details = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err["loc"])
        error_details.append(f"{loc}: {err['msg']}")
    return "; ".join(error_details)


def snapshot(binding: Binding) -> BindingSnapshot:
    """Capture a Binding and all of its ancestors.

    Args:
        binding: The innermost Binding to capture.

    Returns:
        Snapshot of the receiver, with its parent chain nested inside.

    Raises:
        SerializationError: If the chain is deeper than the configured limit
            or holds metadata keys that are not strings.
    """
    frames = list(binding.chain())
    limit = get_config().max_snapshot_depth
    if len(frames) - 1 > limit:
        raise SerializationError(
            message="Scope chain too deep to snapshot",
            details=f"depth {len(frames) - 1} exceeds max_snapshot_depth {limit}",
        )

    captured: BindingSnapshot | None = None
    try:
        for depth, frame in enumerate(reversed(frames)):
            captured = BindingSnapshot(
                depth=depth,
                is_global=frame.is_global(),
                variables=[
                    VariableEntry(name=name, value=value, meta=meta)
                    for name, value, meta in frame.local_items()
                ],
                parent=captured,
            )
    except ValidationError as e:
        raise SerializationError(
            message="Scope chain can't be captured",
            details=_validation_details(e),
        ) from e
    logger.debug(f"Captured snapshot of {len(frames)} scopes")
    return captured


def restore(captured: BindingSnapshot) -> Binding:
    """Rebuild a scope chain from a snapshot.

    Args:
        captured: Snapshot of the innermost scope.

    Returns:
        The innermost Binding of a fresh chain holding the same values and metadata.
    """
    levels = []
    node: BindingSnapshot | None = captured
    while node is not None:
        levels.append(node)
        node = node.parent

    binding: Binding | None = None
    for level in reversed(levels):
        binding = Binding(None) if binding is None else binding.child()
        for entry in level.variables:
            binding.set(entry.name, entry.value, entry.meta)
    logger.debug(f"Restored chain of {len(levels)} scopes")
    return binding


def serialize(binding: Binding) -> str:
    """Serialize a scope chain to a JSON string.

    Args:
        binding: The innermost Binding to serialize.

    Returns:
        JSON string representation of the chain.

    Raises:
        SerializationError: If the chain is too deep or holds values JSON can't represent.
    """
    captured = snapshot(binding)
    try:
        data = captured.model_dump(mode="json")
        return json.dumps(data, indent=2, ensure_ascii=False)
    except Exception as e:
        raise SerializationError(
            message="Failed to serialize scope chain",
            details=str(e),
        ) from e


def deserialize(json_str: str) -> Binding:
    """Deserialize a JSON string into a fresh scope chain.

    Args:
        json_str: JSON produced by `serialize`.

    Returns:
        The innermost Binding of the rebuilt chain.

    Raises:
        SerializationError: If the JSON is malformed or does not describe a valid chain.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    except Exception as e:
        raise SerializationError(
            message="Failed to deserialize scope chain",
            details=str(e),
        ) from e
    return deserialize_from_dict(data)


def deserialize_from_dict(data: dict[str, Any]) -> Binding:
    """Rebuild a scope chain from a dictionary.

    Raises:
        SerializationError: If the data does not describe a valid chain.
    """
    try:
        captured = BindingSnapshot.model_validate(data)
        return restore(captured)
    except ValidationError as e:
        raise SerializationError(
            message="Snapshot validation failed",
            details=_validation_details(e),
        ) from e
    except Exception as e:
        raise SerializationError(
            message="Failed to deserialize scope chain",
            details=str(e),
        ) from e
