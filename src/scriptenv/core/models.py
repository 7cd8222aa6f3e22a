"""Value and snapshot models for scope chains.

Host values are opaque to this layer: the execution context decides what a
script value is, and Bindings store whatever it hands over. The pydantic
models below describe a captured scope chain for inspection and persistence.

`ScriptValue` is deliberately left open. The set of value kinds belongs to the
host object model, which supplies `self`, builtins and every value a script
produces; a closed union here would have to mirror that model and change with
it. Only the JSON form of a snapshot constrains values, and `serialize`
reports anything it can't represent as a `SerializationError`.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

ScriptValue = Any
Metadata = dict[str, ScriptValue]


class VariableEntry(BaseModel):
    """One locally bound variable."""

    name: str = Field(..., description="Variable name")
    value: Any = Field(None, description="Bound value")
    meta: Optional[dict[str, Any]] = Field(None, description="Descriptive attributes, if any")


class BindingSnapshot(BaseModel):
    """Captured state of a Binding and, recursively, its ancestors."""

    depth: int = Field(..., ge=0, description="Number of ancestors (root is 0)")
    is_global: bool
    variables: list[VariableEntry] = Field(default_factory=list)
    parent: Optional[BindingSnapshot] = None

    @model_validator(mode="after")
    def _check_chain_shape(self) -> BindingSnapshot:
        if self.is_global != (self.parent is None):
            raise ValueError("exactly the parentless scope is global")
        expected = 0 if self.parent is None else self.parent.depth + 1
        if self.depth != expected:
            raise ValueError(f"depth {self.depth} does not match chain (expected {expected})")
        return self

    def scope_count(self) -> int:
        """Number of scopes in the captured chain."""
        count = 1
        node = self.parent
        while node is not None:
            count += 1
            node = node.parent
        return count


BindingSnapshot.model_rebuild()
