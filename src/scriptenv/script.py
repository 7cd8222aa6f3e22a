"""Script execution facade.

A Script pairs one Binding with the execution context that drives it, for the
duration of one execution. It holds no state of its own beyond those two.
"""

from __future__ import annotations

from typing import Protocol

from scriptenv.binding import Binding
from scriptenv.core.config import get_config
from scriptenv.core.models import ScriptValue


class ExecutionContext(Protocol):
    """Opaque collaborator that evaluates script statements."""


class Script:
    """One execution's view of its scope chain."""

    def __init__(self, binding: Binding, context: ExecutionContext | None = None) -> None:
        """Create a script.

        Args:
            binding: The Binding this script executes against.
            context: Execution context supplied by the caller.
        """
        self._binding = binding
        self._context = context

    @classmethod
    def build(
        cls,
        self_value: ScriptValue = None,
        context: ExecutionContext | None = None,
    ) -> Script:
        """Create a script over a fresh global Binding."""
        return cls(Binding.top(self_value), context)

    @property
    def binding(self) -> Binding:
        return self._binding

    @property
    def context(self) -> ExecutionContext | None:
        return self._context

    def get_binding(self) -> Binding:
        """Access the Binding, for the execution context to pass values in and out."""
        return self._binding

    def self(self) -> ScriptValue:
        return self._binding.self()

    def get(self, name: str) -> ScriptValue:
        return self._binding.get(name)

    def set(self, name: str, value: ScriptValue) -> ScriptValue:
        """Bind a name locally and return the value written."""
        self._binding.set(name, value)
        return value

    def set_global(self, name: str, value: ScriptValue) -> ScriptValue:
        """Bind a name in the root scope and return the value written."""
        self._binding.set_global(name, value)
        return value

    def child(
        self,
        *,
        lexical: bool = False,
        context: ExecutionContext | None = None,
        self_value: ScriptValue = None,
    ) -> Script:
        """Derive a script for a nested execution.

        Args:
            lexical: If True, run in a new child scope with `context` and
                `self` bound in it; otherwise share the current Binding.
            context: Context for the nested script (defaults to this one's).
            self_value: Receiver for a lexical child (defaults to this one's).

        Returns:
            A new Script.
        """
        context = self._context if context is None else context
        if not lexical:
            return Script(self._binding, context)

        if self_value is None:
            self_value = self.self()
        config = get_config()
        binding = (
            self._binding.child()
            .set(config.context_name, context)
            .set(config.self_name, self_value)
        )
        return Script(binding, context)
