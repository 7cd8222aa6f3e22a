"""Lexical scope frames for script execution.

A Binding holds the local variables of one lexical level (a function call, a
block, a nested script) plus a link to the enclosing Binding. Lookups walk
outward from the receiver to the root; ordinary writes stay local, and global
writes always land on the root.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, nullcontext

from scriptenv.core.config import get_config
from scriptenv.core.models import Metadata, ScriptValue

logger = logging.getLogger(__name__)


class BindingError(Exception):
    """Base class for scope chain errors."""


class VariableNotFound(BindingError, LookupError):
    """No Binding between the current scope and the root defines a name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown variable: {name}")
        self.name = name


class Binding:
    """One lexical scope frame.

    The parent link is fixed at construction. Several children may share the
    same parent, and a parent never learns about its children, so the chain
    can not form a cycle.
    """

    def __init__(self, parent: Binding | None = None) -> None:
        """Create a scope frame.

        Args:
            parent: The enclosing Binding, or None for the root (global) scope.
        """
        self._parent = parent
        self._variables: dict[str, ScriptValue] = {}
        self._meta: dict[str, Metadata] = {}
        self._lock: AbstractContextManager = (
            threading.RLock() if get_config().thread_safe else nullcontext()
        )

    @classmethod
    def top(cls, self_value: ScriptValue = None) -> Binding:
        """Create a root Binding with `self` already bound.

        Args:
            self_value: The object scripts run against at the top level.

        Returns:
            A new global Binding.
        """
        return cls(None).set(get_config().self_name, self_value)

    @property
    def parent(self) -> Binding | None:
        """The enclosing Binding (None for the root)."""
        return self._parent

    def child(self) -> Binding:
        """Derive a nested scope whose parent is this Binding."""
        return type(self)(self)

    def is_global(self) -> bool:
        return self._parent is None

    def root(self) -> Binding:
        """Return the global Binding at the end of this chain."""
        binding = self
        while binding._parent is not None:
            binding = binding._parent
        return binding

    def depth(self) -> int:
        """Number of ancestors between this Binding and the root (root is 0)."""
        return sum(1 for _ in self.chain()) - 1

    def chain(self) -> Iterator[Binding]:
        """Iterate from this Binding outward to the root."""
        binding: Binding | None = self
        while binding is not None:
            yield binding
            binding = binding._parent

    def self(self) -> ScriptValue:
        """The object the current script runs against.

        Raises:
            VariableNotFound: If no scope in the chain binds `self`.
        """
        return self.get(get_config().self_name)

    def context(self) -> ScriptValue:
        """The execution context bound for control flow.

        Raises:
            VariableNotFound: If no scope in the chain binds the context.
        """
        return self.get(get_config().context_name)

    def get(self, name: str) -> ScriptValue:
        """Resolve a name, nearest scope first.

        Args:
            name: Variable name.

        Returns:
            The value bound in the closest Binding that defines the name.

        Raises:
            VariableNotFound: If neither this Binding nor any ancestor defines it.
        """
        for binding in self.chain():
            with binding._lock:
                if name in binding._variables:
                    return binding._variables[name]
        logger.debug(f"Lookup failed for {name!r} at depth {self.depth()}")
        raise VariableNotFound(name)

    def get_meta(self, name: str) -> Metadata:
        """Return a copy of the metadata attached to a name, nearest scope first.

        Raises:
            VariableNotFound: If no Binding in the chain holds metadata for it.
        """
        for binding in self.chain():
            with binding._lock:
                if name in binding._meta:
                    return dict(binding._meta[name])
        raise VariableNotFound(name)

    def defines(self, name: str) -> bool:
        """Check whether the name is bound locally in this Binding."""
        with self._lock:
            return name in self._variables

    def resolves(self, name: str) -> bool:
        """Check whether `get(name)` would succeed."""
        return any(binding.defines(name) for binding in self.chain())

    def local_names(self) -> list[str]:
        with self._lock:
            return sorted(self._variables)

    def local_items(self) -> list[tuple[str, ScriptValue, Metadata | None]]:
        """Locally bound (name, value, metadata) triples, sorted by name."""
        with self._lock:
            return [
                (name, self._variables[name], dict(self._meta[name]) if name in self._meta else None)
                for name in sorted(self._variables)
            ]

    def visible_names(self) -> list[str]:
        names: set[str] = set()
        for binding in self.chain():
            names.update(binding.local_names())
        return sorted(names)

    def set(self, name: str, value: ScriptValue, meta: Metadata | None = None) -> Binding:
        """Bind a name in this scope only.

        Ancestors are never modified; an outer binding of the same name is
        shadowed from here inward. Supplied metadata replaces any previous
        metadata for the name wholesale. Omitted metadata leaves it as is.

        Args:
            name: Variable name.
            value: Value to bind.
            meta: Optional descriptive attributes for the name.

        Returns:
            This Binding, so calls can be chained.
        """
        with self._lock:
            self._variables[name] = value
            if meta is not None:
                self._meta[name] = dict(meta)
        return self

    def set_global(self, name: str, value: ScriptValue) -> Binding:
        """Bind a name in the root scope, however deep this Binding is.

        Returns:
            The root Binding.
        """
        root = self.root()
        if root is not self:
            logger.debug(f"Global write of {name!r} from depth {self.depth()}")
        return root.set(name, value)

    def __repr__(self) -> str:
        return f"Binding(depth={self.depth()}, names={self.local_names()!r})"
