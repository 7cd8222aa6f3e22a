"""scriptenv - lexical scope chains for embedded script execution."""

from scriptenv.binding import Binding, BindingError, VariableNotFound
from scriptenv.script import ExecutionContext, Script

__all__ = [
    "Binding",
    "BindingError",
    "ExecutionContext",
    "Script",
    "VariableNotFound",
]
