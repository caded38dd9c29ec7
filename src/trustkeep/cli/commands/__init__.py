"""CLI command modules for TrustKeep.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import trust
from .trust import cmd_add, cmd_list, cmd_remove, cmd_shell

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    trust,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_add",
    "cmd_list",
    "cmd_remove",
    "cmd_shell",
]
