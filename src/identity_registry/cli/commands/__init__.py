"""CLI command modules for the identity registry.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import config_cmd, identity
from .config_cmd import cmd_config
from .identity import cmd_details, cmd_events, cmd_lookup

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    identity,
    config_cmd,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_config",
    "cmd_details",
    "cmd_events",
    "cmd_lookup",
]
