"""Adapters — bindings for the external tools steps delegate to.

Public re-exports for convenient access.
"""

from devbootstrap.adapters.base import Adapter, ExecutionContext
from devbootstrap.adapters.mock import MockAdapter
from devbootstrap.adapters.runner import CommandRunner, default_adapters

__all__ = [
    "Adapter",
    "CommandRunner",
    "ExecutionContext",
    "MockAdapter",
    "default_adapters",
]
