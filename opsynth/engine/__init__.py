"""
Dispatch engine module for opsynth.

This module provides the runtime half of opsynth:
1. Resolves a descriptor's operation id against the surface catalog
2. Binds descriptor fields to the operation's formal parameters
3. Configures the shared transport, invokes, canonicalizes the result
"""

from opsynth.engine.binder import BindingWarning, BoundArguments, bind_arguments
from opsynth.engine.dispatch import DispatchEngine, EngineState, EngineStatus
from opsynth.engine.invoker import (
    TransportConfig,
    apply_transport,
    canonicalize,
    invoke,
    root_cause_message,
)
from opsynth.engine.resolver import normalize_operation_id, resolve_operation

__all__ = [
    "BindingWarning",
    "BoundArguments",
    "bind_arguments",
    "DispatchEngine",
    "EngineState",
    "EngineStatus",
    "TransportConfig",
    "apply_transport",
    "canonicalize",
    "invoke",
    "root_cause_message",
    "normalize_operation_id",
    "resolve_operation",
]
