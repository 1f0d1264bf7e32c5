"""
DispatchEngine - resolve, bind and invoke generated operations.

Lifecycle:
    UNINITIALIZED --build_catalog()--> READY --build_catalog()--> READY

From READY, invoke(descriptor) runs Resolve -> Bind -> Invoke any number of
times without a state transition. invoke() while UNINITIALIZED raises
NotInitialized before touching the transport.

Concurrency:
- EngineState is an immutable value swapped wholesale by build_catalog();
  readers take a snapshot reference and never block on a rebuild
- The transport is shared and mutated in place, so the
  configure-and-call sequence is serialized through a single lock
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from opsynth.engine.binder import bind_arguments
from opsynth.engine.invoker import TransportConfig, invoke
from opsynth.engine.resolver import resolve_operation
from opsynth.errors import NotInitialized
from opsynth.schemas import OperationHandle, RequestDescriptor
from opsynth.surface import SupportsLoad, SurfaceCatalog, Transport

logger = logging.getLogger(__name__)


class EngineStatus(str, Enum):
    """Lifecycle status of a DispatchEngine."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass(frozen=True)
class EngineState:
    """
    Snapshot of the engine.

    Attributes:
        status: Lifecycle status
        catalog: Current surface catalog (None until built)
        transport: Shared transport of the loaded surface (None until built)
        transport_config: Last TransportConfig applied (None until first call)
    """
    status: EngineStatus = EngineStatus.UNINITIALIZED
    catalog: Optional[SurfaceCatalog] = None
    transport: Optional[Transport] = None
    transport_config: Optional[TransportConfig] = None

    @property
    def is_ready(self) -> bool:
        return (
            self.status == EngineStatus.READY
            and self.catalog is not None
            and self.transport is not None
        )


class DispatchEngine:
    """
    Orchestrates OperationResolver, ArgumentBinder and Invoker.

    Usage:
        engine = DispatchEngine(SurfaceLoader("generated_client", search_dir=out))
        engine.build_catalog()
        result = engine.invoke(RequestDescriptor.from_dict({...}))
    """

    def __init__(self, loader: SupportsLoad):
        """
        Initialize an engine in the UNINITIALIZED state.

        Args:
            loader: Source of the catalog and transport (e.g. SurfaceLoader)
        """
        self._loader = loader
        self._state = EngineState()
        self._rebuild_lock = threading.Lock()
        self._call_lock = threading.Lock()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def status(self) -> EngineStatus:
        return self._state.status

    def build_catalog(self) -> SurfaceCatalog:
        """
        Load the surface and transition to READY.

        Replaces any prior catalog and transport wholesale. On failure the
        previous state is left untouched.

        Returns:
            The new catalog

        Raises:
            SurfaceNotFound: If the generated surface cannot be loaded
        """
        with self._rebuild_lock:
            surface = self._loader.load()
            self._state = EngineState(
                status=EngineStatus.READY,
                catalog=surface.catalog,
                transport=surface.transport,
            )
        logger.info(f"Surface catalog built: {len(surface.catalog)} operations")
        return surface.catalog

    def resolve(self, operation_id: str) -> OperationHandle:
        """
        Resolve an operation id against the current catalog.

        Raises:
            NotInitialized: If no catalog has been built
            OperationNotFound: If the id matches nothing
        """
        state = self._state
        if not state.is_ready:
            raise NotInitialized()
        return resolve_operation(operation_id, state.catalog)

    def invoke(self, descriptor: RequestDescriptor) -> Any:
        """
        Resolve, bind and invoke the operation a descriptor names.

        The resolved id is the descriptor's operationId suffixed with its
        upper-cased method (listItems + GET -> listItems_GET).

        Args:
            descriptor: Request descriptor with url and operationId

        Returns:
            Canonicalized result of the call

        Raises:
            NotInitialized: If build_catalog() has not succeeded
            ValidationError: If operationId or url is missing or malformed
            OperationNotFound: If resolution exhausts both phases
            InvocationFailed: If the underlying call raises
        """
        state = self._state
        if not state.is_ready:
            logger.error("API client not generated. Call generate first.")
            raise NotInitialized()

        operation_id = descriptor.effective_operation_id
        config = TransportConfig.from_descriptor(descriptor)
        method = descriptor.effective_method
        logger.info(
            f"Request URL: {config.base_url}, OperationId: {operation_id}, "
            f"HTTP Method: {method.upper()}"
        )

        handle = resolve_operation(operation_id, state.catalog)
        bound = bind_arguments(handle.signature, descriptor, method)

        with self._call_lock:
            with self._rebuild_lock:
                if self._state.transport is state.transport:
                    self._state = replace(self._state, transport_config=config)
            result = invoke(
                handle,
                bound.args,
                state.transport,
                config,
                query_params=descriptor.query_params,
            )

        logger.info(f"API call successful for operation: {operation_id}")
        return result
