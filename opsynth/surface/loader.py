"""
SurfaceLoader - load a generated client package into a SurfaceCatalog.

The loader is the seam between the external code generator and the
dispatch engine:
1. Imports the generated package (from a directory, or by installed name)
2. Instantiates Configuration -> ApiClient -> DefaultApi
3. Introspects the API object once into a SurfaceCatalog
4. Wraps the ApiClient as the shared Transport

A package from a previous generation is purged from sys.modules before
import, so a rebuild always sees the freshly generated code.
"""

import importlib
import importlib.util
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Optional, Protocol

from opsynth.errors import SurfaceNotFound
from opsynth.surface.catalog import SurfaceCatalog
from opsynth.surface.transport import GeneratedClientTransport, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedSurface:
    """
    Output of a SurfaceLoader.

    Attributes:
        catalog: Operations discovered on the generated API object
        transport: Shared transport the operations call through
    """
    catalog: SurfaceCatalog
    transport: Transport


class SupportsLoad(Protocol):
    """Anything the DispatchEngine can build its catalog from."""

    def load(self) -> LoadedSurface:
        ...


def _purge_modules(package_name: str) -> None:
    stale = [
        name for name in sys.modules
        if name == package_name or name.startswith(package_name + ".")
    ]
    for name in stale:
        del sys.modules[name]
    importlib.invalidate_caches()


class SurfaceLoader:
    """
    Loader for openapi-generator Python client packages.

    Usage:
        loader = SurfaceLoader("generated_client", search_dir=Path("generated/client"))
        surface = loader.load()
        surface.catalog.names()  # ['listItemsGet', ...]
    """

    def __init__(
        self,
        package_name: str,
        search_dir: Optional[Path] = None,
        api_class: str = "DefaultApi",
        client_class: str = "ApiClient",
        configuration_class: str = "Configuration",
    ):
        """
        Initialize the loader.

        Args:
            package_name: Import name of the generated package
            search_dir: Directory containing the package directory; when None
                        the package is imported from the installed environment
            api_class: Name of the generated API class
            client_class: Name of the generated ApiClient class
            configuration_class: Name of the generated Configuration class
        """
        self.package_name = package_name
        self.search_dir = Path(search_dir) if search_dir is not None else None
        self.api_class = api_class
        self.client_class = client_class
        self.configuration_class = configuration_class

    def _import_package(self) -> ModuleType:
        _purge_modules(self.package_name)

        if self.search_dir is None:
            try:
                return importlib.import_module(self.package_name)
            except ImportError as e:
                raise SurfaceNotFound(
                    f"Generated API package not found: {self.package_name}. "
                    f"Call generate first. ({e})"
                ) from e
            except Exception as e:
                _purge_modules(self.package_name)
                raise SurfaceNotFound(
                    f"Failed to import generated package {self.package_name}: {e}"
                ) from e

        package_dir = self.search_dir / self.package_name
        init_file = package_dir / "__init__.py"
        if not init_file.exists():
            raise SurfaceNotFound(
                f"Generated API package not found at {package_dir}. Call generate first."
            )

        spec = importlib.util.spec_from_file_location(
            self.package_name,
            init_file,
            submodule_search_locations=[str(package_dir)],
        )
        if spec is None or spec.loader is None:
            raise SurfaceNotFound(f"Cannot load generated package from {package_dir}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[self.package_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            _purge_modules(self.package_name)
            raise SurfaceNotFound(
                f"Failed to import generated package {self.package_name}: {e}"
            ) from e
        return module

    def _class(self, module: ModuleType, name: str) -> type:
        cls = getattr(module, name, None)
        if cls is None:
            raise SurfaceNotFound(
                f"Generated package {self.package_name} has no {name}. "
                "Ensure generation completed."
            )
        return cls

    def load(self) -> LoadedSurface:
        """
        Import the generated package and build its catalog.

        Returns:
            LoadedSurface with catalog and transport

        Raises:
            SurfaceNotFound: If the package or one of its classes is missing, or
                             the client cannot be instantiated or introspected
        """
        logger.info(f"Initializing generated API client: {self.package_name}")
        module = self._import_package()

        configuration_cls = self._class(module, self.configuration_class)
        client_cls = self._class(module, self.client_class)
        api_cls = self._class(module, self.api_class)

        try:
            api_client = client_cls(configuration_cls())
            api = api_cls(api_client)
            catalog = SurfaceCatalog.from_object(api)
        except Exception as e:
            raise SurfaceNotFound(
                f"Failed to initialize generated API client {self.package_name}: {e}"
            ) from e

        logger.info(f"API client initialized: {len(catalog)} operations")
        return LoadedSurface(catalog=catalog, transport=GeneratedClientTransport(api_client))
