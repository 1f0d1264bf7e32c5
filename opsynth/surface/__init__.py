"""
Surface module for opsynth.

This module turns a generated client package into what the dispatch
engine consumes:
1. SurfaceCatalog - immutable registry of named, introspected operations
2. Transport - the shared client settings are applied through
3. SurfaceLoader - imports the generated package and builds both
"""

from opsynth.surface.catalog import SurfaceCatalog, to_catalog_name
from opsynth.surface.loader import LoadedSurface, SupportsLoad, SurfaceLoader
from opsynth.surface.transport import GeneratedClientTransport, Transport

__all__ = [
    "SurfaceCatalog",
    "to_catalog_name",
    "LoadedSurface",
    "SupportsLoad",
    "SurfaceLoader",
    "GeneratedClientTransport",
    "Transport",
]
