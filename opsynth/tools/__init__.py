"""Tool adapters for external programs used by opsynth."""

from opsynth.tools.base import ToolAdapter
from opsynth.tools.openapi_generator import OpenApiGeneratorAdapter

__all__ = ["ToolAdapter", "OpenApiGeneratorAdapter"]
