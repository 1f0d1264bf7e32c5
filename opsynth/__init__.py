"""
opsynth - Operation synthesis and dynamic dispatch

Turns a generic call descriptor into an OpenAPI surface document for an
external code generator, and dispatches calls to the generated client.
"""

__version__ = "0.1.0"


__all__ = ["OpsynthConfig", "load_config", "get_opsynth_home"]

from .config import OpsynthConfig, load_config, get_opsynth_home
