"""
Synthesis - turn a RequestDescriptor into an OpenAPI surface document.
"""

from opsynth.synthesis.inference import infer_schema, infer_type
from opsynth.synthesis.synthesizer import (
    build_document,
    render_document,
    synthesize,
    write_document,
)

__all__ = [
    "infer_schema",
    "infer_type",
    "build_document",
    "render_document",
    "synthesize",
    "write_document",
]
