"""
opsynth.schemas - Value types shared by synthesis and dispatch.

RequestDescriptor -> (synthesis) document -> (generator) surface
    -> OperationSignature / OperationHandle -> (dispatch) result

- RequestDescriptor: the caller's generic call specification
- Body (NoBody | SingleBody | PerMethodBody): body tagged union
- OperationSignature: ordered formal parameters of a generated operation
- OperationHandle: invocable catalog entry
"""

from .descriptor import (
    Body,
    NoBody,
    PerMethodBody,
    RequestDescriptor,
    SingleBody,
    URL_PATTERN,
    select_body,
)
from .signature import (
    FormalParameter,
    OperationHandle,
    OperationSignature,
    is_primitive_annotation,
)

__all__ = [
    "Body",
    "NoBody",
    "PerMethodBody",
    "RequestDescriptor",
    "SingleBody",
    "URL_PATTERN",
    "select_body",
    "FormalParameter",
    "OperationHandle",
    "OperationSignature",
    "is_primitive_annotation",
]
