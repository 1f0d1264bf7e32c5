"""
Operation signature schemas - derived from the loaded surface.

An OperationSignature is computed once per callable when the catalog is
built, never per call. Only positional parameters are recorded because
invocation is positional. Underscore-prefixed parameters are per-call
options of the generated client (_request_timeout, _host_index) and keep
their defaults.
"""

import inspect
from dataclasses import dataclass
from typing import Annotated, Any, Callable, get_args, get_origin

PRIMITIVE_TYPES = (bool, int, float)
PRIMITIVE_NAMES = frozenset({"bool", "int", "float"})

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def is_primitive_annotation(annotation: Any) -> bool:
    """
    Whether an annotation denotes a non-nullable scalar.

    Annotated[...] wrappers (e.g. pydantic StrictInt) are unwrapped;
    Optional[...] is never primitive.
    """
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    if isinstance(annotation, str):
        return annotation in PRIMITIVE_NAMES
    return isinstance(annotation, type) and issubclass(annotation, PRIMITIVE_TYPES)


@dataclass(frozen=True)
class FormalParameter:
    """A formal parameter of a generated operation."""
    name: str
    primitive: bool = False


@dataclass(frozen=True)
class OperationSignature:
    """
    Name and ordered formal parameters of an operation.

    Attributes:
        name: Catalog name of the operation
        parameters: Positional parameters in declared order
    """
    name: str
    parameters: tuple[FormalParameter, ...] = ()

    @property
    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]

    @classmethod
    def from_callable(cls, name: str, fn: Callable[..., Any]) -> "OperationSignature":
        """
        Introspect a callable (bound methods exclude self).

        Raises:
            TypeError: If the callable has no introspectable signature
        """
        try:
            sig = inspect.signature(fn)
        except ValueError as e:
            raise TypeError(f"Cannot introspect {name}: {e}")

        params = tuple(
            FormalParameter(name=p.name, primitive=is_primitive_annotation(p.annotation))
            for p in sig.parameters.values()
            if p.kind in _POSITIONAL_KINDS and not p.name.startswith("_")
        )
        return cls(name=name, parameters=params)


@dataclass(frozen=True)
class OperationHandle:
    """
    Invocable handle registered in the SurfaceCatalog.

    Attributes:
        name: Catalog name (the name operation ids are resolved against)
        attribute: Attribute name on the generated API object
        signature: Signature computed at catalog build
        fn: The bound callable
    """
    name: str
    attribute: str
    signature: OperationSignature
    fn: Callable[..., Any]
