"""
Argument binder - map descriptor fields onto an operation's formal parameters.

For each formal parameter, in declared order:
- a parameter named "body" receives the body selected for the HTTP method
  (bodies[method], else a non-empty fallback body, else None)
- any other parameter receives queryParams[name] by exact name, else None

Binding never fails. A non-primitive parameter left as None produces a
BindingWarning; primitive parameters never warn. The output order matches
the signature exactly because invocation is positional.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from opsynth.schemas import OperationSignature, RequestDescriptor

logger = logging.getLogger(__name__)


BODY_PARAMETER = "body"


@dataclass(frozen=True)
class BindingWarning:
    """Non-fatal diagnostic about a parameter that could not be bound."""
    parameter: str
    reason: str = "missing"

    def __str__(self) -> str:
        return f"{self.reason.capitalize()} parameter: {self.parameter}"


@dataclass(frozen=True)
class BoundArguments:
    """
    Ordered positional arguments plus the warnings raised while binding.

    Attributes:
        args: One value per formal parameter, in declared order
        warnings: BindingWarnings for absent non-primitive parameters
    """
    args: tuple[Any, ...] = ()
    warnings: tuple[BindingWarning, ...] = field(default_factory=tuple)


def is_body_parameter(name: str) -> bool:
    return name.lower() == BODY_PARAMETER


def bind_arguments(
    signature: OperationSignature,
    descriptor: RequestDescriptor,
    http_method: str,
) -> BoundArguments:
    """
    Bind descriptor fields to a signature's formal parameters.

    Args:
        signature: Signature of the resolved operation
        descriptor: The request descriptor
        http_method: Method the body is selected for (case-insensitive)

    Returns:
        BoundArguments in the signature's declared order
    """
    args: list[Any] = []
    warnings: list[BindingWarning] = []

    for param in signature.parameters:
        if is_body_parameter(param.name):
            value = descriptor.body_for(http_method)
        else:
            value = descriptor.query_params.get(param.name)
        logger.debug(f"Mapping parameter {param.name} to value: {value!r}")

        if value is None and not param.primitive:
            warning = BindingWarning(parameter=param.name)
            logger.warning(str(warning), extra={"parameter": param.name})
            warnings.append(warning)
        args.append(value)

    return BoundArguments(args=tuple(args), warnings=tuple(warnings))
