"""
SurfaceCatalog - explicit registry of generated operations.

The catalog maps operation names to OperationHandles. It is populated by
introspecting the generated API object exactly once and is immutable after
construction; a new generation cycle builds a new catalog instead of
mutating the old one.

Generated Python clients name their methods in snake_case
(list_items_get). Each method is registered under its lowerCamelCase form
(listItemsGet), the convention the resolver's normalized lookup targets.
"""

import inspect
import logging
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping

from opsynth.schemas import OperationHandle, OperationSignature

logger = logging.getLogger(__name__)


def to_catalog_name(attribute: str) -> str:
    """
    Convert a snake_case attribute name to lowerCamelCase.

    Names without underscores are returned unchanged.
    """
    if "_" not in attribute:
        return attribute
    head, *rest = attribute.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest if part)


class SurfaceCatalog(Mapping[str, OperationHandle]):
    """
    Immutable mapping of operation name to OperationHandle.

    Usage:
        catalog = SurfaceCatalog.from_object(default_api)
        handle = catalog["listItemsGet"]

        # Or from plain callables (tests, hand-written surfaces)
        catalog = SurfaceCatalog.from_callables({"listItemsGet": fn})
    """

    def __init__(self, handles: Mapping[str, OperationHandle] | None = None):
        self._handles = MappingProxyType(dict(handles or {}))

    def __getitem__(self, name: str) -> OperationHandle:
        return self._handles[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"SurfaceCatalog(operations={len(self)})"

    def names(self) -> list[str]:
        """All operation names, in registration order."""
        return list(self._handles)

    @classmethod
    def from_callables(cls, callables: Mapping[str, Callable[..., Any]]) -> "SurfaceCatalog":
        """
        Build a catalog from named callables, keeping the names verbatim.

        Args:
            callables: Mapping of operation name to callable
        """
        handles = {
            name: OperationHandle(
                name=name,
                attribute=name,
                signature=OperationSignature.from_callable(name, fn),
                fn=fn,
            )
            for name, fn in callables.items()
        }
        return cls(handles)

    @classmethod
    def from_object(cls, api: Any) -> "SurfaceCatalog":
        """
        Introspect the public bound methods of a generated API object.

        Attributes are visited in sorted order; when two attributes map to
        the same catalog name the first one is kept.

        Args:
            api: Instance of the generated API class (e.g. DefaultApi)
        """
        handles: dict[str, OperationHandle] = {}
        for attribute, fn in inspect.getmembers(api, predicate=inspect.ismethod):
            if attribute.startswith("_"):
                continue
            name = to_catalog_name(attribute)
            if name in handles:
                logger.warning(
                    f"Catalog name collision: {attribute} and "
                    f"{handles[name].attribute} both map to {name}; "
                    f"keeping {handles[name].attribute}"
                )
                continue
            handles[name] = OperationHandle(
                name=name,
                attribute=attribute,
                signature=OperationSignature.from_callable(name, fn),
                fn=fn,
            )

        logger.info(f"Available operations: {', '.join(handles)}")
        return cls(handles)
