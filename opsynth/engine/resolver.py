"""
Operation resolver - map a symbolic operation id to one catalog handle.

Descriptors encode operation ids as <name>_<METHOD> (listItems_GET) while the
generated surface names operations in camelCase (listItemsGet). Resolution
bridges the two in two phases:

1. Case-insensitive exact match of the id against every catalog name
2. Only if phase 1 finds nothing: normalize the id to camelCase and match
   again, case-insensitively

Resolution is a pure function of (operation_id, catalog). It never returns
an arbitrary close match; exhausting both phases raises OperationNotFound.
"""

import logging
from typing import Optional

from opsynth.errors import OperationNotFound
from opsynth.schemas import OperationHandle
from opsynth.surface import SurfaceCatalog

logger = logging.getLogger(__name__)


def normalize_operation_id(operation_id: str) -> str:
    """
    Transform <name>_<METHOD> into camelCase.

    Segment 0 is kept unchanged; every later non-empty segment gets its
    first character upper-cased and the rest lower-cased. Ids with fewer
    than two segments are returned unchanged.

    Examples:
        listItems_GET -> listItemsGet
        get_user_by_ID -> getUserById
        listItems -> listItems
    """
    parts = operation_id.split("_")
    if len(parts) < 2:
        return operation_id
    return parts[0] + "".join(
        part[:1].upper() + part[1:].lower() for part in parts[1:] if part
    )


def _match(operation_id: str, catalog: SurfaceCatalog) -> Optional[OperationHandle]:
    wanted = operation_id.lower()
    for name in catalog:
        if name.lower() == wanted:
            return catalog[name]
    return None


def resolve_operation(operation_id: str, catalog: SurfaceCatalog) -> OperationHandle:
    """
    Resolve an operation id against a catalog.

    Args:
        operation_id: Symbolic id from the descriptor (e.g. listItems_GET)
        catalog: The current surface catalog

    Returns:
        The matching OperationHandle

    Raises:
        OperationNotFound: If neither phase matches; carries all catalog names
    """
    logger.info(f"Looking for method with operationId: {operation_id}")

    handle = _match(operation_id, catalog)
    if handle is not None:
        logger.info(f"Found method: {handle.name}")
        return handle

    normalized = normalize_operation_id(operation_id)
    handle = _match(normalized, catalog)
    if handle is not None:
        logger.info(f"Found method (camelCase): {handle.name}")
        return handle

    logger.error(f"No method found for operationId: {operation_id} or camelCase: {normalized}")
    raise OperationNotFound(operation_id, catalog.names())
