"""
Schema inference - map runtime values to OpenAPI type tags.

Type tags:
- bool -> boolean (checked before int; bool is an int subclass)
- int -> integer
- float -> number
- str -> string
- list/tuple -> array
- mapping, None and anything else -> object
"""

from typing import Any, Mapping


def infer_type(value: Any) -> str:
    """Map a runtime value to a primitive/structural type tag."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return "object"


def infer_schema(value: Any) -> dict[str, Any]:
    """
    Infer a schema for a value.

    Mappings yield {type: object, properties: {...}} with keys sorted;
    nested mappings recurse. Non-empty arrays carry items inferred from
    their first element. Everything else yields {type: <tag>}.
    """
    if isinstance(value, Mapping):
        properties = {
            str(key): infer_schema(value[key])
            for key in sorted(value, key=str)
        }
        return {"type": "object", "properties": properties}

    schema: dict[str, Any] = {"type": infer_type(value)}
    if isinstance(value, (list, tuple)) and value:
        schema["items"] = infer_schema(value[0])
    return schema
