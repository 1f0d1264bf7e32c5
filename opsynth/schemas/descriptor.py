"""
RequestDescriptor schema - the loosely-typed call descriptor.

A RequestDescriptor is the caller's generic call specification: target URL,
one or more HTTP methods, headers, query parameters and a body (or one body
per method). It is parsed once from the wire shape and never mutated.

The body is a tagged union:
- NoBody: nothing supplied
- SingleBody: one fallback value used for every method
- PerMethodBody: bodies keyed by lowercase method, with an optional fallback

Rule: when both bodies[m] and body could apply to method m, bodies[m] wins.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from opsynth.errors import ValidationError


URL_PATTERN = re.compile(r"^(https?)://[a-zA-Z0-9.-]+(:[0-9]+)?(/.*)?$")

DEFAULT_METHOD = "get"


@dataclass(frozen=True)
class NoBody:
    """No body supplied."""
    pass


@dataclass(frozen=True)
class SingleBody:
    """A single fallback body applied to every method."""
    value: Any


@dataclass(frozen=True)
class PerMethodBody:
    """
    Bodies keyed by lowercase HTTP method.

    Attributes:
        bodies: Mapping of lowercase method name to body value
        fallback: Used for methods with no entry in bodies
    """
    bodies: Mapping[str, Any] = field(default_factory=dict)
    fallback: Union[NoBody, SingleBody] = field(default_factory=NoBody)


Body = Union[NoBody, SingleBody, PerMethodBody]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, dict, list, tuple)):
        return len(value) == 0
    return False


def select_body(body: Body, method: str) -> Any:
    """
    Select the effective body for a method.

    bodies[method] if present, else the fallback if present and non-empty,
    else None.
    """
    method = method.lower()
    if isinstance(body, PerMethodBody):
        if method in body.bodies:
            return body.bodies[method]
        return select_body(body.fallback, method)
    if isinstance(body, SingleBody):
        return None if _is_empty(body.value) else body.value
    return None


def _string_map(data: Mapping[str, Any], key: str, *aliases: str) -> dict[str, str]:
    raw = None
    for name in (key, *aliases):
        if data.get(name) is not None:
            raw = data[name]
            break
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValidationError(f"'{key}' must be a mapping of string to string")
    return {str(k): "" if v is None else str(v) for k, v in raw.items()}


def _first(data: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if data.get(name) is not None:
            return data[name]
    return None


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Generic call descriptor.

    Attributes:
        url: Absolute http(s) URL of the target API
        http_method: Optional single method
        http_methods: Optional ordered list of methods (superset use case)
        operation_id: Symbolic operation name, required for invocation
        headers: Default headers to apply to the transport
        query_params: Query parameter values, also bound to formal parameters
        body: Body tagged union
    """
    url: Optional[str] = None
    http_method: Optional[str] = None
    http_methods: tuple[str, ...] = ()
    operation_id: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    body: Body = field(default_factory=NoBody)

    @property
    def methods(self) -> list[str]:
        """Lowercase methods to synthesize, in declared order, without duplicates."""
        if self.http_methods:
            candidates = [m.lower() for m in self.http_methods]
        elif self.http_method:
            candidates = [self.http_method.lower()]
        else:
            candidates = [DEFAULT_METHOD]
        return list(dict.fromkeys(candidates))

    @property
    def effective_method(self) -> str:
        """The single method used for invocation."""
        return self.http_method.lower() if self.http_method else DEFAULT_METHOD

    @property
    def effective_operation_id(self) -> str:
        """Operation id as synthesized for the invocation method (e.g. listItems_GET)."""
        if not self.operation_id:
            raise ValidationError("operationId is required")
        return f"{self.operation_id}_{self.effective_method.upper()}"

    def body_for(self, method: str) -> Any:
        return select_body(self.body, method)

    def validate_url(self) -> str:
        """
        Check the URL against the absolute-URL grammar.

        Returns:
            The URL

        Raises:
            ValidationError: If the URL is missing or malformed
        """
        if not self.url:
            raise ValidationError("URL is required")
        if not URL_PATTERN.match(self.url):
            raise ValidationError(
                f"Invalid URL format: {self.url}. Must be a fully qualified URL "
                "(e.g., https://example.com/path)."
            )
        return self.url

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire shape."""
        result: dict[str, Any] = {}
        if self.url is not None:
            result["url"] = self.url
        if self.http_method is not None:
            result["method"] = self.http_method
        if self.http_methods:
            result["methods"] = list(self.http_methods)
        if self.operation_id is not None:
            result["operationId"] = self.operation_id
        if self.headers:
            result["headers"] = dict(self.headers)
        if self.query_params:
            result["queryParams"] = dict(self.query_params)

        body = self.body
        if isinstance(body, PerMethodBody):
            result["bodies"] = dict(body.bodies)
            body = body.fallback
        if isinstance(body, SingleBody):
            result["body"] = body.value
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestDescriptor":
        """
        Parse the loose wire shape.

        camelCase keys are canonical; snake_case aliases are accepted.
        Unknown keys are ignored.

        Raises:
            ValidationError: If a field has the wrong shape
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Descriptor must be a mapping")

        methods = _first(data, "methods", "httpMethods", "http_methods")
        if methods is None:
            methods = []
        if isinstance(methods, str) or not all(isinstance(m, str) for m in methods):
            raise ValidationError("'methods' must be a list of strings")

        method = _first(data, "method", "httpMethod", "http_method")
        if method is not None and not isinstance(method, str):
            raise ValidationError("'method' must be a string")

        operation_id = _first(data, "operationId", "operation_id")
        if operation_id is not None and not isinstance(operation_id, str):
            raise ValidationError("'operationId' must be a string")

        url = data.get("url")
        if url is not None and not isinstance(url, str):
            raise ValidationError("'url' must be a string")

        raw_body = data.get("body")
        fallback: Union[NoBody, SingleBody] = (
            SingleBody(raw_body) if raw_body is not None else NoBody()
        )
        raw_bodies = data.get("bodies")
        body: Body
        if raw_bodies:
            if not isinstance(raw_bodies, Mapping):
                raise ValidationError("'bodies' must be a mapping of method to body")
            body = PerMethodBody(
                bodies={str(k).lower(): v for k, v in raw_bodies.items()},
                fallback=fallback,
            )
        else:
            body = fallback

        return cls(
            url=url,
            http_method=method,
            http_methods=tuple(methods),
            operation_id=operation_id,
            headers=_string_map(data, "headers"),
            query_params=_string_map(data, "queryParams", "query_params"),
            body=body,
        )
