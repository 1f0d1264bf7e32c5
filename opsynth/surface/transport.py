"""
Transport boundary - the shared client object generated operations call through.

The Invoker only needs three settings on the transport: base URL, default
headers and the debug flag. GeneratedClientTransport maps them onto an
openapi-generator Python ApiClient and its Configuration.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for the shared transport of a loaded surface.

    Implementations:
    - GeneratedClientTransport: wraps a generated ApiClient
    - Test doubles recording the applied settings
    """

    def set_base_url(self, url: str) -> None:
        """Set the base URL every operation is resolved against."""
        ...

    def add_default_header(self, name: str, value: str) -> None:
        """Add a header sent with every request."""
        ...

    def set_debug(self, enabled: bool) -> None:
        """Toggle verbose request/response logging."""
        ...


class GeneratedClientTransport:
    """
    Transport adapter around an openapi-generator Python ApiClient.

    Args:
        api_client: The generated ApiClient instance shared by the API object
    """

    def __init__(self, api_client: Any):
        self.api_client = api_client

    @property
    def configuration(self) -> Any:
        return self.api_client.configuration

    def set_base_url(self, url: str) -> None:
        self.configuration.host = url

    def add_default_header(self, name: str, value: str) -> None:
        self.api_client.set_default_header(name, value)

    def set_debug(self, enabled: bool) -> None:
        self.configuration.debug = enabled

    def __repr__(self) -> str:
        return f"GeneratedClientTransport(client={type(self.api_client).__name__})"
