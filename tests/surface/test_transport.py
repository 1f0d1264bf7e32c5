"""Tests for the transport protocol and the generated-client adapter."""

from types import SimpleNamespace

from opsynth.surface import GeneratedClientTransport, Transport


class StubApiClient:
    def __init__(self):
        self.configuration = SimpleNamespace(host="http://localhost", debug=False)
        self.default_headers = {}

    def set_default_header(self, name, value):
        self.default_headers[name] = value


def test_adapter_maps_settings_onto_client():
    client = StubApiClient()
    transport = GeneratedClientTransport(client)

    transport.set_base_url("https://api.example.com/v2")
    transport.add_default_header("Authorization", "Bearer t")
    transport.set_debug(True)

    assert client.configuration.host == "https://api.example.com/v2"
    assert client.configuration.debug is True
    assert client.default_headers == {"Authorization": "Bearer t"}


def test_adapter_satisfies_protocol():
    assert isinstance(GeneratedClientTransport(StubApiClient()), Transport)


def test_recording_transport_satisfies_protocol(transport):
    assert isinstance(transport, Transport)
