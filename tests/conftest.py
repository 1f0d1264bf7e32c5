import pytest

from opsynth.schemas import RequestDescriptor
from opsynth.surface import LoadedSurface, SurfaceCatalog


class RecordingTransport:
    """Transport double that records every applied setting."""

    def __init__(self, failing_headers=()):
        self.base_url = None
        self.debug = False
        self.headers = {}
        self.events = []
        self._failing_headers = set(failing_headers)

    def set_base_url(self, url):
        self.events.append(("base_url", url))
        self.base_url = url

    def add_default_header(self, name, value):
        self.events.append(("header", name))
        if name in self._failing_headers:
            raise RuntimeError(f"rejected header {name}")
        self.headers[name] = value

    def set_debug(self, enabled):
        self.events.append(("debug", enabled))
        self.debug = enabled


class FakeApi:
    """Stand-in for a generated DefaultApi with snake_case operations."""

    def __init__(self):
        self.calls = []

    def list_items_get(self):
        self.calls.append(("list_items_get", ()))
        return {"items": [{"id": 1}, {"id": 2}]}

    def create_item_post(self, body):
        self.calls.append(("create_item_post", (body,)))
        return {"created": body}

    def search_items_get(self, q: str, limit: int):
        self.calls.append(("search_items_get", (q, limit)))
        return {"q": q, "limit": limit}

    def broken_get(self):
        try:
            raise ConnectionError("connection refused")
        except ConnectionError as e:
            raise RuntimeError("request failed") from e

    def _private_helper(self):
        return "hidden"


class StaticLoader:
    """Loader double returning a prepared surface; counts loads."""

    def __init__(self, surface):
        self.surface = surface
        self.loads = 0

    def load(self):
        self.loads += 1
        return self.surface


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Never read the real ~/.config/opsynth."""
    home = tmp_path / "opsynth_home"
    monkeypatch.setenv("OPSYNTH_HOME", str(home))
    return home


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def make_transport():
    return RecordingTransport


@pytest.fixture
def transport(make_transport):
    return make_transport()


@pytest.fixture
def catalog(fake_api):
    return SurfaceCatalog.from_object(fake_api)


@pytest.fixture
def loader(catalog, transport):
    return StaticLoader(LoadedSurface(catalog=catalog, transport=transport))


@pytest.fixture
def list_descriptor():
    return RequestDescriptor.from_dict({
        "url": "https://api.example.com",
        "operationId": "listItems",
        "method": "GET",
    })
