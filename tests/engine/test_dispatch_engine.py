"""Tests for DispatchEngine lifecycle and the resolve-bind-invoke pipeline."""

import threading

import pytest

from opsynth.engine import DispatchEngine, EngineStatus
from opsynth.errors import (
    InvocationFailed,
    NotInitialized,
    OperationNotFound,
    SurfaceNotFound,
    ValidationError,
)
from opsynth.schemas import RequestDescriptor
from opsynth.surface import LoadedSurface, SurfaceCatalog


class FailingLoader:
    def load(self):
        raise SurfaceNotFound("Generated API package not found")


@pytest.fixture
def engine(loader):
    return DispatchEngine(loader)


@pytest.fixture
def ready_engine(engine):
    engine.build_catalog()
    return engine


class TestLifecycle:

    def test_starts_uninitialized(self, engine):
        assert engine.status == EngineStatus.UNINITIALIZED
        assert engine.state.catalog is None
        assert not engine.state.is_ready

    def test_invoke_before_build(self, engine, transport, list_descriptor):
        """NotInitialized is raised before the transport is touched."""
        with pytest.raises(NotInitialized):
            engine.invoke(list_descriptor)
        assert transport.events == []

    def test_resolve_before_build(self, engine):
        with pytest.raises(NotInitialized):
            engine.resolve("listItems_GET")

    def test_build_transitions_to_ready(self, engine, loader):
        catalog = engine.build_catalog()
        assert engine.status == EngineStatus.READY
        assert engine.state.catalog is catalog
        assert "listItemsGet" in catalog
        assert loader.loads == 1

    def test_rebuild_replaces_catalog(self, engine, loader, transport):
        engine.build_catalog()
        loader.surface = LoadedSurface(
            catalog=SurfaceCatalog.from_callables({"pingGet": lambda: "pong"}),
            transport=transport,
        )
        engine.build_catalog()

        assert engine.state.catalog.names() == ["pingGet"]
        with pytest.raises(OperationNotFound):
            engine.resolve("listItems_GET")

    def test_failed_rebuild_keeps_previous_state(self, loader):
        engine = DispatchEngine(loader)
        engine.build_catalog()
        before = engine.state

        engine._loader = FailingLoader()
        with pytest.raises(SurfaceNotFound):
            engine.build_catalog()
        assert engine.state is before

    def test_failed_first_build_stays_uninitialized(self):
        engine = DispatchEngine(FailingLoader())
        with pytest.raises(SurfaceNotFound):
            engine.build_catalog()
        assert engine.status == EngineStatus.UNINITIALIZED


class TestInvoke:

    def test_list_items(self, ready_engine, transport, list_descriptor):
        result = ready_engine.invoke(list_descriptor)

        assert result == {"items": [{"id": 1}, {"id": 2}]}
        assert transport.base_url == "https://api.example.com"
        assert transport.debug is True

    def test_transport_config_recorded(self, ready_engine, list_descriptor):
        assert ready_engine.state.transport_config is None
        ready_engine.invoke(list_descriptor)
        assert ready_engine.state.transport_config.base_url == "https://api.example.com"

    def test_body_bound_for_method(self, ready_engine, fake_api):
        desc = RequestDescriptor.from_dict({
            "url": "https://api.example.com",
            "operationId": "createItem",
            "method": "post",
            "bodies": {"post": {"x": 1}},
            "body": {"y": 2},
        })
        assert ready_engine.invoke(desc) == {"created": {"x": 1}}
        assert fake_api.calls == [("create_item_post", ({"x": 1},))]

    def test_query_params_bound_by_name(self, ready_engine, transport):
        desc = RequestDescriptor.from_dict({
            "url": "https://api.example.com",
            "operationId": "searchItems",
            "headers": {"Authorization": "Bearer t"},
            "queryParams": {"limit": "10", "q": "lamp"},
        })
        assert ready_engine.invoke(desc) == {"q": "lamp", "limit": "10"}
        assert transport.headers == {"Authorization": "Bearer t"}

    def test_missing_operation_id(self, ready_engine, transport):
        desc = RequestDescriptor(url="https://api.example.com")
        with pytest.raises(ValidationError, match="operationId"):
            ready_engine.invoke(desc)
        assert transport.events == []

    def test_bad_url(self, ready_engine, transport):
        desc = RequestDescriptor(url="not a url", operation_id="listItems")
        with pytest.raises(ValidationError, match="Invalid URL format"):
            ready_engine.invoke(desc)
        assert transport.events == []

    def test_unknown_operation(self, ready_engine, transport):
        desc = RequestDescriptor(url="https://api.example.com", operation_id="totallyMissing")
        with pytest.raises(OperationNotFound) as exc_info:
            ready_engine.invoke(desc)
        assert "listItemsGet" in exc_info.value.available
        assert transport.events == []

    def test_invocation_failure(self, ready_engine):
        desc = RequestDescriptor(url="https://api.example.com", operation_id="broken")
        with pytest.raises(InvocationFailed, match="connection refused"):
            ready_engine.invoke(desc)

    def test_concurrent_calls_do_not_interleave(self, transport):
        """Each call sees its own base URL while it runs."""
        seen = []

        def echo_get():
            seen.append(transport.base_url)
            return transport.base_url

        engine = DispatchEngine(
            _static(SurfaceCatalog.from_callables({"echoGet": echo_get}), transport)
        )
        engine.build_catalog()

        results = {}

        def call(i):
            desc = RequestDescriptor(url=f"https://host{i}.example.com", operation_id="echo")
            results[i] = engine.invoke(desc)

        threads = [threading.Thread(target=call, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {i: f"https://host{i}.example.com" for i in range(8)}


def _static(catalog, transport):
    class Loader:
        def load(self):
            return LoadedSurface(catalog=catalog, transport=transport)

    return Loader()
