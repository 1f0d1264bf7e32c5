"""Tests for SurfaceCatalog construction."""

import pytest

from opsynth.surface import SurfaceCatalog, to_catalog_name


class TestToCatalogName:

    @pytest.mark.parametrize("attribute, expected", [
        ("list_items_get", "listItemsGet"),
        ("ping", "ping"),
        ("listItemsGet", "listItemsGet"),
        ("create__item_post", "createItemPost"),
    ])
    def test_names(self, attribute, expected):
        assert to_catalog_name(attribute) == expected


class TestFromObject:

    def test_public_methods_registered_in_camel_case(self, catalog):
        assert catalog.names() == [
            "brokenGet",
            "createItemPost",
            "listItemsGet",
            "searchItemsGet",
        ]

    def test_private_methods_skipped(self, catalog):
        assert "privateHelper" not in catalog
        assert "_privateHelper" not in catalog

    def test_handle_records_attribute_and_signature(self, catalog, fake_api):
        handle = catalog["searchItemsGet"]
        assert handle.attribute == "search_items_get"
        assert handle.signature.parameter_names == ["q", "limit"]
        assert handle.fn("a", 1) == {"q": "a", "limit": 1}
        assert fake_api.calls == [("search_items_get", ("a", 1))]

    def test_collision_keeps_first(self):
        class Api:
            def list_items(self):
                return "snake"

            def listItems(self):
                return "camel"

        catalog = SurfaceCatalog.from_object(Api())
        assert len(catalog) == 1
        # getmembers sorts by name: "listItems" < "list_items"
        assert catalog["listItems"].attribute == "listItems"


class TestImmutability:

    def test_cannot_assign(self, catalog):
        with pytest.raises(TypeError):
            catalog["new"] = None

    def test_source_mapping_changes_do_not_leak(self):
        callables = {"ping": lambda: "pong"}
        catalog = SurfaceCatalog.from_callables(callables)
        callables["other"] = lambda: None
        assert catalog.names() == ["ping"]

    def test_mapping_protocol(self):
        catalog = SurfaceCatalog.from_callables({"a": lambda: 1, "b": lambda x: x})
        assert len(catalog) == 2
        assert list(catalog) == ["a", "b"]
        assert catalog.get("missing") is None
        assert catalog["b"].signature.parameter_names == ["x"]
