# -*- coding: utf-8 -*-
"""
test_crud

Model-driven CRUD engine: configuration defaults, routes and write paths.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from adminui.conf import AdminUISettings
from adminui.core.crud import ModelAdmin, ModelConfig
from adminui.core.exceptions import ConfigurationError
from adminui.core.handlers import Callback
from adminui.core.services.importer import ImportService
from adminui.core.site import AdminSite
from tests.fakes import admin_guard, build_app, invoice_adapter


class RecordingImporter(ImportService):
    """Import collaborator returning ``count`` fake records."""

    def __init__(self, count: int) -> None:
        self.count = count
        self.calls: List[tuple[str, Path, dict]] = []
        self.existed: List[bool] = []
        self.contents: List[bytes] = []

    async def import_file_to_model(
        self, model_name: str, file_path, options: Mapping[str, Any]
    ) -> List[Any]:
        path = Path(file_path)
        self.calls.append((model_name, path, dict(options)))
        self.existed.append(path.exists())
        self.contents.append(path.read_bytes())
        return [object() for _ in range(self.count)]


class InvoiceConfig:
    """Config object computed at construction time."""

    def resolve_config(self) -> ModelConfig:
        return ModelConfig(model="invoice", display=("number", "paid"))


def _site(settings: AdminUISettings) -> AdminSite:
    return AdminSite(settings=settings, guard=admin_guard())


class TestModelConfig:
    """Derived defaults and construction-time validation."""

    def test_defaults_from_model_name(self) -> None:
        config = ModelConfig(model="testModel").resolved()
        assert config.base == "/testmodels"
        assert config.display_name == "Test Model"
        assert config.template_prefix == "admin-test-model"
        assert config.ignore == ("created_at", "updated_at")
        assert config.plural_name == "Test Models"

    def test_explicit_values_kept(self) -> None:
        config = ModelConfig(model="invoice", base="/bills", display_name="Bill").resolved()
        assert config.base == "/bills"
        assert config.display_name == "Bill"

    def test_missing_model_rejected(self, settings) -> None:
        with pytest.raises(ConfigurationError):
            ModelAdmin(_site(settings), ModelConfig(), adapter=invoice_adapter())

    def test_unsupported_config_rejected(self, settings) -> None:
        with pytest.raises(ConfigurationError):
            ModelAdmin(_site(settings), object(), adapter=invoice_adapter())  # type: ignore[arg-type]

    def test_resolver_capability(self, settings) -> None:
        admin = ModelAdmin(_site(settings), InvoiceConfig(), adapter=invoice_adapter())
        assert admin.config.display == ("number", "paid")
        assert admin.list_url == "/admin/invoices"


class TestRouteRegistration:
    """Exactly the documented endpoints are bound."""

    def test_invoice_routes(self, settings) -> None:
        site = _site(settings)
        admin = ModelAdmin(site, ModelConfig(model="invoice"), adapter=invoice_adapter())
        pages = {page.path: page for page in site.registry.iter_pages()}
        routes = {(route.method, route.path) for route in site.registry.iter_routes()}

        assert admin.display_name == "Invoice"
        assert set(pages) == {
            "/admin",
            "/admin/invoices",
            "/admin/invoices/create",
            "/admin/invoices/{id}/edit",
        }
        assert routes == {
            ("GET", "/admin/invoices/{id}/remove"),
            ("POST", "/admin/invoices/save"),
        }
        assert pages["/admin/invoices"].title == "Invoices"
        assert pages["/admin/invoices/create"].title == "New Invoice"
        assert pages["/admin/invoices/{id}/edit"].title == "Edit Invoice"
        assert isinstance(pages["/admin/invoices"].handler, Callback)
        assert [entry.path for entry in site.nav] == ["/admin/invoices"]

    def test_import_routes_with_upload_type(self, settings) -> None:
        site = _site(settings)
        ModelAdmin(site, ModelConfig(model="invoice", upload_type="csv"), adapter=invoice_adapter())
        assert site.registry.get_page("/admin/invoices/import").title == "Import Invoices"
        assert ("POST", "/admin/invoices/import") in {
            (route.method, route.path) for route in site.registry.iter_routes()
        }
        labels = [action.label for action in site.actions.get_model_actions("invoice")]
        assert labels == ["Create", "Import"]

    def test_default_actions(self, settings) -> None:
        site = _site(settings)
        ModelAdmin(site, ModelConfig(model="invoice"), adapter=invoice_adapter())
        assert [a.label for a in site.actions.get_model_actions("invoice")] == ["Create"]
        instance_actions = site.actions.get_instance_actions("invoice")
        assert [a.label for a in instance_actions] == ["Edit", "Remove"]
        assert instance_actions[1].display_class == "text-danger"


class TestCrudViews:
    """End to end requests against a fake storage adapter."""

    def _build(self, settings, adapter, importer=None, **config: Any) -> TestClient:
        def configure(site: AdminSite) -> None:
            ModelAdmin(site, ModelConfig(model="invoice", **config), adapter=adapter, importer=importer)

        app, _ = build_app(settings, configure)
        return TestClient(app)

    def test_list_renders_instances(self, settings) -> None:
        adapter = invoice_adapter([{"id": 1, "number": "A-1", "paid": True}])
        client = self._build(settings, adapter, model_populate=("customer",))
        response = client.get("/admin/invoices")
        assert response.status_code == 200
        assert "All Invoices" in response.text
        assert "A-1" in response.text
        assert "/admin/invoices/1/edit" in response.text
        assert "/admin/invoices/create" in response.text
        store = adapter.stores["invoice"]
        assert store.queries[0].populated == ["customer"]
        assert adapter.stores["customer"].find_calls == 0
        assert adapter.stores["tag"].find_calls == 0

    def test_list_fetch_failure_answers_500(self, settings) -> None:
        adapter = invoice_adapter()
        adapter.stores["invoice"].fail_with = RuntimeError("db down")
        client = self._build(settings, adapter)
        assert client.get("/admin/invoices").status_code == 500

    def test_edit_form(self, settings) -> None:
        adapter = invoice_adapter([{"id": 3, "number": "B-7", "paid": False}])
        client = self._build(settings, adapter)
        response = client.get("/admin/invoices/3/edit")
        assert response.status_code == 200
        assert "Edit Invoice" in response.text
        assert 'name="id" value="3"' in response.text
        assert "B-7" in response.text
        assert adapter.stores["customer"].find_calls == 1
        assert adapter.stores["tag"].find_calls == 1

    def test_edit_fetch_failure_answers_500(self, settings, caplog) -> None:
        adapter = invoice_adapter([{"id": 3, "number": "B-7"}])
        adapter.stores["invoice"].fail_with = RuntimeError("db down")
        client = self._build(settings, adapter)
        with caplog.at_level(logging.ERROR):
            response = client.get("/admin/invoices/3/edit")
        assert response.status_code == 500
        assert "Failed to load invoice 3" in caplog.text

    def test_edit_preselects_current_relations(self, settings) -> None:
        adapter = invoice_adapter(
            [{"id": 3, "number": "B-7", "customer": 2, "tags": [{"id": 1, "label": "urgent"}]}]
        )
        client = self._build(settings, adapter)
        text = client.get("/admin/invoices/3/edit").text

        customer = text.split('name="customer"')[1].split("</select>")[0]
        tags = text.split('name="tags"')[1].split("</select>")[0]
        assert 'value="2" selected' in customer
        assert 'value="1" selected' not in customer
        assert 'value="1" selected' in tags
        assert adapter.stores["invoice"].queries[0].populated == ["tags"]

    def test_edit_missing_instance_is_404(self, settings) -> None:
        client = self._build(settings, invoice_adapter())
        assert client.get("/admin/invoices/99/edit").status_code == 404

    def test_create_form(self, settings) -> None:
        client = self._build(settings, invoice_adapter())
        response = client.get("/admin/invoices/create")
        assert response.status_code == 200
        assert "New Invoice" in response.text
        assert 'name="id"' not in response.text
        assert "ACME" in response.text

    def test_save_creates_without_id(self, settings) -> None:
        adapter = invoice_adapter()
        client = self._build(settings, adapter)
        response = client.post(
            "/admin/invoices/save",
            data={"id": "", "number": "N-1", "paid": "on", "payload": '{"a": 1}'},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/invoices"
        store = adapter.stores["invoice"]
        assert store.created == [{"number": "N-1", "paid": True, "payload": {"a": 1}}]
        assert store.updated == []
        assert "Invoice saved" in client.get("/admin/invoices").text

    def test_save_updates_with_id(self, settings) -> None:
        adapter = invoice_adapter([{"id": 7, "number": "old"}])
        client = self._build(settings, adapter)
        response = client.post(
            "/admin/invoices/save",
            data={"id": "7", "number": "new", "tags": ["1", "2"]},
            follow_redirects=False,
        )
        assert response.status_code == 303
        store = adapter.stores["invoice"]
        assert store.updated == [("7", {"number": "new", "paid": False, "tags": ["1", "2"]})]
        assert store.created == []

    def test_save_drops_malformed_json(self, settings) -> None:
        adapter = invoice_adapter()
        client = self._build(settings, adapter)
        client.post("/admin/invoices/save", data={"number": "X", "payload": "{bad"})
        assert adapter.stores["invoice"].created == [{"number": "X", "paid": False}]

    def test_save_failure_redirects_back(self, settings) -> None:
        adapter = invoice_adapter()
        adapter.stores["invoice"].fail_with = ValueError("number taken")
        client = self._build(settings, adapter)

        response = client.post("/admin/invoices/save", data={"number": "X"}, follow_redirects=False)
        assert response.headers["location"] == "/admin/invoices/create"

        response = client.post(
            "/admin/invoices/save", data={"id": "4", "number": "X"}, follow_redirects=False
        )
        assert response.headers["location"] == "/admin/invoices/4/edit"

    def test_remove(self, settings) -> None:
        adapter = invoice_adapter([{"id": 5, "number": "R-5"}])
        client = self._build(settings, adapter)
        response = client.get("/admin/invoices/5/remove", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/invoices"
        assert adapter.stores["invoice"].destroyed == ["5"]
        page = client.get("/admin/invoices").text
        assert "Invoice deleted" in page
        assert "R-5" not in page

    def test_import(self, settings) -> None:
        importer = RecordingImporter(count=3)
        client = self._build(
            settings,
            invoice_adapter(),
            importer=importer,
            upload_type="csv",
            upload_options={"delimiter": ";"},
        )
        assert "multipart/form-data" in client.get("/admin/invoices/import").text

        response = client.post(
            "/admin/invoices/import",
            files={"file": ("rows.csv", b"number\nA\nB\nC\n", "text/csv")},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/invoices"

        model, path, options = importer.calls[0]
        assert model == "invoice"
        assert options == {"delimiter": ";", "type": "csv"}
        assert importer.existed == [True]
        assert importer.contents == [b"number\nA\nB\nC\n"]
        assert path.parent == settings.upload_dir
        assert not path.exists()
        assert "3 Invoices imported" in client.get("/admin/invoices").text

    def test_import_without_file(self, settings) -> None:
        importer = RecordingImporter(count=1)
        client = self._build(settings, invoice_adapter(), importer=importer, upload_type="csv")
        response = client.post("/admin/invoices/import", data={}, follow_redirects=False)
        assert response.headers["location"] == "/admin/invoices/import"
        assert importer.calls == []


class TestSaveDirect:
    """``save`` accepts explicit values instead of reading the form."""

    @pytest.mark.asyncio
    async def test_values_argument(self, settings) -> None:
        adapter = invoice_adapter()
        admin = ModelAdmin(_site(settings), ModelConfig(model="invoice"), adapter=adapter)
        request = Request({"type": "http", "method": "POST", "path": "/", "headers": []})

        response = await admin.save(request, {"number": "Z", "payload": "nope"})

        assert response.status_code == 303
        assert adapter.stores["invoice"].created == [{"number": "Z", "paid": False}]
        assert request.state.coercion.dropped_fields == ["payload"]
        assert request.state.flash == [{"level": "info", "message": "Invoice saved"}]


# The End
