# -*- coding: utf-8 -*-
"""
test_actions

Model and instance action lookup.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from adminui.core.actions import ActionRegistry, InstanceAction, ModelAction


class TestActionRegistry:
    """Wildcard actions precede model actions, insertion order is kept."""

    def test_wildcard_first(self) -> None:
        registry = ActionRegistry()
        registry.model_action("invoice", "Create", "create")
        registry.model_action("*", "Export", "export")
        registry.model_action("invoice", "Import", "import")
        labels = [action.label for action in registry.get_model_actions("invoice")]
        assert labels == ["Export", "Create", "Import"]

    def test_other_models_only_see_wildcards(self) -> None:
        registry = ActionRegistry()
        registry.instance_action("invoice", "Edit", "edit")
        registry.instance_action("*", "Audit", "audit")
        assert [a.label for a in registry.get_instance_actions("customer")] == ["Audit"]
        assert registry.get_model_actions("customer") == []

    def test_wildcard_lookup_not_duplicated(self) -> None:
        registry = ActionRegistry()
        registry.model_action("*", "Export", "export")
        assert len(registry.get_model_actions("*")) == 1

    def test_action_urls(self) -> None:
        create = ModelAction(label="Create", sub_url="create")
        edit = InstanceAction(label="Edit", sub_url="/edit")
        assert create.url("/admin/invoices/") == "/admin/invoices/create"
        assert edit.url("/admin/invoices", 7) == "/admin/invoices/7/edit"


# The End
