# -*- coding: utf-8 -*-
"""
test_introspection

Attribute descriptors derived from model schema metadata.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import pytest

from adminui.core.introspection import AttributeIntrospector
from tests.fakes import Rendezvous, invoice_adapter, invoice_descriptor


class TestAttributeIntrospector:
    """Visibility filters, labels, types and relation resolution."""

    @pytest.mark.asyncio
    async def test_types_and_labels(self) -> None:
        introspector = AttributeIntrospector(invoice_adapter(), ignore=("created_at",))
        attributes = await introspector.get_attributes(invoice_descriptor())

        by_name = {attr.name: attr for attr in attributes}
        assert [attr.name for attr in attributes] == [
            "number", "paid", "status", "payload", "customer", "tags"
        ]
        assert by_name["number"].label == "Invoice number"
        assert by_name["number"].required is True
        assert by_name["paid"].label == "Paid"
        assert by_name["paid"].type == "boolean"
        assert by_name["status"].type == "enum"
        assert [c.const for c in by_name["status"].enum_options] == ["draft", "sent"]
        assert by_name["payload"].type == "json"
        assert by_name["customer"].type == "related"
        assert by_name["customer"].related_model == "models.Customer"
        assert by_name["customer"].many is False
        assert by_name["tags"].many is True
        assert by_name["customer"].related_instances is None

    @pytest.mark.asyncio
    async def test_display_narrows_ignore(self) -> None:
        introspector = AttributeIntrospector(
            invoice_adapter(),
            ignore=("paid",),
            display=("id", "paid", "number", "customer"),
        )
        attributes = await introspector.get_attributes(invoice_descriptor())
        assert [attr.name for attr in attributes] == ["number", "customer"]

    @pytest.mark.asyncio
    async def test_deterministic(self) -> None:
        adapter = invoice_adapter()
        introspector = AttributeIntrospector(adapter, ignore=("created_at",))
        first = await introspector.get_attributes(invoice_descriptor(), with_related=True)
        second = await introspector.get_attributes(invoice_descriptor(), with_related=True)
        assert [a.model_dump() for a in first] == [a.model_dump() for a in second]

    @pytest.mark.asyncio
    async def test_relations_resolved_concurrently(self) -> None:
        adapter = invoice_adapter()
        rendezvous = Rendezvous(parties=2)
        adapter.stores["customer"].before_find = rendezvous.wait
        adapter.stores["tag"].before_find = rendezvous.wait

        introspector = AttributeIntrospector(adapter)
        attributes = await introspector.get_attributes(invoice_descriptor(), with_related=True)

        by_name = {attr.name: attr for attr in attributes}
        assert [row["name"] for row in by_name["customer"].related_instances] == ["ACME", "Globex"]
        assert [row["label"] for row in by_name["tags"].related_instances] == ["urgent"]
        assert "models.Customer" in adapter.requested
        assert "models.Tag" in adapter.requested


# The End
