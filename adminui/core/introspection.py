# -*- coding: utf-8 -*-
"""
introspection

Derive labeled, filtered UI attributes from a model descriptor.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Sequence, TYPE_CHECKING

from ..utils.strings import title_case
from .schema.descriptors import AttributeDescriptor, FieldDescriptor, ModelDescriptor

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from ..adapters.base import BaseAdapter

logger = logging.getLogger(__name__)


class AttributeIntrospector:
    """Build :class:`AttributeDescriptor` lists for one model configuration.

    ``display`` is a whitelist that, when non-empty, wins over ``ignore``.
    Primary key fields are never exposed as editable attributes.
    """

    def __init__(
        self,
        adapter: "BaseAdapter",
        *,
        ignore: Iterable[str] = (),
        display: Iterable[str] = (),
    ) -> None:
        self._adapter = adapter
        self._ignore = frozenset(ignore)
        self._display: Sequence[str] = tuple(display)

    async def get_attributes(
        self,
        descriptor: ModelDescriptor,
        with_related: bool = False,
    ) -> List[AttributeDescriptor]:
        """Return attribute descriptors for ``descriptor``.

        When ``with_related`` is true every related attribute gets the full
        list of candidate instances of its target model; relations are
        fetched concurrently and the call returns once all have settled.
        """

        attributes = [
            self._describe(field)
            for field in descriptor.fields
            if self._is_visible(field)
        ]
        if with_related:
            related = [attr for attr in attributes if attr.type == "related"]
            if related:
                await asyncio.gather(*(self._resolve(attr) for attr in related))
        return attributes

    def _is_visible(self, field: FieldDescriptor) -> bool:
        if self._display and field.name not in self._display:
            return False
        if field.name in self._ignore or field.primary_key:
            return False
        return True

    @staticmethod
    def _describe(field: FieldDescriptor) -> AttributeDescriptor:
        attr = AttributeDescriptor(
            name=field.name,
            label=field.label or title_case(field.name),
            type=field.kind,
            required=field.required,
        )
        if field.choices:
            attr.type = "enum"
            attr.enum_options = list(field.choices)
        elif field.relation is not None:
            attr.type = "related"
            attr.related_model = field.relation.target
            attr.related_pk = field.relation.to_field or "id"
            attr.many = field.relation.kind == "m2m"
        return attr

    async def _resolve(self, attr: AttributeDescriptor) -> None:
        store = self._adapter.store(attr.related_model or "")
        attr.related_instances = list(await store.find())
        logger.debug(
            "Resolved %d candidates for %s -> %s",
            len(attr.related_instances),
            attr.name,
            attr.related_model,
        )


__all__ = ["AttributeIntrospector"]


# The End
