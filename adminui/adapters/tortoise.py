# -*- coding: utf-8 -*-
"""
tortoise

Tortoise ORM storage adapter.

This module defines :class:`TortoiseAdapter`, a light abstraction over
Tortoise ORM exposing per-model stores with the query, write and schema
operations the CRUD engine relies on. It allows the rest of the admin to
interact with models without depending directly on Tortoise APIs.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from tortoise import Tortoise, fields
from tortoise.models import Model as TortoiseModel
from tortoise.queryset import QuerySet

from ..core.exceptions import ConfigurationError
from ..core.schema.descriptors import (
    Choice, FieldDescriptor, ModelDescriptor, Relation
)
from .base import BaseAdapter, ModelQuery, ModelStore

Model = TortoiseModel


class TortoiseQuery(ModelQuery):
    """Deferred Tortoise queryset honouring ``where`` and ``populate``."""

    def __init__(self, queryset: QuerySet, *, single: bool = False) -> None:
        self._queryset = queryset
        self._single = single

    def where(self, **filters: Any) -> "TortoiseQuery":
        if not filters:
            return self
        return TortoiseQuery(self._queryset.filter(**filters), single=self._single)

    def populate(self, *names: str) -> "TortoiseQuery":
        if not names:
            return self
        return TortoiseQuery(
            self._queryset.prefetch_related(*names), single=self._single
        )

    async def execute(self) -> Any:
        """Evaluate the queryset.

        This coroutine must be awaited.
        """
        if self._single:
            return await self._queryset.first()
        return await self._queryset


class TortoiseStore(ModelStore):
    """Store bound to one Tortoise model class."""

    def __init__(self, model_cls: type[Model], adapter: "TortoiseAdapter") -> None:
        self.model = model_cls
        self.name = model_cls.__name__.lower()
        self._adapter = adapter
        self._descriptor: ModelDescriptor | None = None

    @property
    def pk_attr(self) -> str:
        meta = getattr(self.model, "_meta", None)
        return getattr(meta, "pk_attr", "id") if meta else "id"

    def find(self) -> TortoiseQuery:
        return TortoiseQuery(self.model.all())

    def find_one(self, record_id: Any) -> TortoiseQuery:
        return TortoiseQuery(self.model.filter(pk=record_id), single=True)

    async def create(self, values: Mapping[str, Any]) -> Model:
        """Create and persist a model instance.

        Many-to-many values are linked once the row exists.
        This coroutine must be awaited.
        """
        data, m2m = self.normalize_values(values)
        obj = await self.model.create(**data)
        await self._apply_m2m(obj, m2m)
        return obj

    async def update(self, record_id: Any, values: Mapping[str, Any]) -> Model:
        """Load the instance with ``record_id``, assign ``values`` and save it.

        This coroutine must be awaited.
        """
        obj = await self.model.get(pk=record_id)
        data, m2m = self.normalize_values(values)
        for name, value in data.items():
            setattr(obj, name, value)
        await obj.save()
        await self._apply_m2m(obj, m2m)
        return obj

    async def destroy(self, record_id: Any) -> None:
        """Remove the row identified by ``record_id``.

        This coroutine must be awaited.
        """
        await self.model.filter(pk=record_id).delete()

    def describe(self) -> ModelDescriptor:
        if self._descriptor is None:
            self._descriptor = self._adapter.get_model_descriptor(self.model)
        return self._descriptor

    def normalize_values(
        self, values: Mapping[str, Any]
    ) -> tuple[dict[str, Any], dict[str, list[Any]]]:
        """Convert submitted values into ORM-friendly column values.

        Unknown keys are dropped, relation names are mapped to their ``*_id``
        columns and many-to-many selections are returned separately.
        """
        meta = self.model._meta
        cleaned: dict[str, Any] = {}
        m2m: dict[str, list[Any]] = {}
        for name, value in values.items():
            field = meta.fields_map.get(name)
            if field is None or getattr(field, "pk", False):
                continue
            if isinstance(field, fields.relational.ManyToManyFieldInstance):
                if getattr(field, "_generated", False):
                    continue
                if value in (None, ""):
                    m2m[name] = []
                elif isinstance(value, (list, tuple)):
                    m2m[name] = [item for item in value if item not in (None, "")]
                else:
                    m2m[name] = [value]
                continue
            if isinstance(field, fields.relational.ForeignKeyFieldInstance):
                if getattr(value, "_saved_in_db", False):
                    cleaned[name] = value
                else:
                    cleaned[f"{name}_id"] = value if value != "" else None
                continue
            if isinstance(field, fields.relational.BackwardFKRelation):
                continue
            if value == "" and not isinstance(field, (fields.CharField, fields.TextField)):
                cleaned[name] = None
                continue
            if getattr(field, "enum_type", None) and isinstance(value, str):
                if value.isdigit():
                    cleaned[name] = int(value)
                    continue
            cleaned[name] = value
        return cleaned, m2m

    async def _apply_m2m(self, obj: Model, selections: dict[str, list[Any]]) -> None:
        for name, ids in selections.items():
            field = self.model._meta.fields_map[name]
            manager = getattr(obj, name)
            await manager.clear()
            if ids:
                related = await field.related_model.filter(pk__in=ids)
                await manager.add(*related)


class TortoiseAdapter(BaseAdapter):
    """Facade for Tortoise ORM resolving model names to stores."""

    name = "tortoise"

    def __init__(self, models: Mapping[str, type[Model]] | None = None) -> None:
        """Optionally pin explicit ``models`` by name; others come from Tortoise apps."""
        self._models: Dict[str, type[Model]] = {
            key.lower(): value for key, value in (models or {}).items()
        }
        self._stores: Dict[str, TortoiseStore] = {}

    def store(self, model: str) -> TortoiseStore:
        key = model.lower()
        store = self._stores.get(key)
        if store is None:
            store = TortoiseStore(self.get_model(model), self)
            self._stores[key] = store
        return store

    def get_model(self, name: str) -> type[Model]:
        """Return a Tortoise model by plain (``invoice``) or dotted (``models.Invoice``) name."""
        pinned = self._models.get(name.lower())
        if pinned is not None:
            return pinned
        app_label, _, model_name = name.rpartition(".")
        for label, models in Tortoise.apps.items():
            if app_label and label != app_label:
                continue
            for cls_name, model_cls in models.items():
                if cls_name.lower() == model_name.lower():
                    return model_cls
        raise ConfigurationError(f"Unknown Tortoise model '{name}'")

    def _app_label(self, model: type[Any]) -> str:
        """Return the app label for a model, with safe fallback."""
        meta = getattr(model, "_meta", None)
        label = getattr(meta, "app", None)
        return label or model.__module__.split(".")[0]

    def _build_choices(self, f: fields.Field) -> list[Choice] | None:
        """Create ``Choice`` instances for enum definitions."""
        enum_type = getattr(f, "enum_type", None)
        if enum_type is None:
            return None
        return [
            Choice(const=member.value, title=getattr(member, "label", member.name))
            for member in enum_type
        ]

    def _kind_for_field(self, f: fields.Field) -> str:
        """Map a Tortoise field instance to a generic field kind."""
        if isinstance(f, fields.BooleanField):
            return "boolean"
        if isinstance(f, fields.BigIntField):
            return "bigint"
        if isinstance(f, (fields.IntField, fields.SmallIntField)):
            return "integer"
        if isinstance(f, fields.FloatField):
            return "float"
        if isinstance(f, fields.DecimalField):
            return "decimal"
        if isinstance(f, fields.DatetimeField):
            return "datetime"
        if isinstance(f, fields.DateField):
            return "date"
        if isinstance(f, fields.UUIDField):
            return "uuid"
        if isinstance(f, fields.JSONField):
            return "json"
        if isinstance(f, fields.BinaryField):
            return "binary"
        if isinstance(f, fields.TextField):
            return "text"
        return "string"

    def _relation_for_field(self, f: fields.Field) -> Relation | None:
        """Return relation metadata for ``f`` if it defines FK, O2O or M2M."""
        if isinstance(f, fields.relational.OneToOneFieldInstance):
            kind = "o2o"
        elif isinstance(f, fields.relational.ForeignKeyFieldInstance):
            kind = "fk"
        elif isinstance(f, fields.relational.ManyToManyFieldInstance):
            kind = "m2m"
        else:
            return None
        target = getattr(f, "related_model", None) or getattr(f, "model_name", None)
        if target is None:
            return None
        if isinstance(target, str):
            return Relation(kind=kind, target=target, to_field="id")
        meta = getattr(target, "_meta", None)
        dotted = f"{self._app_label(target)}.{target.__name__}"
        to_field = getattr(meta, "pk_attr", "id") if meta else "id"
        return Relation(kind=kind, target=dotted, to_field=to_field)

    def _field_descriptor(self, name: str, f: fields.Field) -> FieldDescriptor:
        """Build a :class:`FieldDescriptor` from a Tortoise field."""
        raw_default = getattr(f, "default", None)
        is_m2m = isinstance(f, fields.relational.ManyToManyFieldInstance)
        required = (
            not getattr(f, "null", False)
            and raw_default is None
            and not getattr(f, "pk", False)
            and not is_m2m
        )
        # Enum fields get a generated member listing as description.
        label = None if getattr(f, "enum_type", None) else getattr(f, "description", None)
        return FieldDescriptor(
            name=name,
            kind=self._kind_for_field(f),
            nullable=bool(getattr(f, "null", False)),
            required=required,
            primary_key=bool(getattr(f, "pk", False)),
            unique=bool(getattr(f, "unique", False)),
            default=None if callable(raw_default) else raw_default,
            label=label or None,
            relation=self._relation_for_field(f),
            choices=self._build_choices(f),
        )

    def get_model_descriptor(self, model: type[Any]) -> ModelDescriptor:
        """Build a descriptor with metadata for ``model``.

        Reverse relations and the ``*_id`` source columns of foreign keys are
        skipped; the relation itself is reported under its declared name.
        """
        meta = model._meta
        fields_map = meta.fields_map
        field_names = set(fields_map.keys())
        fds: list[FieldDescriptor] = []
        for name, f in fields_map.items():
            if isinstance(
                f,
                (
                    fields.relational.BackwardFKRelation,
                    fields.relational.BackwardOneToOneRelation,
                ),
            ):
                continue
            if getattr(f, "_generated", False):
                continue
            if name.endswith("_id") and name[:-3] in field_names:
                continue
            fds.append(self._field_descriptor(name, f))
        return ModelDescriptor(
            name=model.__name__.lower(),
            dotted=f"{self._app_label(model)}.{model.__name__}",
            pk_attr=getattr(meta, "pk_attr", "id"),
            fields=fds,
        )


__all__ = ["TortoiseAdapter", "TortoiseQuery", "TortoiseStore"]


# The End
