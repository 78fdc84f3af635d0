# -*- coding: utf-8 -*-
"""
descriptors

Model schema descriptors consumed by the admin.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field as PField

# Unified field types reported by storage adapters
FieldKind = Literal[
    "string", "text", "integer", "bigint", "float", "decimal",
    "boolean", "date", "datetime", "uuid", "json", "mixed", "file", "binary",
]


class Choice(BaseModel):
    """Single selectable option for a field with discrete choices."""
    const: Any
    title: str


class Relation(BaseModel):
    """Information about a relation to another model."""
    kind: Literal["fk", "m2m", "o2o"]
    target: str  # model name or dotted path "app.Model"
    to_field: Optional[str] = None


class FieldDescriptor(BaseModel):
    """Raw metadata for one model field as exposed by the storage adapter."""
    name: str
    kind: FieldKind
    nullable: bool = False
    required: bool = False
    primary_key: bool = False
    unique: bool = False
    default: Any | None = None

    label: str | None = None

    relation: Relation | None = None
    choices: list[Choice] | None = None


class ModelDescriptor(BaseModel):
    """Metadata describing a storage model."""
    name: str
    dotted: str
    pk_attr: str = "id"

    fields: list[FieldDescriptor] = PField(default_factory=list)

    def field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def fields_map(self) -> dict[str, FieldDescriptor]:
        """Return a mapping of field names to descriptors."""
        return {f.name: f for f in self.fields}

    @property
    def relations(self) -> list[FieldDescriptor]:
        """Return the fields declaring a relation, in declaration order."""
        return [f for f in self.fields if f.relation is not None]


class AttributeDescriptor(BaseModel):
    """UI metadata for one model attribute, rebuilt on every request."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    label: str
    type: str
    required: bool = False
    many: bool = False
    enum_options: list[Choice] | None = None
    related_model: str | None = None
    related_pk: str | None = None
    related_instances: list[Any] | None = None

# The End
