# -*- coding: utf-8 -*-
"""
base

Storage contracts consumed by the CRUD engine and attribute introspector.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generator, Mapping

from ..core.schema.descriptors import ModelDescriptor


class ModelQuery(ABC):
    """Deferred read against one model; await it to execute."""

    @abstractmethod
    def where(self, **filters: Any) -> "ModelQuery":
        """Return the query narrowed by field lookups."""

    @abstractmethod
    def populate(self, *names: str) -> "ModelQuery":
        """Return the query eager-loading the ``names`` relations."""

    @abstractmethod
    async def execute(self) -> Any:
        """Run the query and return a list, or an instance/``None`` for single reads."""

    def __await__(self) -> Generator[Any, None, Any]:
        return self.execute().__await__()


class ModelStore(ABC):
    """Per-model storage operations."""

    name: str

    @property
    def pk_attr(self) -> str:
        return self.describe().pk_attr

    @abstractmethod
    def find(self) -> ModelQuery:
        """Return a query over every instance."""

    @abstractmethod
    def find_one(self, record_id: Any) -> ModelQuery:
        """Return a query resolving to the instance with ``record_id`` or ``None``."""

    @abstractmethod
    async def create(self, values: Mapping[str, Any]) -> Any:
        """Persist a new instance built from ``values``."""

    @abstractmethod
    async def update(self, record_id: Any, values: Mapping[str, Any]) -> Any:
        """Apply ``values`` to the instance identified by ``record_id``."""

    @abstractmethod
    async def destroy(self, record_id: Any) -> None:
        """Delete the instance identified by ``record_id``."""

    @abstractmethod
    def describe(self) -> ModelDescriptor:
        """Return the declared attribute metadata for the model."""


class BaseAdapter(ABC):
    """Resolve model names to their :class:`ModelStore`."""

    name: str = "base"

    @abstractmethod
    def store(self, model: str) -> ModelStore:
        """Return the store for ``model`` (plain or dotted name)."""


__all__ = ["BaseAdapter", "ModelQuery", "ModelStore"]


# The End
