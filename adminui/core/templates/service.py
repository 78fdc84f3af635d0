# -*- coding: utf-8 -*-
"""
core.templates.service

Jinja2 backed template service used by the dispatcher and model admins.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from fastapi.templating import Jinja2Templates
from jinja2 import Template

from ...conf import AdminUISettings, current_settings


TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"

logger = logging.getLogger(__name__)


def field_value(instance: Any, name: str, default: Any = "") -> Any:
    """Return attribute ``name`` of a model instance or mapping."""

    if isinstance(instance, Mapping):
        return instance.get(name, default)
    value = getattr(instance, name, default)
    return default if value is None else value


def instance_pk(instance: Any, pk_attr: str = "id") -> Any:
    """Return the primary key of ``instance`` (object or mapping)."""

    return field_value(instance, pk_attr, None)


def related_pks(instance: Any, name: str, pk_attr: str = "id") -> list[str]:
    """Return the primary keys currently linked through relation ``name``.

    Foreign keys are read from their ``<name>_id`` column when present.
    Prefetched many-to-many managers contribute their fetched objects;
    unfetched managers contribute nothing. Keys are returned as strings so
    they compare with submitted option values.
    """

    column = field_value(instance, f"{name}_id", None)
    if column is not None:
        return [str(column)]
    value = field_value(instance, name, None)
    if hasattr(value, "related_objects"):
        value = value.related_objects if getattr(value, "_fetched", False) else []
    if value is None or value == "":
        return []
    items = value if isinstance(value, (list, tuple, set)) else [value]
    pks: list[str] = []
    for item in items:
        if isinstance(item, Mapping) or hasattr(item, pk_attr):
            item = instance_pk(item, pk_attr)
        if item is not None:
            pks.append(str(item))
    return pks


class TemplateService:
    """Manage template directories, shared globals and rendering."""

    def __init__(
        self,
        *,
        templates_dir: str | Path | Iterable[str | Path] | None = None,
        settings: AdminUISettings | None = None,
    ) -> None:
        """Configure the service with template locations and settings."""

        self._template_dirs = self._coerce_template_dirs(
            templates_dir or TEMPLATES_DIR
        )
        self._settings = settings or current_settings()
        self._globals: Dict[str, Any] = {
            "field_value": field_value,
            "instance_pk": instance_pk,
            "related_pks": related_pks,
        }
        self._fallbacks: Dict[str, str] = {}
        self._templates: Jinja2Templates | None = None

    @property
    def template_directories(self) -> tuple[str, ...]:
        """Return template directories searched by the service."""

        return tuple(self._template_dirs)

    def add_template_directory(self, directory: str | Path) -> None:
        """Search ``directory`` ahead of the bundled templates."""

        normalized = str(directory)
        if normalized in self._template_dirs:
            return
        self._template_dirs.insert(0, normalized)
        self._templates = None
        logger.debug("Added template directory %s", normalized)

    def add_globals(self, **values: Any) -> None:
        """Expose ``values`` to every template rendered by the service."""

        self._globals.update(values)
        if self._templates is not None:
            self._templates.env.globals.update(values)

    def get_templates(self) -> Jinja2Templates:
        """Return the cached ``Jinja2Templates`` environment."""

        if self._templates is None:
            templates = Jinja2Templates(directory=list(self._template_dirs))
            templates.env.globals["settings"] = self._settings
            templates.env.globals.update(self._globals)
            self._templates = templates
        return self._templates

    @staticmethod
    def template_name(name: str) -> str:
        """Return ``name`` with the default ``.html`` suffix when it has none."""

        return name if Path(name).suffix else f"{name}.html"

    def set_fallback(self, name: str, fallback: str) -> None:
        """Render ``fallback`` whenever no template called ``name`` exists."""

        self._fallbacks[name] = fallback

    def resolve(self, name: str, fallback: str | None = None) -> Template:
        """Return the first existing template among ``name`` and ``fallback``."""

        candidates = [self.template_name(name)]
        fallback = fallback or self._fallbacks.get(name)
        if fallback:
            candidates.append(self.template_name(fallback))
        return self.get_templates().env.select_template(candidates)

    async def render(
        self,
        name: str,
        context: Mapping[str, Any],
        *,
        fallback: str | None = None,
    ) -> str:
        """Render ``name`` (or ``fallback``) with ``context`` to a string."""

        template = self.resolve(name, fallback)
        return template.render(**dict(context))

    @staticmethod
    def _coerce_template_dirs(
        templates_dir: str | Path | Iterable[str | Path]
    ) -> list[str]:
        """Normalise ``templates_dir`` into a mutable list of strings."""

        if isinstance(templates_dir, (str, Path)):
            return [str(templates_dir)]
        return [str(path) for path in templates_dir]


__all__ = [
    "TEMPLATES_DIR",
    "TemplateService",
    "field_value",
    "instance_pk",
    "related_pks",
]


# The End
