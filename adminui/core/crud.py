# -*- coding: utf-8 -*-
"""
crud

Model-driven CRUD engine registering list, form, save, remove and import
endpoints for one storage model.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Protocol, Sequence, TYPE_CHECKING, runtime_checkable

from fastapi import HTTPException
from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from ..utils.strings import dasherize, humanize, pluralize
from .coercion import CoercionResult, coerce_values
from .exceptions import ConfigurationError, FetchError, SaveError
from .flash import flash
from .handlers import RenderDirective
from .introspection import AttributeIntrospector
from .schema.descriptors import AttributeDescriptor
from .services.importer import FileImportService, ImportService

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from ..adapters.base import BaseAdapter, ModelQuery, ModelStore
    from .site import AdminSite

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = ("created_at", "updated_at")


@dataclass(frozen=True)
class ModelConfig:
    """Per-model admin configuration; ``model`` is the only required field."""

    model: str | None = None
    base: str | None = None
    display_name: str | None = None
    template_prefix: str | None = None
    template_dir: str | Path | None = None
    ignore: Sequence[str] = DEFAULT_IGNORE
    display: Sequence[str] = ()
    model_populate: Sequence[str] = ()
    icon_class: str = "fa fa-list"
    upload_type: str | None = None
    upload_options: Mapping[str, Any] = field(default_factory=dict)

    def resolved(self) -> "ModelConfig":
        """Return a copy with every derived default filled in."""

        if not self.model:
            raise ConfigurationError("ModelConfig.model is required")
        model = self.model
        return replace(
            self,
            base=self.base or f"/{pluralize(model).lower()}",
            display_name=self.display_name or humanize(model),
            template_prefix=self.template_prefix or f"admin-{dasherize(model)}",
            ignore=tuple(self.ignore or ()),
            display=tuple(self.display or ()),
            model_populate=tuple(self.model_populate or ()),
            upload_options=dict(self.upload_options or {}),
        )

    @property
    def plural_name(self) -> str:
        return pluralize(self.display_name or humanize(self.model or ""))


@runtime_checkable
class ConfigResolver(Protocol):
    """Capability for configs that must be computed at construction time."""

    def resolve_config(self) -> ModelConfig:
        ...


class ModelAdmin:
    """CRUD controller for a single model.

    Construction resolves the configuration once and registers the list,
    create, edit, remove and save endpoints (plus import when an upload type
    is configured) on ``site``.
    """

    def __init__(
        self,
        site: "AdminSite",
        config: ModelConfig | ConfigResolver,
        *,
        adapter: "BaseAdapter",
        importer: ImportService | None = None,
    ) -> None:
        if not isinstance(config, ModelConfig):
            if not isinstance(config, ConfigResolver):
                raise ConfigurationError(
                    "ModelAdmin expects a ModelConfig or an object exposing resolve_config()"
                )
            config = config.resolve_config()
        self.config = config.resolved()
        self.site = site
        self.adapter = adapter
        self.importer = importer
        if self.importer is None and self.config.upload_type:
            self.importer = FileImportService(adapter)
        self.introspector = AttributeIntrospector(
            adapter, ignore=self.config.ignore, display=self.config.display
        )
        self._setup_templates()
        self._register_actions()
        self._register_routes()

    # ==== Naming ====
    @property
    def model(self) -> str:
        return self.config.model or ""

    @property
    def display_name(self) -> str:
        return self.config.display_name or ""

    @property
    def plural_name(self) -> str:
        return self.config.plural_name

    @property
    def store(self) -> "ModelStore":
        """Return the storage handle, resolved lazily so ORM init may follow."""
        return self.adapter.store(self.model)

    @property
    def list_url(self) -> str:
        return self.site.url(self.config.base or "/")

    def create_url(self) -> str:
        return f"{self.list_url}/create"

    def edit_url(self, record_id: Any) -> str:
        return f"{self.list_url}/{record_id}/edit"

    def import_url(self) -> str:
        return f"{self.list_url}/import"

    def template(self, suffix: str) -> str:
        return f"{self.config.template_prefix}-{suffix}"

    # ==== Registration ====
    def _setup_templates(self) -> None:
        templates = self.site.templates
        if self.config.template_dir:
            templates.add_template_directory(self.config.template_dir)
        for suffix in ("list", "form", "import"):
            templates.set_fallback(self.template(suffix), f"crud/{suffix}")

    def _register_actions(self) -> None:
        actions = self.site.actions
        actions.model_action(self.model, "Create", "create", icon_class="fa fa-plus")
        actions.instance_action(self.model, "Edit", "edit", icon_class="fa fa-edit")
        actions.instance_action(
            self.model,
            "Remove",
            "remove",
            icon_class="fa fa-trash",
            display_class="text-danger",
        )
        if self.config.upload_type:
            actions.model_action(self.model, "Import", "import", icon_class="fa fa-upload")

    def _register_routes(self) -> None:
        base = self.config.base or "/"
        site = self.site
        site.register_page(
            self.plural_name, base, {"icon_class": self.config.icon_class}, self.list
        )
        site.register_page(f"New {self.display_name}", f"{base}/create", {"nav": False}, self.create)
        site.register_page(f"Edit {self.display_name}", f"{base}/{{id}}/edit", {"nav": False}, self.edit)
        # Destructive action bound to GET, links in the list template point here.
        site.register_route("GET", f"{base}/{{id}}/remove", self.remove)
        site.register_route(f"{base}/save", self.save)
        if self.config.upload_type:
            site.register_page(
                f"Import {self.plural_name}", f"{base}/import", {"nav": False}, self.import_form
            )
            site.register_route(f"{base}/import", self.save_import)

    # ==== Schema ====
    async def get_attributes(self, with_related: bool = False) -> List[AttributeDescriptor]:
        """Return UI attributes for the model, resolving relations on demand."""
        return await self.introspector.get_attributes(self.store.describe(), with_related)

    def _populated(self, query: "ModelQuery", *extra: str) -> "ModelQuery":
        names = tuple(dict.fromkeys((*self.config.model_populate, *extra)))
        if names:
            return query.populate(*names)
        return query

    def _many_relations(self) -> List[str]:
        """Return the names of many-to-many relations."""
        return [
            f.name for f in self.store.describe().relations if f.relation.kind == "m2m"
        ]

    def _context(self, **extra: Any) -> Dict[str, Any]:
        ctx: Dict[str, Any] = {
            "name": self.display_name,
            "plural": self.plural_name,
            "model": self.model,
            "base": self.list_url,
            "pk_attr": self.store.pk_attr,
        }
        ctx.update(extra)
        return ctx

    # ==== Views ====
    async def list(self, request: Request, response: Response | None = None) -> RenderDirective:
        """Render every instance with relation-free attributes."""
        query = self._populated(self.store.find().where())
        try:
            instances, attributes = await asyncio.gather(
                query, self.get_attributes(with_related=False)
            )
        except Exception as exc:
            logger.exception("Failed to list %s instances", self.model)
            raise FetchError(self.model, str(exc)) from exc
        return RenderDirective(
            self.template("list"),
            self._context(
                instances=instances,
                attributes=attributes,
                actions=self.site.actions.get_model_actions(self.model),
                instance_actions=self.site.actions.get_instance_actions(self.model),
                title=f"All {self.plural_name}",
            ),
        )

    async def edit(self, request: Request, response: Response | None = None) -> RenderDirective:
        """Render the form for an existing instance with relation options."""
        record_id = request.path_params.get("id")
        query = self._populated(self.store.find_one(record_id), *self._many_relations())
        try:
            instance, attributes = await asyncio.gather(
                query, self.get_attributes(with_related=True)
            )
        except Exception as exc:
            logger.exception("Failed to load %s %s", self.model, record_id)
            raise FetchError(self.model, str(exc)) from exc
        if instance is None:
            raise HTTPException(status_code=404, detail=f"{self.display_name} not found")
        return RenderDirective(
            self.template("form"),
            self._context(
                instance=instance,
                record_id=record_id,
                attributes=attributes,
                instance_actions=self.site.actions.get_instance_actions(self.model),
                title=f"Edit {self.display_name}",
            ),
        )

    async def create(self, request: Request, response: Response | None = None) -> RenderDirective:
        """Render an empty form; populated relations start as empty objects."""
        instance = {name: {} for name in self.config.model_populate}
        attributes = await self.get_attributes(with_related=True)
        return RenderDirective(
            self.template("form"),
            self._context(
                instance=instance,
                record_id=None,
                attributes=attributes,
                instance_actions=[],
                title=f"New {self.display_name}",
            ),
        )

    async def remove(self, request: Request) -> RedirectResponse:
        """Delete the instance and go back to the list without confirmation."""
        record_id = request.path_params.get("id")
        await self.store.destroy(record_id)
        flash(request, "info", f"{self.display_name} deleted")
        return RedirectResponse(self.list_url, status_code=303)

    async def save(
        self,
        request: Request,
        values: Mapping[str, Any] | None = None,
    ) -> RedirectResponse:
        """Create or update from submitted ``values`` (the request form by default).

        A truthy ``id`` updates that record, anything else creates one.
        Dropped json/mixed fields are exposed as ``request.state.coercion``.
        """
        if values is None:
            values = await self.read_form(request)
        attributes = await self.get_attributes(with_related=False)
        coercion = coerce_values(values, attributes)
        request.state.coercion = coercion
        data = coercion.values
        record_id = data.pop("id", None)
        try:
            if record_id:
                await self.store.update(record_id, data)
            else:
                await self.store.create(data)
        except Exception as exc:
            error = SaveError(self.model, record_id, str(exc) or exc.__class__.__name__)
            logger.exception("Failed to save %s %s", self.model, record_id or "(new)")
            flash(request, "error", error.detail)
            target = self.edit_url(record_id) if record_id else self.create_url()
            return RedirectResponse(target, status_code=303)
        flash(request, "info", f"{self.display_name} saved")
        return RedirectResponse(self.list_url, status_code=303)

    async def import_form(self, request: Request, response: Response | None = None) -> RenderDirective:
        """Render the upload form."""
        return RenderDirective(
            self.template("import"),
            self._context(
                upload_type=self.config.upload_type,
                title=f"Import {self.plural_name}",
            ),
        )

    async def save_import(self, request: Request) -> RedirectResponse:
        """Hand the uploaded file to the import collaborator."""
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile) or not upload.filename:
            flash(request, "error", "No file provided")
            return RedirectResponse(self.import_url(), status_code=303)
        path = await self._store_upload(upload)
        options = {**self.config.upload_options, "type": self.config.upload_type}
        try:
            created = await self.importer.import_file_to_model(self.model, path, options)
        except Exception as exc:
            logger.exception("Failed to import %s from %s", self.model, upload.filename)
            flash(request, "error", str(exc) or "Import failed")
            return RedirectResponse(self.import_url(), status_code=303)
        finally:
            path.unlink(missing_ok=True)
        flash(request, "info", f"{len(created)} {self.plural_name} imported")
        return RedirectResponse(self.list_url, status_code=303)

    # ==== Helpers ====
    @staticmethod
    async def read_form(request: Request) -> Dict[str, Any]:
        """Return submitted form values; repeated keys become lists."""
        form = await request.form()
        values: Dict[str, Any] = {}
        for key in form.keys():
            items = [item for item in form.getlist(key) if not isinstance(item, UploadFile)]
            if not items:
                continue
            values[key] = items[0] if len(items) == 1 else items
        return values

    async def _store_upload(self, upload: UploadFile) -> Path:
        target = Path(self.site.settings.upload_dir)
        target.mkdir(parents=True, exist_ok=True)
        dest = target / f"{uuid.uuid4().hex}{Path(upload.filename or 'upload').suffix}"
        upload.file.seek(0)
        with open(dest, "wb") as fh:
            await asyncio.to_thread(shutil.copyfileobj, upload.file, fh)
        await upload.close()
        return dest


__all__ = ["CoercionResult", "ConfigResolver", "DEFAULT_IGNORE", "ModelAdmin", "ModelConfig"]


# The End
