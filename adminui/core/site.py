# -*- coding: utf-8 -*-
"""
site

Top-level admin service owning the page registry, menu, actions and router.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping

from fastapi import APIRouter, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from ..conf import AdminUISettings, current_settings
from .actions import ActionRegistry, InstanceAction, ModelAction
from .auth import AdminGuard, AdminGuardMiddleware
from .dispatcher import PageDispatcher
from .exceptions import ConfigurationError
from .flash import get_flashed_messages
from .handlers import as_handler
from .menu import MenuBuilder, NavEntry
from .registry import Page, PageOptions, PageRegistry, Route
from .templates import TemplateService

logger = logging.getLogger(__name__)


class AdminSite:
    """Admin registry: pages, routes, navigation and actions."""

    def __init__(
        self,
        *,
        settings: AdminUISettings | None = None,
        templates: TemplateService | None = None,
        guard: AdminGuard | None = None,
        router: APIRouter | None = None,
    ) -> None:
        """Initialize the site and protect the admin base path."""

        self._settings = settings or current_settings()
        self.registry = PageRegistry(self._settings.base_path)
        self.menu_builder = MenuBuilder()
        self.actions = ActionRegistry()
        self.templates = templates or TemplateService(settings=self._settings)
        self.guard = guard or AdminGuard(login_path=self._settings.login_path or "/")
        self.router = router or APIRouter()
        self.dispatcher = PageDispatcher(
            self.registry,
            self.templates,
            layout_template=self._settings.admin_template,
            context_factory=self.build_template_ctx,
        )
        self._mounted = False
        self.templates.add_globals(
            get_flashed_messages=get_flashed_messages,
            admin_url=self.url,
        )
        self._setup_routes()

    @property
    def settings(self) -> AdminUISettings:
        return self._settings

    @property
    def base_path(self) -> str:
        """Return the configured admin prefix."""
        return self.registry.base_path

    @property
    def title(self) -> str:
        return self._settings.site_title

    @property
    def nav(self) -> List[NavEntry]:
        """Return the ordered main navigation."""
        return self.menu_builder.build_main_menu()

    def url(self, path: str = "/") -> str:
        """Return the absolute admin URL for a site-relative ``path``."""
        return self.registry.build_path(path)

    def _setup_routes(self) -> None:
        base = self.base_path or "/"
        if self._settings.admin_only:
            self.guard.ensure_admin(base)
            self.guard.ensure_admin(f"{base.rstrip('/')}/*")
        else:
            self.guard.protected_route(base)
            self.guard.protected_route(f"{base.rstrip('/')}/*")
        self.register_page(
            self._settings.site_title,
            "/",
            {"nav": False},
            self._dashboard,
        )

    def _dashboard(self, request: Request, response: Response) -> str:
        return self._settings.dashboard_content

    # ==== Registration ====
    def register_page(
        self,
        title: str,
        path: str,
        options: PageOptions | Mapping[str, Any] | Any = None,
        handler: Any = None,
    ) -> Page:
        """Register a navigable page rendered through the dispatcher.

        Args:
            title: page title, also used as nav label
            path: path relative to the admin base path
            options: ``PageOptions`` or mapping; may be the handler when
                ``handler`` is omitted
            handler: template name, callable or ``RenderDirective``
        """
        if handler is None:
            if options is None or isinstance(options, (PageOptions, Mapping)):
                raise ConfigurationError(f"Admin page '{title}' requires a handler")
            handler, options = options, None
        self._ensure_open()
        page = Page(
            title=title,
            path=self.registry.build_path(path),
            handler=as_handler(handler),
            options=PageOptions.from_value(options),
        )
        self.registry.add_page(page)
        logger.debug("Registering admin page %s", page.path)
        self.router.add_api_route(
            page.path,
            self.dispatcher.dispatch,
            methods=["GET"],
            name=page.path,
            include_in_schema=False,
        )
        self.menu_builder.register_page(page)
        return page

    def register_route(self, *args: Any) -> Route:
        """Register a bare route: ``(method, path, handler)`` or ``(path, handler)``.

        The two-argument form binds a POST route.
        """
        if len(args) == 2:
            method, (path, handler) = "POST", args
        elif len(args) == 3:
            method, path, handler = args
        else:
            raise ConfigurationError(
                "register_route expects (method, path, handler) or (path, handler)"
            )
        if not callable(handler):
            raise ConfigurationError(f"Route handler for '{path}' must be callable")
        self._ensure_open()
        route = Route(
            method=str(method).upper(),
            path=self.registry.build_path(path),
            handler=handler,
        )
        self.registry.add_route(route)
        logger.debug("Registering admin route %s %s", route.method, route.path)
        self.router.add_api_route(
            route.path,
            self._route_endpoint(route.handler),
            methods=[route.method],
            name=f"{route.method} {route.path}",
            include_in_schema=False,
        )
        return route

    def model_action(self, model: str, label: str, sub_url: str, **opts: Any) -> ModelAction:
        """Register a model-scoped action (``'*'`` applies to all models)."""
        return self.actions.model_action(model, label, sub_url, **opts)

    def instance_action(
        self, model: str, label: str, sub_url: str, **opts: Any
    ) -> InstanceAction:
        """Register an instance-scoped action (``'*'`` applies to all models)."""
        return self.actions.instance_action(model, label, sub_url, **opts)

    def _ensure_open(self) -> None:
        if self._mounted:
            raise ConfigurationError("Admin registrations are closed once the site is mounted")

    @staticmethod
    def _route_endpoint(handler: Callable[..., Any]) -> Callable[..., Any]:
        async def endpoint(request: Request) -> Response:
            result = handler(request)
            if inspect.isawaitable(result):
                result = await result
            return result

        return endpoint

    # ==== Rendering ====
    def build_template_ctx(self, request: Request, page: Page | None = None) -> Dict[str, Any]:
        """Return the standard context shared by every admin template."""

        return {
            "title": page.title if page is not None else self.title,
            "nav": self.nav,
            "config": self._settings,
            "base_path": self.base_path,
            "site_title": self.title,
            "request": request,
            "user": getattr(request.state, "user", None),
        }

    # ==== Mounting ====
    def mount(self, app: FastAPI) -> None:
        """Attach the admin router and middleware to ``app``."""

        if self._mounted:
            return
        app.include_router(self.router)
        app.add_middleware(AdminGuardMiddleware, guard=self.guard)
        app.add_middleware(
            SessionMiddleware,
            secret_key=self._settings.session_secret,
            session_cookie=self._settings.session_cookie,
        )
        app.state.admin_site = self
        self._mounted = True


__all__ = ["AdminSite"]


# The End
