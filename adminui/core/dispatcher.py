# -*- coding: utf-8 -*-
"""
dispatcher

Resolve admin page requests to their handler and render the outcome.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Mapping, TYPE_CHECKING

from fastapi import HTTPException
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, Response

from .handlers import Callback, RenderDirective, StaticTemplate, as_handler
from .registry import Page, PageRegistry

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .templates import TemplateService

logger = logging.getLogger(__name__)

ContextFactory = Callable[[Request, Page], Dict[str, Any]]


class PageDispatcher:
    """Run page handlers and turn their results into responses."""

    def __init__(
        self,
        registry: PageRegistry,
        templates: "TemplateService",
        *,
        layout_template: str,
        context_factory: ContextFactory,
    ) -> None:
        self._registry = registry
        self._templates = templates
        self._layout_template = layout_template
        self._context_factory = context_factory

    def resolve(self, request: Request) -> Page | None:
        """Return the page matching the request's route path."""

        route = request.scope.get("route")
        path = getattr(route, "path", None) or request.url.path
        page = self._registry.get_page(path)
        if page is None and path != "/" and path.endswith("/"):
            page = self._registry.get_page(path.rstrip("/"))
        return page

    async def dispatch(self, request: Request) -> Response:
        """Handle ``request`` for a registered page."""

        page = self.resolve(request)
        if page is None:
            raise HTTPException(status_code=404, detail="Admin page not found")

        handler = page.handler
        context = self._context_factory(request, page)
        try:
            if isinstance(handler, StaticTemplate):
                return await self._render(handler.name, context)
            if isinstance(handler, RenderDirective):
                return await self._render_directive(handler, context)
            if isinstance(handler, Callback):
                return await self._run_callback(handler, request, context)
        except HTTPException:
            raise
        except Exception:
            logger.exception("Admin page handler for %s failed", page.path)
            return PlainTextResponse("Internal Server Error", status_code=500)
        raise TypeError(f"Unsupported handler {handler!r} for {page.path}")

    async def _run_callback(
        self,
        handler: Callback,
        request: Request,
        context: Dict[str, Any],
    ) -> Response:
        scratch = Response()
        result = handler.func(request, scratch)
        if inspect.isawaitable(result):
            result = await result

        if isinstance(result, Mapping) and "template" in result:
            result = as_handler(result)

        if isinstance(result, Response):
            response = result
        elif not result:
            # The handler dealt with the request itself; nothing to render.
            response = Response(status_code=204)
        elif isinstance(result, RenderDirective):
            response = await self._render_directive(result, context)
        elif isinstance(result, str):
            context["content"] = result
            response = await self._render(self._layout_template, context)
        elif isinstance(result, Mapping):
            context.update(result)
            response = await self._render(self._layout_template, context)
        else:
            raise TypeError(
                f"Unsupported page handler result of type {type(result).__name__}"
            )
        return self._merge_headers(scratch, response)

    async def _render_directive(
        self, directive: RenderDirective, context: Dict[str, Any]
    ) -> HTMLResponse:
        context.update(directive.context)
        return await self._render(directive.template, context)

    async def _render(self, template: str, context: Mapping[str, Any]) -> HTMLResponse:
        body = await self._templates.render(template, context)
        return HTMLResponse(body)

    @staticmethod
    def _merge_headers(scratch: Response, response: Response) -> Response:
        """Copy headers set by the handler on ``scratch`` onto ``response``."""

        for key, value in scratch.raw_headers:
            if key.lower() in (b"content-length", b"content-type"):
                continue
            response.raw_headers.append((key, value))
        return response


__all__ = ["PageDispatcher"]


# The End
