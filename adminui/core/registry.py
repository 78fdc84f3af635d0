# -*- coding: utf-8 -*-
"""
registry

In-memory bookkeeping for admin pages and bare routes.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping

from .exceptions import ConfigurationError
from .handlers import PageHandler

_COLON_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class PageOptions:
    """Display options attached to a page."""

    icon_class: str | None = None
    nav: bool = True
    order: float | None = None
    css_class: str | None = None

    @classmethod
    def from_value(cls, value: "PageOptions | Mapping[str, Any] | None") -> "PageOptions":
        """Build options from ``value`` accepting snake and camel case keys."""

        if value is None:
            return cls()
        if isinstance(value, PageOptions):
            return value
        icon = value.get("icon_class", value.get("iconClass"))
        css = value.get("css_class", value.get("class"))
        order = value.get("order")
        if order is not None and not isinstance(order, (int, float)):
            raise ConfigurationError(f"Page order must be numeric, got {order!r}")
        return cls(
            icon_class=icon,
            nav=value.get("nav", True) is not False,
            order=order,
            css_class=css,
        )


@dataclass(frozen=True)
class Page:
    """Navigable admin page rendered through the dispatcher."""

    title: str
    path: str
    handler: PageHandler
    options: PageOptions = field(default_factory=PageOptions)


@dataclass(frozen=True)
class Route:
    """Bare admin endpoint bound straight onto the router."""

    method: str
    path: str
    handler: Callable[..., Any]


class PageRegistry:
    """Store registered pages and routes keyed by their full path."""

    def __init__(self, base_path: str = "/admin") -> None:
        """Bind the registry to ``base_path`` used to prefix every path."""

        self._base_path = base_path.rstrip("/")
        self._pages: Dict[str, Page] = {}
        self._routes: List[Route] = []

    @property
    def base_path(self) -> str:
        """Return the prefix applied to every registered path."""

        return self._base_path

    def build_path(self, path: str) -> str:
        """Return ``path`` normalised and prefixed with the base path."""

        normalized = path.strip()
        if not normalized.startswith("/"):
            normalized = f"/{normalized}"
        normalized = _COLON_PARAM.sub(r"{\1}", normalized)
        if len(normalized) > 1:
            normalized = normalized.rstrip("/")
        if normalized == "/":
            return self._base_path or "/"
        return f"{self._base_path}{normalized}"

    def add_page(self, page: Page) -> Page:
        """Store ``page``; paths must be unique."""

        if page.path in self._pages:
            raise ConfigurationError(f"Admin page already registered at '{page.path}'")
        self._pages[page.path] = page
        return page

    def add_route(self, route: Route) -> Route:
        """Store ``route`` for introspection."""

        self._routes.append(route)
        return route

    def get_page(self, path: str) -> Page | None:
        """Return the page registered at ``path`` if any."""

        return self._pages.get(path)

    def iter_pages(self) -> Iterator[Page]:
        """Yield pages in registration order."""

        return iter(list(self._pages.values()))

    def iter_routes(self) -> Iterator[Route]:
        """Yield bare routes in registration order."""

        return iter(list(self._routes))

    @property
    def page_list(self) -> List[Page]:
        """Return a list snapshot of registered pages."""

        return list(self._pages.values())


__all__ = ["Page", "PageOptions", "PageRegistry", "Route"]


# The End
