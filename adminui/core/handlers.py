# -*- coding: utf-8 -*-
"""
handlers

Tagged page handler variants understood by the dispatcher.

A page handler is exactly one of :class:`StaticTemplate`, :class:`Callback`
or :class:`RenderDirective`. Host modules may pass a plain template name, a
callable or a directive to :meth:`AdminSite.register_page`; the value is
tagged once at registration through :func:`as_handler` and the dispatcher
only ever branches on the tag.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Union


@dataclass(frozen=True)
class StaticTemplate:
    """Render ``name`` with the standard admin context."""

    name: str


@dataclass(frozen=True)
class Callback:
    """Invoke ``func(request, response)`` and render whatever it returns."""

    func: Callable[..., Any]


@dataclass(frozen=True)
class RenderDirective:
    """Render ``template`` with ``context`` merged over the standard context.

    Returned by callbacks to pick an explicit template, or registered
    directly as a page handler.
    """

    template: str
    context: Dict[str, Any] = field(default_factory=dict)


PageHandler = Union[StaticTemplate, Callback, RenderDirective]


def as_handler(value: Any) -> PageHandler:
    """Return the tagged handler for a raw registration ``value``."""

    if isinstance(value, (StaticTemplate, Callback, RenderDirective)):
        return value
    if isinstance(value, str):
        return StaticTemplate(value)
    if isinstance(value, Mapping) and "template" in value:
        return RenderDirective(
            template=str(value["template"]),
            context=dict(value.get("options") or value.get("context") or {}),
        )
    if callable(value):
        return Callback(value)
    raise TypeError(
        f"Unsupported page handler {value!r}: expected a template name, "
        "a callable or a RenderDirective"
    )


__all__ = [
    "Callback",
    "PageHandler",
    "RenderDirective",
    "StaticTemplate",
    "as_handler",
]


# The End
