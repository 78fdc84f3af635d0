# -*- coding: utf-8 -*-
"""
flash

One-shot messages stored in the session between a redirect and the next page.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from typing import Dict, List

from starlette.requests import Request

FLASH_SESSION_KEY = "_adminui_flash"


def _session(request: Request) -> Dict | None:
    if "session" not in request.scope:
        return None
    return request.session


def flash(request: Request, level: str, message: str) -> None:
    """Queue ``message`` under ``level`` for the next rendered page."""

    session = _session(request)
    if session is None:
        # No session middleware: keep the message for the current request only.
        pending = getattr(request.state, "flash", [])
        pending.append({"level": level, "message": message})
        request.state.flash = pending
        return
    messages = list(session.get(FLASH_SESSION_KEY, []))
    messages.append({"level": level, "message": message})
    session[FLASH_SESSION_KEY] = messages


def get_flashed_messages(request: Request) -> List[Dict[str, str]]:
    """Return and clear queued messages."""

    messages: List[Dict[str, str]] = list(getattr(request.state, "flash", []))
    request.state.flash = []
    session = _session(request)
    if session is not None:
        messages = list(session.pop(FLASH_SESSION_KEY, [])) + messages
    return messages


__all__ = ["FLASH_SESSION_KEY", "flash", "get_flashed_messages"]


# The End
