# -*- coding: utf-8 -*-
"""
auth

Admin access guard and the middleware enforcing it.

The guard only records which prefixes are protected. Deciding who the user is
and whether they are an administrator is delegated to the ``user_loader`` and
``admin_check`` callables supplied by the host application.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, List, Union

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response

logger = logging.getLogger(__name__)

UserLoader = Callable[[Request], Union[Any, Awaitable[Any]]]
AdminCheck = Callable[[Any], bool]

SESSION_USER_KEY = "adminui_user"


def session_user_loader(request: Request) -> Any:
    """Return the user stored in the session under ``SESSION_USER_KEY``."""

    if "session" not in request.scope:
        return None
    return request.session.get(SESSION_USER_KEY)


def default_admin_check(user: Any) -> bool:
    """Treat users flagged ``is_admin`` (attribute or mapping key) as admins."""

    if user is None:
        return False
    if isinstance(user, dict):
        return bool(user.get("is_admin"))
    return bool(getattr(user, "is_admin", False))


class AdminGuard:
    """Keep track of protected and admin-only path patterns."""

    def __init__(
        self,
        *,
        login_path: str = "/login",
        user_loader: UserLoader | None = None,
        admin_check: AdminCheck | None = None,
    ) -> None:
        self.login_path = login_path or "/"
        self.user_loader = user_loader or session_user_loader
        self.admin_check = admin_check or default_admin_check
        self._protected: List[str] = []
        self._admin_only: List[str] = []

    def protected_route(self, path: str) -> None:
        """Require an authenticated user below ``path`` (``/*`` for subpaths)."""

        if path not in self._protected:
            self._protected.append(path)

    def ensure_admin(self, path: str) -> None:
        """Require an administrator below ``path`` (``/*`` for subpaths)."""

        self.protected_route(path)
        if path not in self._admin_only:
            self._admin_only.append(path)

    def is_protected(self, path: str) -> bool:
        return any(self._matches(pattern, path) for pattern in self._protected)

    def is_admin_only(self, path: str) -> bool:
        return any(self._matches(pattern, path) for pattern in self._admin_only)

    def is_login_path(self, path: str) -> bool:
        if self.login_path == "/":
            return path == "/"
        return path == self.login_path or path.startswith(f"{self.login_path}/")

    async def load_user(self, request: Request) -> Any:
        """Return the user for ``request`` using the configured loader."""

        user = self.user_loader(request)
        if inspect.isawaitable(user):
            user = await user
        return user

    @staticmethod
    def _matches(pattern: str, path: str) -> bool:
        normalized = path.rstrip("/") or "/"
        if pattern.endswith("/*"):
            prefix = pattern[:-2].rstrip("/")
            return normalized.startswith(f"{prefix}/")
        return normalized == (pattern.rstrip("/") or "/")


class AdminGuardMiddleware(BaseHTTPMiddleware):
    """Global guard for the admin interface.

    Performs 307 redirects to the login path when no user is present and
    answers 403 to authenticated users lacking admin rights on admin-only
    paths.
    """

    def __init__(self, app, *, guard: AdminGuard) -> None:
        super().__init__(app)
        self.guard = guard

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if self.guard.is_login_path(path) or not self.guard.is_protected(path):
            return await call_next(request)

        user = await self.guard.load_user(request)
        if user is None:
            return RedirectResponse(self.guard.login_path, status_code=307)
        if self.guard.is_admin_only(path) and not self.guard.admin_check(user):
            logger.info("Rejected non-admin user on %s", path)
            return PlainTextResponse("Forbidden", status_code=403)

        request.state.user = user
        return await call_next(request)


__all__ = [
    "AdminGuard",
    "AdminGuardMiddleware",
    "SESSION_USER_KEY",
    "default_admin_check",
    "session_user_loader",
]


# The End
