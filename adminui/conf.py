# -*- coding: utf-8 -*-
"""
conf

Runtime configuration utilities for the admin console.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Callable, Mapping


@dataclass
class AdminUISettings:
    """Admin console settings: paths, session, templates and uploads."""

    secret_key: str = field(default_factory=lambda: "change-me")
    session_secret: str | None = None
    session_cookie: str = "adminui_session"
    base_path: str = "/admin"
    admin_template: str = "admin"
    admin_only: bool = True
    login_path: str = "/login"
    site_title: str = "Admin"
    dashboard_content: str = "Hello Admin"
    upload_dir: Path = field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "adminui-uploads"
    )

    def __post_init__(self) -> None:
        """Normalise prefixes and default the session secret to ``secret_key``."""
        if not self.session_secret:
            self.session_secret = self.secret_key
        self.base_path = self._normalize_prefix(self.base_path)
        self.login_path = self._normalize_prefix(self.login_path)
        if not isinstance(self.upload_dir, Path):
            self.upload_dir = Path(str(self.upload_dir))

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        prefix: str = "ADMINUI_",
    ) -> "AdminUISettings":
        """Build settings from ``ADMINUI_*`` variables (``prefix`` is configurable)."""
        source = env if env is not None else os.environ
        data = {key[len(prefix) :]: value for key, value in source.items() if key.startswith(prefix)}
        secret_key = data.get("SECRET_KEY") or source.get("SECRET_KEY") or "change-me"
        upload_dir = data.get("UPLOAD_DIR") or (
            Path(tempfile.gettempdir()) / "adminui-uploads"
        )
        return cls(
            secret_key=secret_key,
            session_secret=data.get("SESSION_SECRET"),
            session_cookie=data.get("SESSION_COOKIE") or "adminui_session",
            base_path=data.get("BASE_PATH") or "/admin",
            admin_template=data.get("ADMIN_TEMPLATE") or "admin",
            admin_only=cls._to_bool(data.get("ADMIN_ONLY"), default=True),
            login_path=data.get("LOGIN_PATH") or "/login",
            site_title=data.get("SITE_TITLE") or "Admin",
            dashboard_content=data.get("DASHBOARD_CONTENT") or "Hello Admin",
            upload_dir=Path(upload_dir),
        )

    @staticmethod
    def _to_bool(value: str | None, *, default: bool = False) -> bool:
        """Return a boolean parsed from ``value`` with a ``default`` fallback."""

        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        return default

    @staticmethod
    def _normalize_prefix(value: str) -> str:
        """Ensure paths contain a single leading slash and no trailing slash."""
        stripped = value.strip().strip("/")
        if not stripped:
            return ""
        return "/" + stripped


class SettingsManager:
    """Central storage for the active ``AdminUISettings`` instance."""

    def __init__(self, initial: AdminUISettings | None = None) -> None:
        """Hold ``initial`` settings (loaded from the environment when omitted)."""

        self._lock = RLock()
        self._settings = initial
        self._callbacks: list[Callable[[AdminUISettings], None]] = []

    def configure(self, settings: AdminUISettings) -> None:
        """Install a new settings instance and notify observers."""
        with self._lock:
            self._settings = settings
            for callback in list(self._callbacks):
                callback(settings)

    def current(self) -> AdminUISettings:
        """Return the active settings, lazily initializing from the environment."""
        with self._lock:
            if self._settings is None:
                self._settings = AdminUISettings.from_env()
            return self._settings

    def register(self, callback: Callable[[AdminUISettings], None]) -> None:
        """Call ``callback`` with the new settings on every ``configure``."""
        with self._lock:
            self._callbacks.append(callback)

    def unregister(self, callback: Callable[[AdminUISettings], None]) -> None:
        """Stop notifying ``callback``."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def reset(self) -> None:
        """Forget the active settings so the next read reloads the environment."""
        with self._lock:
            self._settings = None


_settings_manager = SettingsManager()


def configure(settings: AdminUISettings) -> None:
    """Install ``settings`` for every admin component created afterwards."""
    _settings_manager.configure(settings)


def current_settings() -> AdminUISettings:
    """Return the active settings instance used by admin components."""
    return _settings_manager.current()


def reset_settings() -> None:
    """Drop the active settings instance."""
    _settings_manager.reset()


def register_settings_observer(callback: Callable[[AdminUISettings], None]) -> None:
    """Subscribe to configuration changes for long-lived components."""
    _settings_manager.register(callback)


def unregister_settings_observer(callback: Callable[[AdminUISettings], None]) -> None:
    """Unsubscribe ``callback`` from configuration changes."""
    _settings_manager.unregister(callback)


__all__ = [
    "AdminUISettings",
    "SettingsManager",
    "configure",
    "current_settings",
    "reset_settings",
    "register_settings_observer",
    "unregister_settings_observer",
]


# The End
