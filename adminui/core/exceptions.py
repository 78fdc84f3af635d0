# -*- coding: utf-8 -*-
"""
exceptions

Custom domain exceptions for the admin core.

Version: 0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from typing import Any


class AdminError(Exception):
    """Base class for admin-specific exceptions."""


class ConfigurationError(AdminError):
    """Raised at startup when a registration or model config is invalid."""


class FetchError(AdminError):
    """Raised when the storage layer fails to read instances for a view."""

    def __init__(self, model: str, detail: str | None = None) -> None:
        message = f"Failed to fetch {model}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.model = model
        self.detail = detail


class SaveError(AdminError):
    """Raised when a create or update is rejected by the storage layer."""

    def __init__(self, model: str, record_id: Any | None, detail: str) -> None:
        super().__init__(detail)
        self.model = model
        self.record_id = record_id
        self.detail = detail


class SilentCoercionError(AdminError):
    """Describe a submitted field dropped because it could not be parsed.

    Instances are collected rather than raised so the save can proceed.
    """

    def __init__(self, field: str, raw_value: Any, reason: str) -> None:
        super().__init__(f"Field '{field}' dropped: {reason}")
        self.field = field
        self.raw_value = raw_value
        self.reason = reason


class ImportFailed(AdminError):
    """Raised when the import collaborator cannot process an uploaded file."""


# The End
