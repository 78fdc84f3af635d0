# -*- coding: utf-8 -*-
"""
actions

Registry of model-scoped and instance-scoped UI actions.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

WILDCARD = "*"


@dataclass(frozen=True)
class ModelAction:
    """Operation exposed for a model as a whole (e.g. ``Create``)."""

    label: str
    sub_url: str
    icon_class: str | None = None
    suffix_name: str | None = None
    display_class: str | None = None

    def url(self, base: str) -> str:
        """Return the action URL below the model list ``base``."""
        return f"{base.rstrip('/')}/{self.sub_url.lstrip('/')}"


@dataclass(frozen=True)
class InstanceAction(ModelAction):
    """Operation exposed for a single instance (e.g. ``Edit``)."""

    def url(self, base: str, pk: Any = None) -> str:  # type: ignore[override]
        """Return the action URL for the instance identified by ``pk``."""
        return f"{base.rstrip('/')}/{pk}/{self.sub_url.lstrip('/')}"


class ActionRegistry:
    """Keep per-model and wildcard action lists in insertion order."""

    def __init__(self) -> None:
        self._model_actions: Dict[str, List[ModelAction]] = {}
        self._instance_actions: Dict[str, List[InstanceAction]] = {}

    def model_action(
        self,
        model: str,
        label: str,
        sub_url: str,
        *,
        icon_class: str | None = None,
        suffix_name: str | None = None,
        display_class: str | None = None,
    ) -> ModelAction:
        """Register a model action for ``model`` or ``'*'`` for every model."""

        action = ModelAction(
            label=label,
            sub_url=sub_url,
            icon_class=icon_class,
            suffix_name=suffix_name,
            display_class=display_class,
        )
        self._model_actions.setdefault(model or WILDCARD, []).append(action)
        return action

    def instance_action(
        self,
        model: str,
        label: str,
        sub_url: str,
        *,
        icon_class: str | None = None,
        suffix_name: str | None = None,
        display_class: str | None = None,
    ) -> InstanceAction:
        """Register an instance action for ``model`` or ``'*'`` for every model."""

        action = InstanceAction(
            label=label,
            sub_url=sub_url,
            icon_class=icon_class,
            suffix_name=suffix_name,
            display_class=display_class,
        )
        self._instance_actions.setdefault(model or WILDCARD, []).append(action)
        return action

    def get_model_actions(self, model: str) -> List[ModelAction]:
        """Return wildcard actions followed by actions registered for ``model``."""

        return self._collect(self._model_actions, model)

    def get_instance_actions(self, model: str) -> List[InstanceAction]:
        """Return wildcard instance actions followed by those for ``model``."""

        return self._collect(self._instance_actions, model)

    @staticmethod
    def _collect(table: Dict[str, List[Any]], model: str) -> List[Any]:
        combined = list(table.get(WILDCARD, []))
        if model != WILDCARD:
            combined.extend(table.get(model, []))
        return [action for action in combined if action]


__all__ = ["ActionRegistry", "InstanceAction", "ModelAction", "WILDCARD"]


# The End
