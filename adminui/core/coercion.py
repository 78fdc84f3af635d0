# -*- coding: utf-8 -*-
"""
coercion

Turn submitted form values back into typed storage values.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from .exceptions import SilentCoercionError
from .schema.descriptors import AttributeDescriptor

logger = logging.getLogger(__name__)

STRUCTURED_TYPES = frozenset({"json", "mixed"})


@dataclass
class CoercionResult:
    """Coerced values plus the fields that had to be dropped."""

    values: Dict[str, Any]
    dropped: List[SilentCoercionError] = field(default_factory=list)

    @property
    def dropped_fields(self) -> List[str]:
        return [error.field for error in self.dropped]


def coerce_values(
    values: Mapping[str, Any],
    attributes: Iterable[AttributeDescriptor],
) -> CoercionResult:
    """Coerce ``values`` according to the attribute types.

    Booleans follow checkbox semantics: present means ``True`` whatever the
    submitted value, absent means ``False``. ``json``/``mixed`` strings are
    parsed; unparsable ones are removed and reported in ``dropped``.
    """

    result = CoercionResult(values=dict(values))
    for attr in attributes:
        name = attr.name
        if attr.type == "boolean":
            result.values[name] = name in values
            continue
        if attr.type in STRUCTURED_TYPES and isinstance(result.values.get(name), str):
            raw = result.values[name]
            try:
                result.values[name] = json.loads(raw)
            except ValueError as exc:
                del result.values[name]
                error = SilentCoercionError(name, raw, str(exc))
                result.dropped.append(error)
                logger.warning("Dropping field %s: %s", name, exc)
    return result


__all__ = ["CoercionResult", "STRUCTURED_TYPES", "coerce_values"]


# The End
