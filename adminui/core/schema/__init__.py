# -*- coding: utf-8 -*-
"""
schema

Schema descriptor models shared by adapters and the CRUD engine.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from .descriptors import (
    AttributeDescriptor,
    Choice,
    FieldDescriptor,
    FieldKind,
    ModelDescriptor,
    Relation,
)

__all__ = [
    "AttributeDescriptor",
    "Choice",
    "FieldDescriptor",
    "FieldKind",
    "ModelDescriptor",
    "Relation",
]


# The End
