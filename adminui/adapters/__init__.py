# -*- coding: utf-8 -*-
"""
adapters

Storage adapters resolving model names to stores.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from .base import BaseAdapter, ModelQuery, ModelStore

__all__ = ["BaseAdapter", "ModelQuery", "ModelStore"]


# The End
