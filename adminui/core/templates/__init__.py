# -*- coding: utf-8 -*-
"""
templates

Template rendering helpers for the admin console.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from .service import TEMPLATES_DIR, TemplateService

__all__ = ["TEMPLATES_DIR", "TemplateService"]


# The End
