# -*- coding: utf-8 -*-
"""
services

Collaborator services used by the CRUD engine.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from .importer import FileImportService, ImportService

__all__ = ["FileImportService", "ImportService"]


# The End
