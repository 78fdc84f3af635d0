# -*- coding: utf-8 -*-
"""
importer

File import collaborator used by the CRUD engine's upload pipeline.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import asyncio
import csv
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping

from ..exceptions import ImportFailed
from ...adapters.base import BaseAdapter

logger = logging.getLogger(__name__)

RowParser = Callable[[Path, Mapping[str, Any]], List[Dict[str, Any]]]


class ImportService(ABC):
    """Contract for turning an uploaded file into stored instances."""

    @abstractmethod
    async def import_file_to_model(
        self,
        model_name: str,
        file_path: str | Path,
        options: Mapping[str, Any],
    ) -> List[Any]:
        """Import ``file_path`` into ``model_name`` returning created instances."""


def parse_csv(path: Path, options: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return CSV rows as dictionaries keyed by the header row."""
    delimiter = options.get("delimiter", ",")
    encoding = options.get("encoding", "utf-8")
    with open(path, newline="", encoding=encoding) as fh:
        return [dict(row) for row in csv.DictReader(fh, delimiter=delimiter)]


def parse_json(path: Path, options: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return JSON rows; accepts a list or an object with a ``rows`` list."""
    encoding = options.get("encoding", "utf-8")
    with open(path, encoding=encoding) as fh:
        payload = json.load(fh)
    if isinstance(payload, dict):
        payload = payload.get("rows", [])
    if not isinstance(payload, list):
        raise ImportFailed("JSON import expects a list of objects")
    return [dict(row) for row in payload]


class FileImportService(ImportService):
    """Parse CSV or JSON uploads and create one record per row."""

    def __init__(self, adapter: BaseAdapter) -> None:
        self._adapter = adapter
        self._parsers: Dict[str, RowParser] = {
            "csv": parse_csv,
            "json": parse_json,
        }

    def register_parser(self, upload_type: str, parser: RowParser) -> None:
        """Support an additional ``upload_type``."""
        self._parsers[upload_type.lower()] = parser

    async def import_file_to_model(
        self,
        model_name: str,
        file_path: str | Path,
        options: Mapping[str, Any],
    ) -> List[Any]:
        upload_type = str(options.get("type", "csv")).lower()
        parser = self._parsers.get(upload_type)
        if parser is None:
            raise ImportFailed(f"Unsupported upload type '{upload_type}'")
        try:
            rows = await asyncio.to_thread(parser, Path(file_path), options)
        except (OSError, ValueError, csv.Error) as exc:
            raise ImportFailed(f"Could not parse {upload_type} upload: {exc}") from exc

        mapping: Mapping[str, str] = options.get("field_map") or {}
        store = self._adapter.store(model_name)
        created: List[Any] = []
        for row in rows:
            values = {mapping.get(key, key): value for key, value in row.items()}
            created.append(await store.create(values))
        logger.info("Imported %d %s records from %s", len(created), model_name, file_path)
        return created


__all__ = [
    "FileImportService",
    "ImportService",
    "parse_csv",
    "parse_json",
]


# The End
