# -*- coding: utf-8 -*-
"""
menu

Admin navigation builder decoupled from the page registry.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .registry import Page, PageOptions


@dataclass(frozen=True)
class NavEntry:
    """Navigation view of a registered page."""

    title: str
    path: str
    options: PageOptions
    index: int

    @property
    def icon_class(self) -> str | None:
        return self.options.icon_class

    @property
    def css_class(self) -> str | None:
        return self.options.css_class


class MenuBuilder:
    """Manage nav entries and assemble the ordered main menu."""

    def __init__(self) -> None:
        """Initialize an empty collection of nav entries."""

        self._items: List[NavEntry] = []
        self._cache: List[NavEntry] | None = None

    def register_page(self, page: Page) -> NavEntry | None:
        """Append a nav entry for ``page`` unless its options hide it."""

        if not page.options.nav:
            return None
        return self.register_item(page.title, page.path, page.options)

    def register_item(
        self,
        title: str,
        path: str,
        options: PageOptions | None = None,
    ) -> NavEntry:
        """Register a main navigation menu item."""

        entry = NavEntry(
            title=title,
            path=path,
            options=options or PageOptions(),
            index=len(self._items),
        )
        self._items.append(entry)
        self._cache = None
        return entry

    def build_main_menu(self) -> List[NavEntry]:
        """Return entries ordered by explicit ``order`` then registration index.

        Entries with an ``order`` always precede entries without one.
        """

        if self._cache is None:
            self._cache = sorted(self._items, key=self._sort_key)
        return list(self._cache)

    @staticmethod
    def _sort_key(entry: NavEntry) -> tuple[int, float]:
        if entry.options.order is not None:
            return (0, float(entry.options.order))
        return (1, float(entry.index))


__all__ = ["MenuBuilder", "NavEntry"]


# The End
