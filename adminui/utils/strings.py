# -*- coding: utf-8 -*-
"""
strings

String helpers used to derive names, labels and URLs from model names.

Version:0.1.0
Author: Timur Kady
Email: timurkady@yandex.com
"""

from __future__ import annotations

import re

# Irregular plurals that don't follow standard rules
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "datum": "data",
    "medium": "media",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "status": "statuses",
    "address": "addresses",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def pluralize(word: str) -> str:
    """Convert a singular English word to its plural form.

    CamelCase words pluralize their last component, so ``testModel``
    becomes ``testModels`` and ``Policy`` becomes ``Policies``.
    """
    if not word:
        return word

    lower_word = word.lower()
    if lower_word in _IRREGULAR_PLURALS:
        plural = _IRREGULAR_PLURALS[lower_word]
        if word[0].isupper():
            return plural.capitalize()
        return plural

    camel_match = re.match(r"^(.+?)([A-Z][a-z]+)$", word)
    if camel_match:
        prefix, last_word = camel_match.groups()
        if prefix and last_word != word:
            return prefix + pluralize(last_word)

    if lower_word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if lower_word.endswith("y"):
        if len(word) > 1 and lower_word[-2] in "aeiou":
            return word + "s"
        return word[:-1] + "ies"
    if lower_word.endswith("fe"):
        return word[:-2] + "ves"
    if lower_word.endswith(("elf", "alf", "olf", "eaf", "oaf", "arf")):
        return word[:-1] + "ves"
    if lower_word.endswith(("hero", "potato", "tomato", "echo", "veto")):
        return word + "es"
    return word + "s"


def split_words(name: str) -> list[str]:
    """Split snake_case, kebab-case and camelCase identifiers into words."""
    spaced = _CAMEL_BOUNDARY.sub(" ", name)
    return [part for part in re.split(r"[\s_\-]+", spaced) if part]


def title_case(name: str) -> str:
    """Return ``name`` as space separated capitalised words."""
    return " ".join(part[:1].upper() + part[1:] for part in split_words(name))


def humanize(name: str) -> str:
    """Return a display name for a model identifier (``testModel`` -> ``Test Model``)."""
    return title_case(name)


def dasherize(name: str) -> str:
    """Return the lowercase dash separated form of ``name``."""
    return "-".join(part.lower() for part in split_words(name))


__all__ = ["dasherize", "humanize", "pluralize", "split_words", "title_case"]


# The End
