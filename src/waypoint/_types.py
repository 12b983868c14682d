"""Shared type definitions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

Translate = Callable[[str], str]
Parameters = Mapping[str, Any]
Captures = dict[str, str | None]
Translations = Mapping[str, Mapping[str, str]]
