"""Locale-ranked text lookup.

Translations are plain in-memory mappings of ``locale -> {text: translation}``.
A requested locale is generalised step by step (``nl-be`` -> ``nl``) until a
translation for the text is found; without one the text is returned as is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from waypoint._types import Translate, Translations


def canonicalize_locale(locale: str) -> str:
    """Normalise a locale tag: ``nl_NL`` -> ``nl-nl``."""
    return locale.strip().replace("_", "-").lower()


def fallback_chain(locale: str) -> list[str]:
    """Return the progressively generalised tags for *locale*.

    ``"nl-BE"`` gives ``["nl-be", "nl"]``. Single-letter subtags (``x``
    private-use markers) are never left dangling at the end of a tag.
    """
    subtags = [part for part in canonicalize_locale(locale).split("-") if part]
    chain: list[str] = []
    while subtags:
        chain.append("-".join(subtags))
        subtags.pop()
        while subtags and len(subtags[-1]) == 1:
            subtags.pop()
    return chain


def lookup_locale(candidates: Iterable[str], locale: str, default: str | None = None) -> str | None:
    """Pick the candidate key that best matches *locale*.

    Candidates are compared in canonical form; the original candidate key
    is returned, or *default* when nothing matches.
    """
    index = {canonicalize_locale(candidate): candidate for candidate in candidates}
    for tag in fallback_chain(locale):
        if tag in index:
            return index[tag]
    return default


class Translator:
    """In-memory translations with a default locale."""

    __slots__ = ("_translations", "locale")

    def __init__(self, translations: Translations | None = None, locale: str | None = None) -> None:
        self.locale = locale
        self._translations: dict[str, dict[str, str]] = {}
        for key, messages in (translations or {}).items():
            self.add(key, messages)

    @property
    def locales(self) -> list[str]:
        return list(self._translations)

    def add(self, locale: str, messages: dict[str, str] | Translations) -> None:
        """Merge *messages* into the translations for *locale*."""
        self._translations.setdefault(locale, {}).update(messages)

    def translate(self, text: str, locale: str | None = None) -> str:
        """Translate *text* for *locale*, falling back to the default locale."""
        locale = locale or self.locale
        if not locale:
            return text

        tried: set[str] = set()
        for tag in fallback_chain(locale):
            key = lookup_locale(self._translations, tag)
            if key is None or key in tried:
                continue
            tried.add(key)
            messages = self._translations[key]
            if text in messages:
                return messages[text]
        return text

    def bind(self, locale: str | None = None) -> Translate:
        """Return a one-argument translate function fixed to *locale*."""

        def translate(text: str) -> str:
            return self.translate(text, locale)

        return translate
