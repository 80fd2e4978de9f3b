from typing import Optional

from fastapi import Header

from src.config import settings

MESSAGES = {
    "en": {
        "response_failed": "The request could not be completed.",
        "unsupported_sort_field": "Sorting by '{field}' is not supported",
    },
    "ru": {
        "response_failed": "Не удалось выполнить запрос.",
        "unsupported_sort_field": "Сортировка по полю '{field}' не поддерживается",
    },
}


def translate(key: str, locale: Optional[str] = None, **params) -> str:
    """Look up ``key`` in ``locale``, then in the default locale, then give up and return the key."""
    for candidate in (locale, settings.DEFAULT_LOCALE):
        catalog = MESSAGES.get(candidate or "")
        if catalog and key in catalog:
            return catalog[key].format(**params)
    return key


def get_locale(accept_language: Optional[str] = Header(None)) -> str:
    """Pick the first supported language from an Accept-Language header."""
    if accept_language:
        for part in accept_language.split(","):
            tag = part.split(";")[0].strip().lower()
            language = tag.split("-")[0]
            if language in MESSAGES:
                return language
    return settings.DEFAULT_LOCALE
