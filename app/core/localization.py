from collections.abc import Mapping
from enum import Enum
from typing import Any


class Language(str, Enum):
    ES = "es"
    EN = "en"
    PT = "pt"


# Base columns hold the Spanish text; other languages live in <field>_<lang>.
DEFAULT_LANGUAGE = Language.ES


def parse_language(value: str | None) -> Language:
    if not value:
        return DEFAULT_LANGUAGE
    try:
        return Language(value.strip().lower())
    except ValueError:
        return DEFAULT_LANGUAGE


def resolve(base: str | None, variants: Mapping[str, str | None], lang: Language | str) -> str | None:
    """Return the ``lang`` variant when present and non-blank, else ``base``."""
    key = lang.value if isinstance(lang, Language) else str(lang)
    variant = variants.get(key)
    if variant and variant.strip():
        return variant
    return base


def localize(record: Any, field: str, lang: Language) -> str | None:
    """Resolve ``record.<field>`` against its ``<field>_<lang>`` siblings."""
    variants = {
        language.value: getattr(record, f"{field}_{language.value}", None)
        for language in Language
        if language is not DEFAULT_LANGUAGE
    }
    return resolve(getattr(record, field), variants, lang)
