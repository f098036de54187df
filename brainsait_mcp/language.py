from __future__ import annotations

import re
from enum import Enum
from typing import Optional

ARABIC_BLOCK = re.compile("[\u0600-\u06FF]")
# Basic Latin, Latin-1 Supplement and Latin Extended-A/B letters
LATIN_LETTER = re.compile("[A-Za-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u024F]")

RIGHT_TO_LEFT_OVERRIDE = "\u202E"
LEFT_TO_RIGHT_OVERRIDE = "\u202D"
POP_DIRECTIONAL_FORMATTING = "\u202C"


class Language(str, Enum):
    ARABIC = "ar"
    ENGLISH = "en"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["Language"] = None) -> "Language":
        """
        Map a language code (`ar`, `en`, `unknown`) to a Language.

        Unrecognised or missing codes return `default` (English unless given).
        """
        fallback = default if default is not None else cls.ENGLISH
        if not value:
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


def detect_language(text: str) -> Language:
    """
    Classify text by script.

    Any character in the Arabic Unicode block wins, even when Latin letters
    appear elsewhere in the same string. Accented Latin letters (`é`, `ñ`)
    count as Latin.
    """
    if ARABIC_BLOCK.search(text):
        return Language.ARABIC
    if LATIN_LETTER.search(text):
        return Language.ENGLISH
    return Language.UNKNOWN


def _mark_for(language: Language) -> Optional[str]:
    if language is Language.ARABIC:
        return RIGHT_TO_LEFT_OVERRIDE
    if language is Language.ENGLISH:
        return LEFT_TO_RIGHT_OVERRIDE
    return None


def shape_for_display(text: str, language: Language) -> str:
    """
    Wrap text in the directional override for `language`.

    Display hint only: the text itself is never changed, and text already
    wrapped in the same override is returned as is.
    """
    mark = _mark_for(language)
    if mark is None:
        return text
    if text.startswith(mark) and text.endswith(POP_DIRECTIONAL_FORMATTING):
        return text
    return f"{mark}{text}{POP_DIRECTIONAL_FORMATTING}"
