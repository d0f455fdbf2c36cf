"""Text parsing utilities shared by the repository and the seeder."""

import json
import logging
import math
import re
import unicodedata
from typing import Any, List

logger = logging.getLogger(__name__)


class TextParser:
    """
    Centralized parsing helpers.

    Single source of truth for glyph normalization, legacy meaning
    flattening and the id-list encodings used by the dataset and the
    words table.
    """

    # Legacy nested gloss: [[['학교'], ['교']]]
    NESTED_MEANING_PATTERN = re.compile(r"\[\[\['((?:[^'\\]|\\.)*)'\]")

    # Dataset id lists: "w1;w2;w3"
    ID_LIST_SEPARATOR = ";"

    @classmethod
    def normalize_unicode(cls, text: Any) -> str:
        """
        Normalize text to NFC form.

        Hanja can arrive as compatibility ideographs or in decomposed
        Hangul; NFC keeps glyph comparisons consistent.
        """
        if text is None:
            return ""
        if isinstance(text, float) and math.isnan(text):
            return ""
        return unicodedata.normalize('NFC', str(text)).strip()

    @classmethod
    def parse_meaning(cls, meaning: Any) -> str:
        """
        Flatten a legacy nested gloss to its first entry.

        Plain glosses are returned unchanged.
        """
        text = cls.normalize_unicode(meaning)
        if "[[" in text and "]]" in text:
            match = cls.NESTED_MEANING_PATTERN.search(text)
            if match:
                return match.group(1).replace("\\'", "'")
            logger.debug("Unparseable nested meaning kept as-is: %s", text)
        return text

    @classmethod
    def split_ids(cls, value: Any) -> List[str]:
        """Split a ``;``-separated id list, dropping blanks."""
        text = cls.normalize_unicode(value)
        if not text:
            return []
        return [part.strip() for part in text.split(cls.ID_LIST_SEPARATOR) if part.strip()]

    @classmethod
    def parse_json_list(cls, value: Any) -> List[str]:
        """
        Decode a JSON-encoded id list stored in the words table.

        Empty, null or malformed values decode to an empty list.
        """
        if value is None or value == "":
            return []
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError):
            logger.debug("Malformed related-word list ignored: %r", value)
            return []
        if not isinstance(decoded, list):
            return []
        return [str(item) for item in decoded]

    @classmethod
    def to_int(cls, value: Any, default: int = 0) -> int:
        """Lenient integer conversion for stroke counts."""
        try:
            if isinstance(value, float) and math.isnan(value):
                return default
            return int(float(value))
        except (TypeError, ValueError):
            return default
