# backend/modules/feedback/services/text_normalizer.py

import unicodedata


def normalize_text(text: str) -> str:
    """Lower-case and strip diacritics ("Hygiène" -> "hygiene")"""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
