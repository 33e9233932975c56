# backend/modules/feedback/services/keyword_service.py

"""
Critical keyword detection.

The lexicon is a JSON resource (``data/critical_keywords.json`` by default,
overridable with ``CRITICAL_KEYWORDS_PATH``) so it can be updated without a
release. Detection is a pure function of the loaded lexicon: whole-word,
case and accent insensitive, results in lexicon declaration order.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from core.config import settings
from modules.feedback.services.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).resolve().parent.parent / "data" / "critical_keywords.json"


def _term_pattern(normalized_term: str) -> Pattern:
    """Whole-word pattern; inner spaces match any whitespace run, both apostrophes match"""
    parts = [re.escape(part).replace("'", "['’]") for part in normalized_term.split()]
    return re.compile(r"(?<!\w)" + r"\s+".join(parts) + r"(?!\w)")


@dataclass
class KeywordLexicon:
    """Ordered, de-duplicated list of critical terms"""

    terms: List[str]
    categories: Dict[str, str] = field(default_factory=dict)
    _patterns: List[Tuple[str, Pattern]] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        seen = set()
        unique_terms = []
        for term in self.terms:
            normalized = " ".join(normalize_text(term).split())
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            unique_terms.append(term)
            self._patterns.append((term, _term_pattern(normalized)))
        self.terms = unique_terms

    @classmethod
    def from_categories(cls, categories: Sequence[dict]) -> "KeywordLexicon":
        terms = []
        term_categories = {}
        for category in categories:
            for term in category.get("terms", []):
                terms.append(term)
                term_categories.setdefault(term, category["name"])
        return cls(terms=terms, categories=term_categories)

    def __len__(self) -> int:
        return len(self.terms)

    @property
    def patterns(self) -> List[Tuple[str, Pattern]]:
        return self._patterns


def load_lexicon(path: Optional[Path] = None) -> KeywordLexicon:
    """Read a lexicon file; raises if the file is missing or malformed"""
    path = Path(path or settings.critical_keywords_path or DEFAULT_LEXICON_PATH)
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)

    if isinstance(data, list):
        lexicon = KeywordLexicon(terms=[str(term) for term in data])
    elif isinstance(data, dict) and "categories" in data:
        lexicon = KeywordLexicon.from_categories(data["categories"])
    else:
        raise ValueError(f"Unsupported keyword lexicon format in {path}")

    logger.info(f"Loaded {len(lexicon)} critical keywords from {path}")
    return lexicon


@lru_cache()
def get_default_lexicon() -> KeywordLexicon:
    return load_lexicon()


class KeywordDetector:
    """Flags feedback text containing critical terms"""

    def __init__(self, lexicon: Optional[KeywordLexicon] = None):
        self.lexicon = lexicon if lexicon is not None else get_default_lexicon()

    def detect(self, text: Optional[str]) -> List[str]:
        """
        Matched lexicon terms, in lexicon order, each at most once.

        Callers that cap the result (e.g. the first three in an alert) get a
        reproducible selection for a given lexicon.
        """
        if not text or not text.strip():
            return []

        normalized = normalize_text(text)
        return [term for term, pattern in self.lexicon.patterns if pattern.search(normalized)]

    def detect_by_category(self, text: Optional[str]) -> Dict[str, List[str]]:
        """Matched terms grouped by lexicon category"""
        grouped: Dict[str, List[str]] = {}
        for term in self.detect(text):
            category = self.lexicon.categories.get(term, "uncategorized")
            grouped.setdefault(category, []).append(term)
        return grouped
