"""Fact normalization service.

This module handles:
1. Category mapping onto the fixed taxonomy
2. Tag cleanup and deduplication
3. Body text cleanup
4. Hash generation for deduplication

All functions are deterministic and idempotent: normalizing an already
normalized value returns it unchanged.
"""

import hashlib
import re

from onefact.core.logging import get_logger

logger = get_logger(__name__)

STANDARD_CATEGORIES: tuple[str, ...] = (
    "Science",
    "Technology",
    "History",
    "Geography",
    "Arts",
    "Culture",
    "Sports",
    "Entertainment",
    "Politics",
    "Business",
    "Education",
    "Health",
    "Environment",
)

DEFAULT_CATEGORY = "General"

CANONICAL_CATEGORIES: tuple[str, ...] = STANDARD_CATEGORIES + ("People", DEFAULT_CATEGORY)

# Exact (case-insensitive) source category -> canonical category
CATEGORY_MAPPING: dict[str, str] = {
    # Wikipedia maintenance categories
    "all article disambiguation pages": DEFAULT_CATEGORY,
    "all disambiguation pages": DEFAULT_CATEGORY,
    "disambiguation pages": DEFAULT_CATEGORY,
    "living people": "People",
    # Science subfields
    "space": "Science",
    "physics": "Science",
    "chemistry": "Science",
    "biology": "Science",
    "mathematics": "Science",
    # Technology subfields
    "computer science": "Technology",
    "engineering": "Technology",
    "internet": "Technology",
    "software": "Technology",
    "hardware": "Technology",
    "artificial intelligence": "Technology",
    "robotics": "Technology",
}
CATEGORY_MAPPING.update({name.lower(): name for name in CANONICAL_CATEGORIES})

_CATEGORY_PREFIX = re.compile(r"^category:\s*", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_TERMINAL_PUNCTUATION = (".", "!", "?")


class FactNormalizer:
    """Maps source categories and tags onto the canonical forms.

    Example:
        >>> normalizer = FactNormalizer()
        >>> normalizer.normalize_category("Category:Physics")
        'Science'
        >>> normalizer.normalize_tags([" Category:Astronomy", "astronomy", "NASA"])
        ['astronomy', 'nasa']
    """

    def normalize_category(self, category: str) -> str:
        """Map a free-text category onto the fixed taxonomy.

        Lookup order: exact mapping, substring match against the standard
        categories, then the default category.

        Args:
            category: Source category text

        Returns:
            Canonical category name
        """
        cleaned = _CATEGORY_PREFIX.sub("", (category or "").strip()).strip()
        if not cleaned:
            return DEFAULT_CATEGORY

        key = cleaned.lower()
        mapped = CATEGORY_MAPPING.get(key)
        if mapped:
            return mapped

        for standard in STANDARD_CATEGORIES:
            if standard.lower() in key:
                return standard

        logger.debug("Unmapped category", category=cleaned)
        return DEFAULT_CATEGORY

    def normalize_tags(self, tags: list[str]) -> list[str]:
        """Clean and deduplicate tags.

        Args:
            tags: Source tags

        Returns:
            Lowercase tags without prefixes or blanks, first-seen order
        """
        seen: set[str] = set()
        result: list[str] = []
        for tag in tags:
            cleaned = _CATEGORY_PREFIX.sub("", (tag or "").strip()).strip().lower()
            if cleaned and cleaned not in seen:
                seen.add(cleaned)
                result.append(cleaned)
        return result

    def normalize_text(self, text: str) -> str:
        """Clean fact body text.

        Collapses whitespace and appends a period when terminal
        punctuation is missing.

        Args:
            text: Raw body text

        Returns:
            Cleaned text (empty if the input is blank)
        """
        cleaned = _WHITESPACE.sub(" ", text or "").strip()
        if cleaned and not cleaned.endswith(_TERMINAL_PUNCTUATION):
            cleaned += "."
        return cleaned

    def content_hash(self, text: str) -> str:
        """Generate SHA-256 hash for deduplication.

        Case, punctuation and whitespace differences do not change the hash.

        Args:
            text: Fact body text

        Returns:
            SHA-256 hash (64 hex characters)
        """
        stripped = _PUNCTUATION.sub(" ", (text or "").lower())
        canonical = _WHITESPACE.sub(" ", stripped).strip()
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


__all__ = [
    "FactNormalizer",
    "STANDARD_CATEGORIES",
    "CANONICAL_CATEGORIES",
    "CATEGORY_MAPPING",
    "DEFAULT_CATEGORY",
]
