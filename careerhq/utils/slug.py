"""
Slug helpers - URL-safe tokens derived from display names.

    slugify("Harvard University")   -> "harvard-university"
    slugify("  Côte d'Ivoire  ")    -> "cte-divoire"

Only ASCII letters, digits and underscores count as word characters, so
accented letters are dropped rather than kept.
"""

import re

_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)
_NON_ALNUM_SPACE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Lower-case, drop punctuation, hyphenate. Never raises."""
    if not isinstance(text, str):
        return ""
    slug = text.lower().strip()
    slug = _NON_WORD.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def generate_website(university_name: str) -> str:
    """Placeholder website for auto-created universities: 'New Tech' -> 'newtech.edu'."""
    base = _NON_ALNUM_SPACE.sub("", university_name.lower())
    base = _WHITESPACE.sub("", base)
    return base[:20] + ".edu"
