# orgpanel/utils/slug.py
"""URL-safe company slugs"""
import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Suggest a slug for a company name.

    Lower-cases the name, collapses every run of characters outside [a-z0-9]
    into one hyphen and strips hyphens from both ends. Applying it twice
    gives the same result as applying it once.

    Example:
        slugify("Acme Corp")  # "acme-corp"
    """
    return _NON_SLUG_RUN.sub("-", (name or "").lower()).strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(slug) and SLUG_PATTERN.fullmatch(slug) is not None
