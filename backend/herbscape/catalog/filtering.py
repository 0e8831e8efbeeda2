"""
HerbScape Backend — Catalog Filtering
=======================================

What:  In-memory narrowing of the herb list.
How:   Linear scan; text match is a case-insensitive substring test on name
       and description, category match is case-insensitive equality.
Who:   CatalogPage re-runs it whenever query, category, herbs, locale or the
       translation cache change.

Example:
    >>> herbs = [HerbRecord(id="1", name="Ginger", description="root", category="Spice"),
    ...          HerbRecord(id="2", name="Mint", description="leaf", category="Herb")]
    >>> [h.name for h in filter_herbs(herbs, "ginger", "all")]
    ['Ginger']
"""

from typing import List, Sequence

from herbscape.schemas.herb import HerbRecord

ALL_CATEGORIES = "all"


def matches_query(herb: HerbRecord, query: str) -> bool:
    needle = query.lower()
    return needle in herb.name.lower() or needle in herb.description.lower()


def filter_herbs(
    herbs: Sequence[HerbRecord],
    query: str = "",
    category: str = ALL_CATEGORIES,
) -> List[HerbRecord]:
    """
    Return the herbs matching both the text query and the category.

    An empty query and the "all" category each leave the list untouched.
    Order is preserved.
    """
    filtered = list(herbs)

    if query:
        filtered = [herb for herb in filtered if matches_query(herb, query)]

    if category and category.lower() != ALL_CATEGORIES:
        wanted = category.lower()
        filtered = [herb for herb in filtered if herb.category.lower() == wanted]

    return filtered


def category_options(herbs: Sequence[HerbRecord]) -> List[str]:
    """"all" followed by the distinct lower-cased categories, in first-seen order."""
    seen = dict.fromkeys(herb.category.lower() for herb in herbs)
    seen.pop(ALL_CATEGORIES, None)
    return [ALL_CATEGORIES, *seen]
