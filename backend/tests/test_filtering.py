"""
HerbScape Backend — Catalog Filtering Unit Tests
==================================================

What we test:
    ✅ Text query matches name or description, case-insensitively
    ✅ "all" category is the identity; other categories match case-insensitively
    ✅ Query and category combine
    ✅ Category options are "all" plus distinct lower-cased categories
"""

from herbscape.catalog.filtering import category_options, filter_herbs, matches_query
from herbscape.schemas.herb import HerbRecord


def _herb(id, name, description, category):
    return HerbRecord(id=id, name=name, description=description, category=category)


class TestFilterHerbs:

    def test_ginger_query_returns_only_ginger(self):
        herbs = [_herb("1", "Ginger", "root", "Spice"), _herb("2", "Mint", "leaf", "Herb")]
        assert [h.name for h in filter_herbs(herbs, "ginger", "all")] == ["Ginger"]

    def test_empty_query_and_all_category_is_identity(self, sample_herbs):
        assert filter_herbs(sample_herbs, "", "all") == sample_herbs

    def test_query_matches_description(self, sample_herbs):
        result = filter_herbs(sample_herbs, "LEAF")
        assert [h.name for h in result] == ["Mint", "Tulsi"]

    def test_query_without_match_returns_empty(self, sample_herbs):
        assert filter_herbs(sample_herbs, "lavender") == []

    def test_category_is_case_insensitive(self, sample_herbs):
        assert [h.name for h in filter_herbs(sample_herbs, category="culinary")] == ["Ginger"]
        assert [h.name for h in filter_herbs(sample_herbs, category="MEDICINAL")] == ["Tulsi"]

    def test_query_and_category_combine(self, sample_herbs):
        assert filter_herbs(sample_herbs, "leaf", "culinary") == []
        assert [h.name for h in filter_herbs(sample_herbs, "leaf", "aromatic")] == ["Mint"]

    def test_order_is_preserved(self, sample_herbs):
        result = filter_herbs(list(reversed(sample_herbs)), "i")
        assert [h.name for h in result] == ["Tulsi", "Mint", "Ginger"]


class TestMatchesQuery:

    def test_substring_in_name(self, sample_herbs):
        assert matches_query(sample_herbs[0], "ING")

    def test_no_match(self, sample_herbs):
        assert not matches_query(sample_herbs[0], "basil")


class TestCategoryOptions:

    def test_all_first_then_first_seen_order(self, sample_herbs):
        assert category_options(sample_herbs) == ["all", "culinary", "aromatic", "medicinal"]

    def test_duplicates_collapse_across_case(self):
        herbs = [_herb("1", "A", "", "Spice"), _herb("2", "B", "", "spice")]
        assert category_options(herbs) == ["all", "spice"]

    def test_empty_catalog(self):
        assert category_options([]) == ["all"]
