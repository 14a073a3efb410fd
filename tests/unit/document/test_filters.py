"""Tests for document category, date and sort rules."""

from datetime import date, timedelta

import pytest

from portal.core.modules.document.filters import apply_query, matches_date_rule, sort_documents
from portal.core.modules.document.models import CategoryFilter, DateRule, Document, DocumentQuery, SortRule

TODAY = date(2025, 6, 15)


def doc(doc_id: str, title: str = "Report", published: str = "", category: str = "statements") -> Document:
    return Document(id=doc_id, document_id=f"DOC-{doc_id}", title=title, category=category, published_date=published)


def ago(days: int) -> str:
    return (TODAY - timedelta(days=days)).isoformat()


class TestDateRules:
    """Tests for published date windows."""

    @pytest.mark.parametrize(
        ("days", "expected"),
        [(6, True), (7, True), (8, False)],
    )
    def test_last7_boundary(self, days, expected):
        """Exactly seven days ago is inside the window, eight is outside."""
        assert matches_date_rule(doc("a", published=ago(days)), DateRule.LAST_7, TODAY) is expected

    def test_last30_and_last90(self):
        """Rolling windows use their own day counts."""
        document = doc("a", published=ago(45))
        assert not matches_date_rule(document, DateRule.LAST_30, TODAY)
        assert matches_date_rule(document, DateRule.LAST_90, TODAY)

    def test_datetime_with_timezone(self):
        """Timestamps are converted to the UTC calendar date."""
        document = doc("a", published="2025-06-07T23:30:00-02:00")  # 2025-06-08 in UTC
        assert matches_date_rule(document, DateRule.LAST_7, TODAY)

    def test_this_year(self):
        """Only the calendar year matters for thisyear."""
        assert matches_date_rule(doc("a", published="2025-01-01"), DateRule.THIS_YEAR, TODAY)
        assert not matches_date_rule(doc("b", published="2024-12-31"), DateRule.THIS_YEAR, TODAY)

    @pytest.mark.parametrize("published", ["", "not a date", "2025-13-40"])
    def test_unparseable_date_only_matches_all(self, published):
        """Documents without a usable date are kept only under `all`."""
        document = doc("a", published=published)
        assert matches_date_rule(document, DateRule.ALL, TODAY)
        for rule in (DateRule.LAST_7, DateRule.LAST_30, DateRule.LAST_90, DateRule.THIS_YEAR):
            assert not matches_date_rule(document, rule, TODAY)


class TestSorting:
    """Tests for sort rules and tie-breaking."""

    def test_title_ascending_is_case_insensitive(self):
        """Titles compare without regard to case."""
        documents = [doc("3", "Zeta"), doc("2", "annual summary"), doc("1", "Annual Report")]
        result = sort_documents(documents, SortRule.TITLE_ASC)
        assert [d.title for d in result] == ["Annual Report", "annual summary", "Zeta"]

    def test_title_descending(self):
        documents = [doc("1", "Annual Report"), doc("2", "annual summary"), doc("3", "Zeta")]
        result = sort_documents(documents, SortRule.TITLE_DESC)
        assert [d.title for d in result] == ["Zeta", "annual summary", "Annual Report"]

    @pytest.mark.parametrize("rule", [SortRule.TITLE_ASC, SortRule.TITLE_DESC])
    def test_title_ties_ordered_by_id(self, rule):
        """Equal titles fall back to document id order in both directions."""
        documents = [doc("c", "Factsheet"), doc("a", "factsheet"), doc("b", "Factsheet")]
        result = sort_documents(documents, rule)
        assert [d.id for d in result] == ["a", "b", "c"]

    def test_newest_puts_unparseable_last(self):
        documents = [doc("x", published="garbage"), doc("old", published=ago(30)), doc("new", published=ago(1))]
        result = sort_documents(documents, SortRule.NEWEST)
        assert [d.id for d in result] == ["new", "old", "x"]

    def test_oldest_puts_unparseable_last(self):
        documents = [doc("x", published=""), doc("new", published=ago(1)), doc("old", published=ago(30))]
        result = sort_documents(documents, SortRule.OLDEST)
        assert [d.id for d in result] == ["old", "new", "x"]


class TestApplyQuery:
    """Tests for the combined category, date and sort pipeline."""

    def test_category_then_date_then_sort(self):
        documents = [
            doc("1", "B statement", ago(2), "statements"),
            doc("2", "A statement", ago(3), "statements"),
            doc("3", "Old statement", ago(20), "statements"),
            doc("4", "Tax form", ago(1), "tax documents"),
        ]
        query = DocumentQuery(category=CategoryFilter.STATEMENTS, date=DateRule.LAST_7, sort=SortRule.TITLE_ASC)
        result = apply_query(documents, query, TODAY)
        assert [d.id for d in result] == ["2", "1"]

    def test_all_category_passes_everything(self):
        documents = [doc("1", category="legal"), doc("2", category="other")]
        result = apply_query(documents, DocumentQuery(), TODAY)
        assert {d.id for d in result} == {"1", "2"}

    def test_empty_result_is_empty_list(self):
        result = apply_query([doc("1", category="legal")], DocumentQuery(category=CategoryFilter.COMPLIANCE), TODAY)
        assert result == []
