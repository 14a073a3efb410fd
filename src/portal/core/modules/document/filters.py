"""Category, date-window and sort rules for document listings."""

from collections.abc import Iterable
from datetime import date, timedelta

from portal.core.modules.document.models import (
    DATE_RULE_DAYS,
    CategoryFilter,
    DateRule,
    Document,
    DocumentQuery,
    SortRule,
)
from portal.utils import parse_published_date


def matches_category(document: Document, category: CategoryFilter) -> bool:
    return category == CategoryFilter.ALL or document.category == category.value


def matches_date_rule(document: Document, rule: DateRule, today: date) -> bool:
    """Check the published date against a date rule evaluated on `today`.

    Rolling windows are inclusive: for `last7` a document published exactly
    seven days ago matches, one published eight days ago does not.
    Documents with an unparseable date only match `all`.
    """
    if rule == DateRule.ALL:
        return True

    published = parse_published_date(document.published_date)
    if published is None:
        return False

    if rule == DateRule.THIS_YEAR:
        return published.year == today.year

    return published >= today - timedelta(days=DATE_RULE_DAYS[rule])


def sort_documents(documents: Iterable[Document], rule: SortRule) -> list[Document]:
    """Sort documents; ties keep document id order in both directions."""
    # Sorting by id first makes the later stable sort fall back to id order
    result = sorted(documents, key=lambda d: d.id)

    if rule in (SortRule.TITLE_ASC, SortRule.TITLE_DESC):
        result.sort(key=lambda d: d.title.casefold(), reverse=rule == SortRule.TITLE_DESC)
        return result

    dated = [(d, parse_published_date(d.published_date)) for d in result]
    with_date = [(d, published) for d, published in dated if published is not None]
    without_date = [d for d, published in dated if published is None]
    with_date.sort(key=lambda pair: pair[1], reverse=rule == SortRule.NEWEST)
    # Unparseable dates go last whatever the direction
    return [d for d, _ in with_date] + without_date


def apply_query(documents: Iterable[Document], query: DocumentQuery, today: date) -> list[Document]:
    """Apply category filter, then date rule, then sort."""
    selected = [
        d for d in documents if matches_category(d, query.category) and matches_date_rule(d, query.date, today)
    ]
    return sort_documents(selected, query.sort)
