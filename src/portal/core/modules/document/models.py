from enum import StrEnum

from pydantic import BaseModel, Field

from portal.core.db import MongoModel


class DocumentCategory(StrEnum):
    """Fixed set of document categories used by the CMS."""

    QUARTERLY_REPORTS = "quarterly reports"
    ANNUAL_REPORTS = "annual reports"
    STATEMENTS = "statements"
    TAX_DOCUMENTS = "tax documents"
    FACTSHEETS = "factsheets"
    PORTFOLIO = "portfolio"
    COMPLIANCE = "compliance"
    LEGAL = "legal"
    OTHER = "other"


class CategoryFilter(StrEnum):
    """Category selector: any category value, or ALL for no filtering."""

    ALL = "all"
    QUARTERLY_REPORTS = "quarterly reports"
    ANNUAL_REPORTS = "annual reports"
    STATEMENTS = "statements"
    TAX_DOCUMENTS = "tax documents"
    FACTSHEETS = "factsheets"
    PORTFOLIO = "portfolio"
    COMPLIANCE = "compliance"
    LEGAL = "legal"
    OTHER = "other"


class DateRule(StrEnum):
    ALL = "all"
    LAST_7 = "last7"
    LAST_30 = "last30"
    LAST_90 = "last90"
    THIS_YEAR = "thisyear"


class SortRule(StrEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE_ASC = "titleasc"
    TITLE_DESC = "titledesc"


# Window length in days for the rolling date rules
DATE_RULE_DAYS: dict[DateRule, int] = {
    DateRule.LAST_7: 7,
    DateRule.LAST_30: 30,
    DateRule.LAST_90: 90,
}


class Document(MongoModel):
    """Read-only document record served from the CMS.

    published_date is kept as the raw CMS string; it may not parse.
    category is a plain string so unexpected CMS values do not break listing.
    """

    document_id: str = ""
    title: str
    category: str = DocumentCategory.OTHER
    description: str = ""
    file_url: str = ""
    file_type: str = ""
    file_size_label: str = ""
    published_date: str = ""


class DocumentQuery(BaseModel):
    """Server-side filter and sort selection for a document listing."""

    category: CategoryFilter = Field(CategoryFilter.ALL, description="Category to match exactly, or `all`")
    date: DateRule = Field(DateRule.ALL, description="Published date window")
    sort: SortRule = Field(SortRule.NEWEST, description="Sort order")
