"""Test doubles and builders shared by the test suite.

MongoDB collections are replaced by an in-memory double supporting the
subset of the async collection API the services use.
"""

import copy
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

import bcrypt
from httpx import AsyncClient
from pymongo.errors import PyMongoError

from portal.core.modules.investor.models import Investor, InvestorType

TEST_PASSWORD = "s3cret-pass"
# Low cost factor keeps hashing fast in tests
TEST_PASSWORD_HASH = bcrypt.hashpw(TEST_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


def _fold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def _matches(doc: dict[str, Any], query: dict[str, Any], case_insensitive: bool = False) -> bool:
    if case_insensitive:
        return all(_fold(doc.get(key)) == _fold(value) for key, value in query.items())
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._docs = self._docs[:count]
        return self

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for doc in self._docs:
            yield doc


class FakeCollection:
    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    async def find_one(self, query: dict[str, Any], collation: Any = None) -> dict[str, Any] | None:
        """A collation is treated as case-insensitive string comparison."""
        self._check()
        case_insensitive = collation is not None
        return next((copy.deepcopy(d) for d in self.docs if _matches(d, query, case_insensitive)), None)

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        self._check()
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query or {})])

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self._check()
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc.get("_id"))

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        self._check()
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1)
        return SimpleNamespace(matched_count=0)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        self._check()
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    def fail(self, name: str) -> None:
        """Make every operation on a collection raise a driver error."""
        self.get_collection(name).fail_with = PyMongoError("connection refused")


def make_investor(**overrides: Any) -> Investor:
    fields: dict[str, Any] = {
        "investor_id": "INV-001",
        "name": "Asha Rao",
        "email": "asha@example.com",
        "investor_type": InvestorType.DII,
        "is_active": True,
        "is_admin": False,
        "password_hash": TEST_PASSWORD_HASH,
    }
    fields.update(overrides)
    return Investor(**fields)


def make_document(doc_id: str, title: str, **overrides: Any) -> dict[str, Any]:
    """Raw CMS document as stored in the documents collection."""
    fields: dict[str, Any] = {
        "_id": doc_id,
        "document_id": f"DOC-{doc_id}",
        "title": title,
        "category": "statements",
        "description": "",
        "file_url": f"https://files.example.com/{doc_id}.pdf",
        "file_type": "pdf",
        "file_size_label": "1.2 MB",
        "published_date": "",
    }
    fields.update(overrides)
    return fields


def days_ago(days: int) -> str:
    return (datetime.now(UTC) - timedelta(days=days)).date().isoformat()


async def login(client: AsyncClient, email: str = "asha@example.com", investor_type: str = "any") -> None:
    response = await client.post(
        "/portal/api/auth/login",
        json={"email": email, "password": TEST_PASSWORD, "investorType": investor_type},
    )
    assert response.status_code == 200, response.text
