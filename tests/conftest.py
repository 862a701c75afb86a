"""
Shared fixtures: an in-memory versioned document store that behaves like the
GitHub Contents API (SHA per revision, 409 on stale SHA) and can simulate
concurrent writers.
"""

import copy

import pytest

from review_store.configs import AppConfig, get_config
from review_store.engine import ReviewEngine
from review_store.models import StoredDocument, VersionToken, WriteOutcome

PATH = "data/reviews.json"


class InMemoryStore:
    def __init__(self, document=None):
        self.document = copy.deepcopy(document)
        self.revision = 0
        self.sha = None if document is None else "sha-0"
        self.fetches = 0
        self.attempts = []
        self.commits = []
        # Callables run (and consumed) right before each incoming write
        self.before_write = []

    def fetch_current(self, path, ref=None):
        self.fetches += 1
        if self.document is None:
            return StoredDocument(exists=False)
        return StoredDocument(
            exists=True,
            version=VersionToken(sha=self.sha),
            document=copy.deepcopy(self.document),
        )

    def conditional_write(self, path, document, version, message):
        if self.before_write:
            self.before_write.pop(0)(self)
        self.attempts.append(message)

        expected = None if version is None else version.sha
        if expected != self.sha:
            return WriteOutcome(conflict=True, status=409)

        self._commit(document, message)
        return WriteOutcome(version=VersionToken(sha=self.sha), status=200)

    def _commit(self, document, message):
        self.revision += 1
        self.sha = f"sha-{self.revision}"
        self.document = copy.deepcopy(document)
        self.commits.append(message)

    def commit_external(self, change):
        """Simulates another request committing between our read and our write."""
        document = copy.deepcopy(self.document)
        change(document)
        self._commit(document, "external")


def make_record(review_id, approved=False, **extra):
    record = {
        "id": review_id,
        "rating": 4,
        "name": "Ana",
        "comment": f"comment {review_id}",
        "photos": [],
        "date": "2024-05-01T10:00:00.000Z",
        "approved": approved,
    }
    record.update(extra)
    return record


@pytest.fixture
def seeded_document():
    return {
        "approved": [make_record("a1", approved=True)],
        "pending": [make_record("p1"), make_record("p2", extra_field="kept")],
    }


@pytest.fixture
def store(seeded_document):
    return InMemoryStore(seeded_document)


@pytest.fixture
def empty_store():
    return InMemoryStore()


@pytest.fixture
def engine(store):
    return ReviewEngine(store, PATH, "main")


@pytest.fixture
def config():
    return AppConfig(
        owner="acme",
        repo="storefront",
        branch="main",
        token="ghp-secret-token",
        admin_pin="4321",
        allowed_origins="https://shop.example.com, *.preview.example.com",
    )


@pytest.fixture
def app_env(monkeypatch):
    monkeypatch.setenv("GH_OWNER", "acme")
    monkeypatch.setenv("GH_REPO", "storefront")
    monkeypatch.setenv("GH_TOKEN", "ghp-secret-token")
    monkeypatch.setenv("ADMIN_PIN", "4321")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://shop.example.com")
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def record_factory():
    return make_record
