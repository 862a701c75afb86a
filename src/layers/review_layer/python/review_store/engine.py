from typing import Any, Callable, Dict, List, Optional, Protocol

from loguru import logger

from review_store.errors import StoreError, VersionConflictError
from review_store.models import (
    Bucket,
    ReviewCollection,
    StoredDocument,
    VersionToken,
    WriteOutcome,
)

MAX_WRITE_ATTEMPTS = 2
INIT_MESSAGE = "chore(reviews): init reviews.json"

Mutation = Callable[[ReviewCollection], ReviewCollection]


class DocumentStore(Protocol):
    def fetch_current(self, path: str, ref: Optional[str] = None) -> StoredDocument: ...

    def conditional_write(
        self,
        path: str,
        document: Dict[str, Any],
        version: Optional[VersionToken],
        message: str,
    ) -> WriteOutcome: ...


class Snapshot:
    """A normalized collection together with the token it was read at."""

    def __init__(self, collection: ReviewCollection, version: VersionToken):
        self.collection = collection
        self.version = version


class ReviewEngine:
    def __init__(self, store: DocumentStore, path: str, ref: Optional[str] = None):
        self.store = store
        self.path = path
        self.ref = ref

    def _bootstrap(self) -> StoredDocument:
        logger.info(f"{self.path} not found, creating an empty collection")
        outcome = self.store.conditional_write(
            self.path, ReviewCollection.empty().to_document(), None, INIT_MESSAGE
        )
        if outcome.conflict:
            logger.info(f"{self.path} was created concurrently, reusing it")

        current = self.store.fetch_current(self.path, self.ref)
        if not current.exists:
            raise StoreError(f"{self.path} still missing after initialization")
        return current

    def load(self) -> Snapshot:
        current = self.store.fetch_current(self.path, self.ref)
        if not current.exists:
            current = self._bootstrap()
        return Snapshot(ReviewCollection.from_document(current.document), current.version)

    def list_reviews(self, status: Bucket) -> List[Dict[str, Any]]:
        return self.load().collection.bucket(status)

    def mutate(self, mutation: Mutation, message: str) -> ReviewCollection:
        """
        Fetch, apply and conditionally write, re-reading once on a stale SHA.

        The mutation is re-applied to the fresh document on the second attempt,
        never to the stale one. Errors raised by the mutation itself (e.g. an
        unknown id) propagate without any write.
        """
        for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
            snapshot = self.load()
            updated = mutation(snapshot.collection)
            if updated == snapshot.collection:
                logger.info(f"No changes for '{message}', skipping commit")
                return updated

            commit_message = message if attempt == 1 else f"{message} (retry)"
            outcome = self.store.conditional_write(
                self.path, updated.to_document(), snapshot.version, commit_message
            )
            if not outcome.conflict:
                return updated

            logger.warning(
                f"Version conflict on attempt {attempt}/{MAX_WRITE_ATTEMPTS} for '{message}'"
            )

        raise VersionConflictError(
            f"Document changed concurrently, gave up after {MAX_WRITE_ATTEMPTS} attempts"
        )
