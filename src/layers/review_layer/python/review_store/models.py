from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ReviewRecord = Dict[str, Any]
Bucket = Literal["approved", "pending"]
BUCKETS: tuple[Bucket, ...] = ("approved", "pending")


class VersionToken(BaseModel):
    """Blob SHA of the stored document, required by conditional writes."""

    model_config = ConfigDict(frozen=True)

    sha: str

    def __str__(self) -> str:
        return self.sha


class StoredDocument(BaseModel):
    exists: bool
    version: Optional[VersionToken] = None
    document: Dict[str, Any] = Field(default_factory=dict)


class WriteOutcome(BaseModel):
    """Result of a conditional write: either a new version or a conflict."""

    version: Optional[VersionToken] = None
    conflict: bool = False
    status: Optional[int] = None


class Review(BaseModel):
    id: str
    rating: int = Field(ge=1, le=5)
    name: str = ""
    comment: str = Field(min_length=1)
    photos: List[str] = Field(default_factory=list, max_length=3)
    date: str
    approved: bool = False


class ReviewCollection(BaseModel):
    """The whole persisted state: two ordered buckets of raw review records.

    Records stay plain dicts so fields this code does not know about survive
    a read-modify-write untouched.
    """

    model_config = ConfigDict(frozen=True)

    approved: tuple[ReviewRecord, ...] = ()
    pending: tuple[ReviewRecord, ...] = ()

    @classmethod
    def empty(cls) -> "ReviewCollection":
        return cls()

    @classmethod
    def from_document(cls, document: Any) -> "ReviewCollection":
        """Coerces a decoded document, discarding anything that is not a list of objects."""
        if not isinstance(document, dict):
            return cls.empty()

        buckets = {}
        for bucket in BUCKETS:
            entries = document.get(bucket)
            if not isinstance(entries, list):
                entries = []
            buckets[bucket] = tuple(e for e in entries if isinstance(e, dict))
        return cls(**buckets)

    def to_document(self) -> Dict[str, List[ReviewRecord]]:
        return {"approved": list(self.approved), "pending": list(self.pending)}

    def bucket(self, name: Bucket) -> List[ReviewRecord]:
        return list(getattr(self, name))

    def locate(self, review_id: str) -> Optional[Bucket]:
        for bucket in BUCKETS:
            if any(r.get("id") == review_id for r in getattr(self, bucket)):
                return bucket
        return None
