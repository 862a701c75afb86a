"""
Pure transitions over a ReviewCollection.

Each function returns a new collection and never touches its input, so the
engine can re-apply the same call to a freshly fetched document after a
conflict.
"""

from typing import Literal

from review_store.errors import NotFoundError
from review_store.models import Review, ReviewCollection
from review_store.sanitize import new_review_id

Action = Literal["approve", "unapprove", "delete"]
ACTIONS: tuple[Action, ...] = ("approve", "unapprove", "delete")


def append_review(collection: ReviewCollection, review: Review) -> ReviewCollection:
    record = review.model_dump()
    record["approved"] = False
    while collection.locate(record["id"]) is not None:
        record["id"] = new_review_id()
    return collection.model_copy(
        update={"pending": (*collection.pending, record)}
    )


def set_status(
    collection: ReviewCollection, review_id: str, approved: bool
) -> ReviewCollection:
    source = collection.locate(review_id)
    if source is None:
        raise NotFoundError(f"Review {review_id} not found.")

    target = "approved" if approved else "pending"
    if source == target:
        return collection

    remaining = []
    moved = None
    for record in getattr(collection, source):
        if moved is None and record.get("id") == review_id:
            moved = {**record, "approved": approved}
        else:
            remaining.append(record)

    return collection.model_copy(
        update={
            source: tuple(remaining),
            target: (*getattr(collection, target), moved),
        }
    )


def delete_review(collection: ReviewCollection, review_id: str) -> ReviewCollection:
    if collection.locate(review_id) is None:
        raise NotFoundError(f"Review {review_id} not found.")

    return collection.model_copy(
        update={
            "approved": tuple(r for r in collection.approved if r.get("id") != review_id),
            "pending": tuple(r for r in collection.pending if r.get("id") != review_id),
        }
    )


def apply_action(
    collection: ReviewCollection, action: Action, review_id: str
) -> ReviewCollection:
    if action == "approve":
        return set_status(collection, review_id, approved=True)
    if action == "unapprove":
        return set_status(collection, review_id, approved=False)
    if action == "delete":
        return delete_review(collection, review_id)
    raise ValueError(f"Unknown action: {action}")
