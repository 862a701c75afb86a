from pydantic import BaseModel, Field, field_validator
from review_store.models import Bucket
from typing import Any, Optional


class ListReviewsRequest(BaseModel):
    status: Bucket = Field(default="approved")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        # Anything other than "pending" lists the public bucket
        if isinstance(v, str) and v.strip().lower() == "pending":
            return "pending"
        return "approved"


class SubmitReviewRequest(BaseModel):
    """Raw submission; every field is sanitized by the service, not rejected here."""

    rating: Any = None
    name: Any = ""
    comment: Any = ""
    photos: Any = None


class ModerateReviewRequest(BaseModel):
    action: Optional[str] = Field(
        None, description="One of approve, unapprove or delete."
    )
    id: Optional[str] = None

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, v):
        if v is None:
            return None
        return str(v).strip().lower() or None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        elif isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
