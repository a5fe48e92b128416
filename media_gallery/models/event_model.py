# media_gallery/models/event_model.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventCreate(BaseModel):
    """Model for creating a new event. Blank fields are rejected by the pipeline."""

    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(default="", description="ISO calendar date of the event")
    title: str = Field(default="", max_length=200, description="Display name")
    emoji_or_dot: Optional[str] = Field(
        default=None, alias="emojiOrDot", max_length=16
    )


class EventUpdate(BaseModel):
    """Edit of an existing event; a title change cascades to linked media."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    title: str = Field(..., max_length=200)
    emoji_or_dot: Optional[str] = Field(default=None, alias="emojiOrDot")


class Event(BaseModel):
    """Full event model as held by the read model"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    title: str = ""
    date: str = ""
    emoji_or_dot: Optional[str] = Field(default=None, alias="emojiOrDot")
    image_ids: List[str] = Field(default_factory=list, alias="imageIds")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Event":
        payload = {**data, "id": doc_id}
        if payload.get("imageIds") is None:
            payload["imageIds"] = []
        return cls.model_validate(payload)
