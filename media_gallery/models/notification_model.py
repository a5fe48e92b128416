# media_gallery/models/notification_model.py
from datetime import datetime

from pydantic import BaseModel, Field

from ..enums import NotificationSeverity
from ..utils.time_utils import utc_now


class Notification(BaseModel):
    message: str
    severity: NotificationSeverity = NotificationSeverity.INFO
    created_at: datetime = Field(default_factory=utc_now)
