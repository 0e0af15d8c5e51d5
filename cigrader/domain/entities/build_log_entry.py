from datetime import datetime

from pydantic import BaseModel


class BuildLogEntry(BaseModel, frozen=True):
    timestamp: datetime
    text: str
    submission_id: int | None = None
