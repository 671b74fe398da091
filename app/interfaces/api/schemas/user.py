"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uid: str
    email: str
    display_name: str | None = None
    provider: str
    created_at: datetime | None = None
    last_login: datetime | None = None
