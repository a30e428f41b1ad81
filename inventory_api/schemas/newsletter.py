"""Newsletter request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class SubscribeRequest(BaseModel):
    email: EmailStr
    source: str = "website"


class UnsubscribeRequest(BaseModel):
    token: str | None = None
    email: EmailStr | None = None


class SubscriptionResponse(BaseModel):
    id: str
    email: str
    status: str
    source: str
    preferences: dict
    subscribed_at: datetime
    unsubscribed_at: datetime | None = None

    model_config = {"from_attributes": True}
