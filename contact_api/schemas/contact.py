from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from contact_api.models.contact import ContactStatus


class ContactCreate(BaseModel):
    # Presence and shape are checked by the validation service so that
    # every rule answers with the same 400 envelope.
    name: Optional[Any] = None
    email: Optional[Any] = None
    message: Optional[Any] = None


class StatusUpdate(BaseModel):
    status: Optional[Any] = None


class ContactSummary(BaseModel):
    """Admin listing projection; client address and agent stay server-side."""

    id: str
    name: str
    email: str
    message: str
    status: ContactStatus
    created_at: datetime = Field(serialization_alias="createdAt")

    class Config:
        from_attributes = True


class ContactDetail(ContactSummary):
    ip_address: str = Field(serialization_alias="ipAddress")
    user_agent: str = Field(serialization_alias="userAgent")


class SubmissionReceipt(BaseModel):
    id: str
    timestamp: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class APIResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class SubmissionResponse(APIResponse):
    data: SubmissionReceipt


class ContactListResponse(APIResponse):
    data: List[ContactSummary]
    pagination: Pagination


class ContactDetailResponse(APIResponse):
    data: ContactDetail


class HealthResponse(APIResponse):
    timestamp: datetime
