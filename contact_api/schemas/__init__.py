from .contact import (
    ContactCreate, StatusUpdate,
    ContactSummary, ContactDetail,
    SubmissionResponse, ContactListResponse, ContactDetailResponse, HealthResponse
)
