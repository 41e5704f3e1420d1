from typing import Optional

from fastapi import APIRouter, Depends, Query

from contact_api.api.deps import get_contact_repository, require_admin
from contact_api.schemas.contact import ContactDetailResponse, ContactListResponse, StatusUpdate
from contact_api.services.database.contact_repository import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    ContactRepository,
)

router = APIRouter(prefix="/contacts", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("", response_model=ContactListResponse, response_model_exclude_none=True)
def list_contacts(
    status: Optional[str] = Query(None, description="unread, read, replied or all"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    repository: ContactRepository = Depends(get_contact_repository),
):
    """List contact submissions, newest first"""
    result = repository.list(status=status, page=page, page_size=limit)
    return {
        "success": True,
        "data": result.items,
        "pagination": {
            "page": result.page,
            "limit": result.page_size,
            "total": result.total,
            "pages": result.pages,
        },
    }


@router.patch("/{contact_id}", response_model=ContactDetailResponse, response_model_exclude_none=True)
def update_contact_status(
    contact_id: str,
    update: StatusUpdate,
    repository: ContactRepository = Depends(get_contact_repository),
):
    """Move a submission to unread, read or replied"""
    contact = repository.update_status(contact_id, update.status)
    return {"success": True, "data": contact}


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: str,
    repository: ContactRepository = Depends(get_contact_repository),
):
    repository.delete(contact_id)
    return {"success": True, "message": "Contact deleted successfully"}
