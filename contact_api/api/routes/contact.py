from fastapi import APIRouter, Depends, Request, status

from contact_api.api.deps import (
    enforce_contact_rate_limit,
    get_client_address,
    get_client_agent,
    get_submission_workflow,
)
from contact_api.schemas.contact import ContactCreate, SubmissionResponse
from contact_api.services.contact_workflow import ContactSubmissionWorkflow

router = APIRouter(prefix="/contact", tags=["contact"])

SUCCESS_MESSAGE = "Message sent successfully. Check your email for confirmation!"


@router.post(
    "",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_contact_rate_limit)],
)
def submit_contact(
    payload: ContactCreate,
    request: Request,
    workflow: ContactSubmissionWorkflow = Depends(get_submission_workflow),
):
    """
    Submit the contact form (Public)
    Stores the message, then emails the owner and the submitter.
    """
    contact = workflow.submit(
        name=payload.name,
        email=payload.email,
        message=payload.message,
        ip_address=get_client_address(request),
        user_agent=get_client_agent(request),
    )
    return {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "data": {"id": contact.id, "timestamp": contact.created_at},
    }
