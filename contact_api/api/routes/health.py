from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from contact_api.api.deps import get_notifier
from contact_api.core.exceptions import ContactAPIError, NotificationError, RouteNotFoundError
from contact_api.schemas.contact import HealthResponse
from contact_api.services.email_service import NotificationSender

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc),
    }


@router.get("/test-email")
def send_test_email(request: Request, notifier: NotificationSender = Depends(get_notifier)):
    """Send a test message to the owner mailbox (development only)"""
    if not request.app.state.settings.is_development:
        raise RouteNotFoundError()
    try:
        notifier.send_test_email()
    except NotificationError as e:
        raise ContactAPIError("Test email failed") from e
    return {"success": True, "message": "Test email sent"}
