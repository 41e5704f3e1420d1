import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from contact_api.core.database import get_db
from contact_api.core.exceptions import RateLimitExceeded, UnauthorizedError
from contact_api.core.rate_limit import CONTACT_SCOPE, RateLimiter
from contact_api.models.contact import UNKNOWN_USER_AGENT
from contact_api.services.contact_workflow import ContactSubmissionWorkflow
from contact_api.services.database.contact_repository import ContactRepository
from contact_api.services.email_service import NotificationSender

admin_bearer = HTTPBearer(auto_error=False)


def get_client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_client_agent(request: Request) -> str:
    return request.headers.get("user-agent") or UNKNOWN_USER_AGENT


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_notifier(request: Request) -> NotificationSender:
    return request.app.state.notifier


def get_contact_repository(db: Session = Depends(get_db)) -> ContactRepository:
    return ContactRepository(db)


def get_submission_workflow(
    repository: ContactRepository = Depends(get_contact_repository),
    notifier: NotificationSender = Depends(get_notifier),
) -> ContactSubmissionWorkflow:
    return ContactSubmissionWorkflow(repository, notifier)


def enforce_contact_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    address = get_client_address(request)
    if not limiter.admit(CONTACT_SCOPE, address):
        raise RateLimitExceeded(CONTACT_SCOPE.message, limiter.retry_after(CONTACT_SCOPE, address))


def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(admin_bearer),
):
    """Admin routes are open unless ADMIN_TOKEN is configured."""
    expected = request.app.state.settings.ADMIN_TOKEN
    if not expected:
        return
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        raise UnauthorizedError()
