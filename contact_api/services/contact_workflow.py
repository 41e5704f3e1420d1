"""
Submission workflow: validate, persist, notify.

A submission is stored before any email goes out. When notification fails
the stored record is kept and the NotificationError propagates, so the
caller learns that delivery failed while the data survives.
"""
import logging
from typing import Optional

from contact_api.core.exceptions import NotificationError
from contact_api.models.contact import ContactSubmission
from contact_api.services.database.contact_repository import ContactRepository
from contact_api.services.email_service import NotificationSender
from contact_api.services.validation import validate_contact_input

logger = logging.getLogger(__name__)


class ContactSubmissionWorkflow:
    def __init__(self, repository: ContactRepository, notifier: NotificationSender):
        self.repository = repository
        self.notifier = notifier

    def submit(
        self,
        name,
        email,
        message,
        ip_address: str,
        user_agent: Optional[str] = None,
    ) -> ContactSubmission:
        validate_contact_input(name, email, message)

        contact = self.repository.create(
            name=name,
            email=email,
            message=message,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        try:
            self.notifier.notify(contact.name, contact.email, contact.message)
        except NotificationError:
            logger.warning(f"⚠️ Contact {contact.id} stored but notification emails were not delivered")
            raise

        return contact
