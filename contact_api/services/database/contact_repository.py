import logging
import math
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contact_api.core.exceptions import (
    ContactNotFoundError,
    InvalidStatusError,
    PersistenceError,
    RecordValidationError,
)
from contact_api.models.contact import UNKNOWN_USER_AGENT, ContactStatus, ContactSubmission

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
ALL_STATUSES = "all"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_status(value) -> ContactStatus:
    """Map a raw status value onto ContactStatus or raise InvalidStatusError."""
    try:
        return ContactStatus(value)
    except ValueError:
        raise InvalidStatusError(value, ContactStatus.values())


class ContactPage:
    def __init__(self, items: List[ContactSubmission], page: int, page_size: int, total: int):
        self.items = items
        self.page = page
        self.page_size = page_size
        self.total = total

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


class ContactRepository:
    def __init__(self, db: Session, clock=utcnow):
        self.db = db
        self.clock = clock

    def create(
        self,
        name: str,
        email: str,
        message: str,
        ip_address: str,
        user_agent: Optional[str] = None,
    ) -> ContactSubmission:
        """Store a new submission; id, timestamp and status are assigned here."""
        contact = ContactSubmission(
            name=name,
            email=email,
            message=message,
            ip_address=ip_address,
            user_agent=user_agent or UNKNOWN_USER_AGENT,
            status=ContactStatus.UNREAD,
        )

        errors = contact.constraint_errors()
        if errors:
            raise RecordValidationError(errors)

        contact.created_at = self.clock()
        try:
            self.db.add(contact)
            self.db.commit()
            self.db.refresh(contact)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save contact from {email}: {e}")
            raise PersistenceError() from e

        logger.info(f"Contact {contact.id} saved")
        return contact

    def get(self, contact_id: str) -> ContactSubmission:
        contact = self.db.get(ContactSubmission, contact_id)
        if contact is None:
            raise ContactNotFoundError(contact_id)
        return contact

    def list(
        self,
        status: Optional[str] = None,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ContactPage:
        """Most recent first. ``status`` of None or "all" means no filter."""
        query = self.db.query(ContactSubmission)
        if status is not None and status != ALL_STATUSES:
            query = query.filter(ContactSubmission.status == parse_status(status))

        total = query.with_entities(func.count(ContactSubmission.id)).scalar() or 0
        items = (
            query.order_by(ContactSubmission.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return ContactPage(items, page, page_size, total)

    def update_status(self, contact_id: str, status) -> ContactSubmission:
        new_status = parse_status(status)
        contact = self.get(contact_id)

        contact.status = new_status
        try:
            self.db.commit()
            self.db.refresh(contact)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update status of contact {contact_id}: {e}")
            raise PersistenceError() from e
        return contact

    def delete(self, contact_id: str) -> None:
        contact = self.get(contact_id)
        try:
            self.db.delete(contact)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete contact {contact_id}: {e}")
            raise PersistenceError() from e
        logger.info(f"Contact {contact_id} deleted")

