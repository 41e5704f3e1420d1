import enum
import uuid
from datetime import timezone
from typing import List

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, String, Text
from sqlalchemy.types import TypeDecorator
from contact_api.core.database import Base

NAME_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 1000
UNKNOWN_USER_AGENT = "Unknown"


class ContactStatus(str, enum.Enum):
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


def generate_contact_id() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Stores UTC and always loads timezone-aware values, also on backends without timezone support."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"
    __table_args__ = (
        CheckConstraint(f"length(name) BETWEEN 1 AND {NAME_MAX_LENGTH}", name="ck_contact_name_length"),
        CheckConstraint(f"length(message) BETWEEN 1 AND {MESSAGE_MAX_LENGTH}", name="ck_contact_message_length"),
    )

    id = Column(String(36), primary_key=True, default=generate_contact_id)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(254), index=True, nullable=False)
    message = Column(Text, nullable=False)
    ip_address = Column(String(64), nullable=False)
    user_agent = Column(String(512), nullable=False, default=UNKNOWN_USER_AGENT)
    created_at = Column(UTCDateTime(timezone=True), nullable=False, index=True)
    status = Column(
        Enum(
            ContactStatus,
            name="contact_status",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=ContactStatus.UNREAD,
    )

    def constraint_errors(self) -> List[str]:
        """Storage-level re-check of the field rules; empty when the record is acceptable."""
        # Local import keeps the email pattern defined in one place.
        from contact_api.services.validation import is_valid_email

        errors = []
        if not self.name:
            errors.append("Name is required")
        elif len(self.name) > NAME_MAX_LENGTH:
            errors.append(f"Name cannot exceed {NAME_MAX_LENGTH} characters")
        if not self.email:
            errors.append("Email is required")
        elif not is_valid_email(self.email):
            errors.append("Please enter a valid email")
        if not self.message:
            errors.append("Message is required")
        elif len(self.message) > MESSAGE_MAX_LENGTH:
            errors.append(f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters")
        if not self.ip_address:
            errors.append("Client address is required")
        return errors

    def __repr__(self):
        return f"<ContactSubmission {self.id} {self.email} {self.status}>"
