"""Error taxonomy for the contact API.

Every error a handler can raise on purpose derives from ``ContactAPIError``
and carries the HTTP status and the message that is safe to show the caller.
The exception handlers in ``contact_api.main`` turn them into the JSON
envelope ``{success: false, message, errors?}``.
"""
from typing import List, Optional


class ContactAPIError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.public_message
        self.errors = errors
        super().__init__(self.message)


class ClientInputError(ContactAPIError):
    status_code = 400
    public_message = "Invalid input"


class MissingFieldError(ClientInputError):
    public_message = "All fields are required"


class FieldTooLongError(ClientInputError):
    public_message = "Input too long"

    def __init__(self, field: str, max_length: int):
        self.field = field
        self.max_length = max_length
        super().__init__(f"{field.capitalize()} must be at most {max_length} characters")


class InvalidEmailError(ClientInputError):
    public_message = "Invalid email address"


class InvalidStatusError(ClientInputError):
    public_message = "Invalid status"

    def __init__(self, status=None, allowed: Optional[List[str]] = None):
        self.status = status
        message = self.public_message
        if allowed:
            message = f"Invalid status. Must be one of: {', '.join(allowed)}"
        super().__init__(message)


class RecordValidationError(ClientInputError):
    """Storage-level constraint check rejected a record."""

    public_message = "Validation failed"

    def __init__(self, errors: List[str]):
        super().__init__(self.public_message, errors=list(errors))


class UnauthorizedError(ContactAPIError):
    status_code = 401
    public_message = "Not authorized"


class ContactNotFoundError(ContactAPIError):
    status_code = 404
    public_message = "Contact not found"

    def __init__(self, contact_id: Optional[str] = None):
        self.contact_id = contact_id
        super().__init__()


class RouteNotFoundError(ContactAPIError):
    status_code = 404
    public_message = "Route not found"


class PayloadTooLargeError(ContactAPIError):
    status_code = 413
    public_message = "Request body too large"


class RateLimitExceeded(ContactAPIError):
    status_code = 429
    public_message = "Too many requests, try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        self.retry_after = retry_after
        super().__init__(message)


class PersistenceError(ContactAPIError):
    public_message = "Failed to save your message. Please try again later."


class NotificationError(ContactAPIError):
    public_message = "Your message was received, but we could not send the notification emails."

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__()


class MailTransportError(Exception):
    """Raised by a mail transport when a single send fails."""


class ConfigurationError(Exception):
    """Operational misconfiguration detected at startup."""
