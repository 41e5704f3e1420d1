# contact_api/models/__init__.py
from .contact import ContactSubmission, ContactStatus

__all__ = ["ContactSubmission", "ContactStatus"]
