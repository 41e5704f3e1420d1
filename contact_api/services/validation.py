import re

from contact_api.core.exceptions import FieldTooLongError, InvalidEmailError, MissingFieldError
from contact_api.models.contact import MESSAGE_MAX_LENGTH, NAME_MAX_LENGTH

# whole string: word runs joined by single dots/hyphens, ending in a 2-3 character segment
EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}", re.ASCII)


def is_valid_email(email) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_contact_input(name, email, message):
    """
    Check a contact form payload.
    Raises a ClientInputError subclass on the first rule that fails.
    Whitespace-only and non-string values count as missing, not only the empty string.
    """
    if _is_blank(name) or _is_blank(email) or _is_blank(message):
        raise MissingFieldError()

    if len(name) > NAME_MAX_LENGTH:
        raise FieldTooLongError("name", NAME_MAX_LENGTH)
    if len(message) > MESSAGE_MAX_LENGTH:
        raise FieldTooLongError("message", MESSAGE_MAX_LENGTH)

    if not is_valid_email(email):
        raise InvalidEmailError()
