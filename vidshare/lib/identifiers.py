"""Path/query identifier parsing.

Identifiers are validated here, before any handler touches the database, so a
malformed id is always a 400 rather than a 404 or a driver error.
"""

from uuid import UUID

from litestar.exceptions import ValidationException


def parse_id(value: str | None, label: str) -> UUID:
    """Parse ``value`` as a UUID or raise a 400 naming the entity."""
    try:
        return UUID(str(value).strip())
    except (ValueError, TypeError):
        raise ValidationException(f"Invalid {label} ID") from None


def parse_optional_id(value: str | None, label: str) -> UUID | None:
    if value is None or value == "":
        return None
    return parse_id(value, label)
