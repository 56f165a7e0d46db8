"""Turn pydantic validation errors into the messages clients see.

Learn: Pydantic already collects every failing field in one pass, which
is exactly the contract we want (report all problems, not the first).
All that's left is wording: one message per field, phrased for humans,
keyed off the error type.
"""

from typing import Any, Iterable

from pydantic_core import PydanticCustomError

# Field name (wire alias or attribute name) -> label used in messages
FIELD_LABELS = {
    "firstName": "first name",
    "first_name": "first name",
    "lastName": "last name",
    "last_name": "last name",
    "emailAddress": "email",
    "email_address": "email",
    "password": "password",
    "title": "title",
    "description": "description",
    "estimatedTime": "estimated time",
    "estimated_time": "estimated time",
    "materialsNeeded": "materials needed",
    "materials_needed": "materials needed",
}

INVALID_EMAIL = "invalid_email"
BLANK_VALUE = "blank_value"

BODY_NOT_OBJECT = "Request body must be a JSON object"
BODY_NOT_JSON = "Request body must be valid JSON"


def blank_value_error() -> PydanticCustomError:
    return PydanticCustomError(BLANK_VALUE, "Value must not be empty")


def invalid_email_error(reason: str) -> PydanticCustomError:
    return PydanticCustomError(
        INVALID_EMAIL,
        "value is not a valid email address: {reason}",
        {"reason": reason},
    )


def value_required_message(field: str) -> str:
    return f'Please provide a value for "{FIELD_LABELS.get(field, field)}"'


def invalid_email_message(field: str) -> str:
    return f'Please provide a valid email address for "{FIELD_LABELS.get(field, field)}"'


def _message_for(error: dict[str, Any]) -> str:
    loc = tuple(error.get("loc", ()))
    if loc and loc[0] == "body":
        loc = loc[1:]

    if error.get("type") == "json_invalid":
        return BODY_NOT_JSON
    # Problems with the body as a whole, not one field
    if not loc or not isinstance(loc[0], str):
        return BODY_NOT_OBJECT

    field = loc[0]
    if error.get("type") == INVALID_EMAIL:
        return invalid_email_message(field)
    return value_required_message(field)


def error_messages(errors: Iterable[dict[str, Any]]) -> list[str]:
    """One message per field, in the order pydantic reported them."""
    messages: list[str] = []
    for error in errors:
        message = _message_for(error)
        if message not in messages:
            messages.append(message)
    return messages
