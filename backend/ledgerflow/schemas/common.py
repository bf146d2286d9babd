"""Input parsing shared by the services.

Services accept either a schema instance or a plain dict; both end up as a
validated schema, and pydantic failures become ledger ValidationErrors.
"""
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ledgerflow.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _describe(error: dict) -> tuple[str, str | None]:
    loc = error.get("loc") or ()
    field = ".".join(str(part) for part in loc) or None
    if error.get("type") == "missing":
        return f"{field} is required", field
    if error.get("type") == "extra_forbidden":
        return f"{field} cannot be set here", field
    msg = error.get("msg", "invalid value")
    # pydantic prefixes custom validator messages with "Value error, "
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    if field:
        return f"{field}: {msg}", field
    return msg, None


def parse_input(schema: Type[SchemaT], data: Any) -> SchemaT:
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    if not isinstance(data, dict):
        raise ValidationError(f"Expected an object, got {type(data).__name__}")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        message, field = _describe(e.errors()[0])
        raise ValidationError(message, field=field) from e
