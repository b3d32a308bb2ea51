"""
Input validation for registration and login.

Runs locally; never touches the store, the hasher or the raw input.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from authcore.kernel.identity.errors import InputValidationError
from authcore.schemas.auth import AuthFailure, LoginInput, RegisterInput

ROOT_ERROR_KEY = "__root__"

SCHEMAS: Dict[str, Type[BaseModel]] = {
    "registration": RegisterInput,
    "login": LoginInput,
}


class ValidationOutcome(BaseModel):
    """Result of validating raw input against a schema."""

    valid: bool
    status: int
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None
    data: Optional[Any] = None

    def to_error(self) -> InputValidationError:
        return InputValidationError(self.errors or {}, self.message)

    def to_failure(self) -> AuthFailure:
        return self.to_error().to_result()


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by dotted field path."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors(include_url=False):
        if error["type"] == "reserved_field":
            # Raised at model level; report under each offending field
            fields = error["ctx"]["fields"].split(", ")
        else:
            fields = [".".join(str(loc) for loc in error["loc"]) or ROOT_ERROR_KEY]
        for field in fields:
            errors.setdefault(field, []).append(error["msg"])
    return errors


def validate(schema: Type[BaseModel] | str, raw: Any) -> ValidationOutcome:
    """
    Validate ``raw`` against ``schema``.

    Args:
        schema: A model class, or one of the names in ``SCHEMAS``
        raw: Untyped input, usually a decoded JSON body

    Returns:
        ValidationOutcome with ``data`` set to the parsed model when valid
    """
    model = SCHEMAS[schema] if isinstance(schema, str) else schema
    try:
        data = model.model_validate(raw)
    except ValidationError as exc:
        return ValidationOutcome(
            valid=False,
            status=400,
            message=InputValidationError.default_message,
            errors=field_errors(exc),
        )
    return ValidationOutcome(valid=True, status=200, data=data)
