"""
Wanderlust Backend — Payload Validation Rules
===============================================

What:  Checks submitted listing and review payloads against their schemas.
Why:   Invalid input must fail the whole request with HTTP 400 before any
       repository call runs.
How:   validate_listing() / validate_review() never raise for bad input.
       They return a ValidationResult that is either ok (carrying the
       normalized payload) or failed (carrying one message per violation).
       Route dependencies turn a failed result into a ValidationError.

Message format:
    Each message names the dotted field path in quotes, followed by the rule:
        "listing.title" is required
        "listing.price" must be greater than or equal to 0
        "review.comment" is not allowed to be empty
    The combined message joins them with a comma.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from wanderlust.schemas.listing import ListingIn, ListingPayload
from wanderlust.schemas.review import ReviewIn, ReviewPayload

T = TypeVar("T")

# pydantic error type → message template ({path} plus the error's ctx values)
_MESSAGES: Dict[str, str] = {
    "missing": '"{path}" is required',
    "string_too_short": '"{path}" is not allowed to be empty',
    "string_too_long": '"{path}" length must be less than or equal to {max_length} characters long',
    "string_type": '"{path}" must be a string',
    "greater_than_equal": '"{path}" must be greater than or equal to {ge}',
    "less_than_equal": '"{path}" must be less than or equal to {le}',
    "float_parsing": '"{path}" must be a number',
    "float_type": '"{path}" must be a number',
    "finite_number": '"{path}" must be a number',
    "int_parsing": '"{path}" must be a number',
    "int_type": '"{path}" must be a number',
    "int_from_float": '"{path}" must be an integer',
    "model_type": '"{path}" must be of type object',
    "model_attributes_type": '"{path}" must be of type object',
}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a normalized payload (ok) or the list of rule violations."""

    value: Optional[T] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        """All violations joined into the single message shown to the user."""
        return ",".join(self.errors)


def format_error(error: Dict[str, Any]) -> str:
    """Render one pydantic error dict as a human-readable message."""
    path = ".".join(str(part) for part in error.get("loc", ())) or "value"
    template = _MESSAGES.get(error.get("type", ""))
    if template is None:
        return f'"{path}" {error.get("msg", "is invalid")}'
    # Float fields report their bounds as floats (ge=0 → 0.0); show whole numbers as ints
    ctx = {
        key: int(value) if isinstance(value, float) and value.is_integer() else value
        for key, value in error.get("ctx", {}).items()
    }
    return template.format(path=path, **ctx)


def _validate(schema: Type[BaseModel], raw: Any) -> ValidationResult:
    try:
        return ValidationResult(value=schema.model_validate(raw))
    except PydanticValidationError as e:
        return ValidationResult(errors=[format_error(err) for err in e.errors()])


def validate_listing(raw: Any) -> ValidationResult[ListingIn]:
    """
    Validate a submitted {"listing": {...}} payload.

    Returns:
        ValidationResult whose value is the normalized ListingIn on success.
    """
    result = _validate(ListingPayload, raw)
    if not result.ok:
        return result
    return ValidationResult(value=result.value.listing)


def validate_review(raw: Any) -> ValidationResult[ReviewIn]:
    """Validate a submitted {"review": {...}} payload."""
    result = _validate(ReviewPayload, raw)
    if not result.ok:
        return result
    return ValidationResult(value=result.value.review)
