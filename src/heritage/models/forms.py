"""Form models validated locally before any network call."""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from .errors import ValidationError

FormT = TypeVar("FormT", bound=BaseModel)


class LoginForm(BaseModel):
    """Login credentials."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(..., min_length=6)


class RegistrationForm(BaseModel):
    """New account data. confirm_password is optional for non-interactive callers."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str | None = None

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegistrationForm":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class ProfileUpdate(BaseModel):
    """Fields that can be updated on the current profile."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=2)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)

    def to_payload(self) -> dict[str, Any]:
        """Request body with unset fields omitted."""
        return self.model_dump(exclude_none=True)


def parse_form(model: type[FormT], **data: Any) -> FormT:
    """Validate form data, raising the client ValidationError on failure.

    Args:
        model: Form model class
        **data: Raw field values

    Returns:
        Validated form instance

    Raises:
        ValidationError: With the first problem as message and every
            failing field in details.
    """
    try:
        return model(**data)
    except pydantic.ValidationError as e:
        errors = e.errors()
        details = {
            ".".join(str(part) for part in err["loc"]) or "form": err["msg"] for err in errors
        }
        first = errors[0]["msg"].removeprefix("Value error, ")
        raise ValidationError(message=first, details=details) from e
