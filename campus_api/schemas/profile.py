"""Account Schemas — password and profile validation at the API boundary.

Invariants:
    - Wire names are camelCase (aliases); Python names are snake_case
    - Error messages are client-facing and returned verbatim as `msg`
    - UpdateProfileRequest is partial: unset fields stay unset
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MIN_PASSWORD_LENGTH = 6
MAX_PORS = 10

_PASSWORD_MIX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
_FULLNAME = re.compile(r"^[a-zA-Z\s]+$")
_ROLL_NO = re.compile(r"^[a-zA-Z0-9]+$")


def check_password_strength(value: str, label: str = "New password") -> str:
    """Length first, then character mix — the first failure wins."""
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long",
        )
    if not _PASSWORD_MIX.match(value):
        raise ValueError(
            f"{label} must contain at least one uppercase letter, "
            "one lowercase letter, and one number",
        )
    return value


def check_fullname(value: str) -> str:
    if not 2 <= len(value) <= 50:
        raise ValueError("Full name must be between 2 and 50 characters")
    if not _FULLNAME.match(value):
        raise ValueError("Full name can only contain letters and spaces")
    return value


def check_college_name(value: str) -> str:
    value = value.strip()
    if not 2 <= len(value) <= 100:
        raise ValueError("College name must be between 2 and 100 characters")
    return value


def check_roll_no(value: str) -> str:
    if not 1 <= len(value) <= 20:
        raise ValueError("Roll number must be between 1 and 20 characters")
    if not _ROLL_NO.match(value):
        raise ValueError("Roll number can only contain letters and numbers")
    return value


def check_pors(value: list) -> list[str]:
    if len(value) > MAX_PORS:
        raise ValueError(f"Cannot have more than {MAX_PORS} PORs")
    cleaned = []
    for index, por in enumerate(value):
        if not isinstance(por, str) or len(por.strip()) < 2:
            raise ValueError(
                f"POR at index {index} must be a valid string with at least 2 characters",
            )
        cleaned.append(por.strip())
    return cleaned


class ChangePasswordRequest(BaseModel):
    """Body of PUT /change-password."""
    model_config = ConfigDict(populate_by_name=True)

    current_password: str | None = Field(
        None, alias="currentPassword", validate_default=True,
    )
    new_password: str | None = Field(
        None, alias="newPassword", validate_default=True,
    )
    confirm_password: str | None = Field(None, alias="confirmPassword")

    @field_validator("current_password")
    @classmethod
    def require_current(cls, v: str | None) -> str:
        if not v:
            raise ValueError("Current password is required")
        return v

    @field_validator("new_password")
    @classmethod
    def check_new(cls, v: str | None) -> str:
        return check_password_strength(v or "")

    @model_validator(mode="after")
    def confirmation_matches(self) -> "ChangePasswordRequest":
        if self.confirm_password is not None and self.confirm_password != self.new_password:
            raise ValueError("Password confirmation does not match new password")
        return self


class UpdateProfileRequest(BaseModel):
    """Body of PUT /update-profile. Every field optional."""
    model_config = ConfigDict(populate_by_name=True)

    fullname: str | None = None
    college_name: str | None = Field(None, alias="collegeName")
    roll_no: str | None = Field(None, alias="rollNo")
    pors: list | None = Field(None, alias="PORs")

    @field_validator("fullname")
    @classmethod
    def validate_fullname(cls, v: str | None) -> str | None:
        return check_fullname(v) if v is not None else v

    @field_validator("college_name")
    @classmethod
    def validate_college_name(cls, v: str | None) -> str | None:
        return check_college_name(v) if v is not None else v

    @field_validator("roll_no")
    @classmethod
    def validate_roll_no(cls, v: str | None) -> str | None:
        return check_roll_no(v) if v is not None else v

    @field_validator("pors", mode="before")
    @classmethod
    def pors_must_be_list(cls, v):
        if v is not None and not isinstance(v, list):
            raise ValueError("PORs must be an array")
        return v

    @field_validator("pors")
    @classmethod
    def validate_pors(cls, v: list | None) -> list[str] | None:
        return check_pors(v) if v is not None else v

    def changes(self) -> dict:
        """Column -> value for the fields actually sent (None values skipped)."""
        return {
            name: getattr(self, name)
            for name in ("fullname", "college_name", "roll_no", "pors")
            if name in self.model_fields_set and getattr(self, name) is not None
        }
