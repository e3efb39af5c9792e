"""Auth Schemas — registration, login and token refresh bodies."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from campus_api.schemas.profile import (
    check_college_name, check_fullname, check_password_strength, check_pors,
    check_roll_no,
)


class RegisterRequest(BaseModel):
    """Body of POST /auth/register. Role is never accepted from the client."""
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_.]+$")
    email: EmailStr
    fullname: str
    password: str
    college_name: str = Field(alias="collegeName")
    roll_no: str = Field(alias="rollNo")
    address: str | None = Field(None, max_length=255)
    mobile_no: str | None = Field(
        None, alias="mobileNo", pattern=r"^\+?[0-9]{7,15}$",
    )
    profile_picture: str | None = Field(None, alias="profilePicture", max_length=500)
    is_iitp_student: bool = Field(False, alias="isIITPStud")
    pors: list[str] = Field(default_factory=list, alias="PORs")

    @field_validator("username", "email")
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("fullname")
    @classmethod
    def validate_fullname(cls, v: str) -> str:
        return check_fullname(v.strip())

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v, label="Password")

    @field_validator("college_name")
    @classmethod
    def validate_college_name(cls, v: str) -> str:
        return check_college_name(v)

    @field_validator("roll_no")
    @classmethod
    def validate_roll_no(cls, v: str) -> str:
        return check_roll_no(v.strip())

    @field_validator("pors")
    @classmethod
    def validate_pors(cls, v: list[str]) -> list[str]:
        return check_pors(v)


class LoginRequest(BaseModel):
    """Body of POST /auth/login."""
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.strip().lower()


class RefreshRequest(BaseModel):
    """Body of POST /auth/refresh."""
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken", min_length=1)
