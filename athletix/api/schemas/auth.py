"""Request and response schemas for account endpoints.

Required-field checks happen in the account service so the error messages
match what the web client expects; every field is optional here.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None
    gender: str | None = None
    birth_date: str | None = Field(default=None, alias="birthDate")
    region: str | None = None
    sport: str | None = None
    bio: str | None = None


class RegisterResponse(BaseModel):
    message: str
    user_id: str


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginUser(BaseModel):
    id: str
    email: str | None
    fullname: str
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: LoginUser


class UpdatePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")
    confirm_password: str | None = Field(default=None, alias="confirmPassword")


class MessageResponse(BaseModel):
    message: str
