"""Request schemas for the settings endpoints.

Field names follow the wire format the web client sends. Numeric inputs are
accepted as strings or numbers and normalized by the settings service.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

NumericInput = str | int | float | None


class SettingsUserPayload(BaseModel):
    """User and detail fields submitted from the settings form.

    Missing or null user fields are left unchanged. Detail fields are always
    written, missing ones as null.
    """

    model_config = ConfigDict(extra="ignore")

    # users table
    fullname: str | None = None
    birthdate: str | None = None
    gender: str | None = None
    location: str | None = None
    bio: str | None = None

    # user_details table
    height: NumericInput = None
    weight: NumericInput = None
    position: str | None = None
    jersey_number: str | int | None = None
    phone: str | None = None
    contact_num: str | None = None
    email: str | None = None
    video_url: str | None = None


class AchievementPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    achievement_id: str | None = None
    title: str | None = None
    year: NumericInput = None
    description: str | None = None


class EducationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    education_id: str | None = None
    school: str | None = None
    degree: str | None = None
    field: str | None = None
    start_year: NumericInput = Field(default=None, alias="startYear")
    end_year: NumericInput = Field(default=None, alias="endYear")


class SettingsUpdateRequest(BaseModel):
    """Desired state of a user's settings plus explicit deletions."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user: SettingsUserPayload = Field(default_factory=SettingsUserPayload)
    achievements: list[AchievementPayload] = Field(default_factory=list)
    education: list[EducationPayload] = Field(default_factory=list)
    deleted_achievement_ids: list[str] = Field(default_factory=list, alias="deletedAchievementIds")
    deleted_education_ids: list[str] = Field(default_factory=list, alias="deletedEducationIds")
