"""Identity models for the authenticated principal."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .enums import Role


class Identity(BaseModel):
    """The authenticated principal for the current session.

    Immutable: updates replace the whole snapshot via model_copy().
    The backend has shipped both `userName` and `name` for the display
    name, so both are accepted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="_id",
        description="Opaque user identifier",
    )
    name: str = Field(
        default="",
        validation_alias=AliasChoices("userName", "name"),
        serialization_alias="userName",
        description="Display name",
    )
    email: str = Field(..., description="Email address")
    role: Role = Field(default=Role.USER, description="Authorization role")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserRecord(Identity):
    """Identity-like record returned by the admin user listing."""

    is_active: bool | None = Field(
        default=None, validation_alias=AliasChoices("isActive", "is_active")
    )
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at")
    )
