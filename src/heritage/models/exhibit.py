"""Exhibit catalog models."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Exhibit(BaseModel):
    """An exhibit shown in the catalog."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    name: str
    description: str = ""
    image: str | None = Field(default=None, description="Image URL")
    location: str | None = Field(default=None, description="e.g., Wing A, Floor 1")
    duration: str | None = Field(default=None, description="e.g., 45 min")
    category: str | None = None


class ExhibitInput(BaseModel):
    """Admin form for creating or updating an exhibit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = ""
    category: str = ""
    duration: str | None = None
    image: bytes | None = Field(default=None, description="Raw image upload")
    image_filename: str = "exhibit.jpg"

    def to_form_data(self) -> dict[str, str]:
        """Text fields for the multipart body."""
        data = self.model_dump(include={"name", "description", "location", "category", "duration"})
        return {key: value for key, value in data.items() if value is not None}

    def to_files(self) -> dict[str, Any] | None:
        """File part for the multipart body, if an image was supplied."""
        if self.image is None:
            return None
        return {"image": (self.image_filename, self.image)}
