"""Request and response models for the taxonomy endpoints."""
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from circles.models.taxonomy import CanonicalCategory
from circles.models.vibes import CustomVibe, PresetVibe, Vibe, coerce_vibe


class CategoryOption(BaseModel):
    """Category entry for pickers."""
    key: CanonicalCategory
    label: str


class VibeOption(BaseModel):
    """Preset vibe entry for pickers, labelled in one locale."""
    key: str
    label: str
    category: CanonicalCategory


class CategoryAliases(BaseModel):
    """Stored strings that mean a category."""
    key: CanonicalCategory
    aliases: list[str]


class CustomVibeRequest(BaseModel):
    """Labels for a new custom vibe plus the vibes already chosen."""
    label_en: str = Field(alias="labelEn")
    label_fr: str = Field(alias="labelFr")
    existing: list[Vibe] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("existing", mode="before")
    @classmethod
    def coerce_existing(cls, v: Any) -> list[Union[PresetVibe, CustomVibe]]:
        if v is None:
            return []
        return [coerce_vibe(item) for item in v]
