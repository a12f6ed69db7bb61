"""
Ceremony type data model for the Ceremony Slot Engine.

The ceremony type is owned by the surrounding booking system; the engine only
reads its language requirement and default duration.
"""

from typing import Optional, Set
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CeremonyTypeConstraint(BaseModel):
    """Language and duration requirements of a ceremony type."""

    id: Optional[str] = Field(default=None, description="Ceremony type identifier")
    name: str = Field(default="", validation_alias=AliasChoices("name", "naam"))

    # Empty set means "no language requirement"
    required_languages: Set[str] = Field(
        default_factory=set,
        validation_alias=AliasChoices("required_languages", "requiredLanguages", "talen"),
        description="The celebrant must speak at least one of these",
    )

    # Bounds are enforced by the engine settings, not here
    duration_minutes: int = Field(
        default=60,
        ge=1,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes", "duurMinuten"),
    )

    @field_validator('required_languages')
    @classmethod
    def normalize_languages(cls, v):
        return {lang.strip().lower() for lang in v if lang and lang.strip()}

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "type_standaard_en",
            "naam": "Standaard ceremonie (Engels)",
            "talen": ["en"],
            "duurMinuten": 45
        }
    })
