"""Legacy filter block shapes.

The catalog store describes its filterable attributes as a flat "filter
block": one definition per attribute with its possible values and
product counts. These pydantic models validate that shape at the
boundary before it is converted into facets.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Legacy ``filter_type`` codes
FILTER_TYPE_CHECKBOX = 0
FILTER_TYPE_RADIO = 1
FILTER_TYPE_DROPDOWN = 2

# Legacy filter parameters: attribute key -> values that must match.
# AND across keys, OR within a key.
LegacyFilterParams = dict[str, list[str]]


def _stringify_identifier(value: Any) -> Any:
    """Accept integer identifiers where a string value is expected."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class LegacyFilterOption(BaseModel):
    """One possible value of a legacy filter attribute."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., min_length=1, description="Display name of the value")
    value: str = Field(..., min_length=1, description="Value used in filter params")
    count: int = Field(default=0, ge=0, description="Number of matching products")
    color: str | None = Field(default=None, description="Colour swatch, if any")

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value: Any) -> Any:
        """Accept integer value identifiers."""
        return _stringify_identifier(value)


class LegacyFilterDefinition(BaseModel):
    """A legacy filterable attribute with its options."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Attribute key used in filter params")
    label: str = Field(..., min_length=1, description="Display name of the attribute")
    type: str = Field(default="id_attribute_group", description="Legacy filter type")
    filter_type: int = Field(
        default=FILTER_TYPE_CHECKBOX,
        ge=FILTER_TYPE_CHECKBOX,
        le=FILTER_TYPE_DROPDOWN,
        description="0 = checkbox, 1 = radio, 2 = dropdown",
    )
    show_limit: int = Field(default=0, ge=0, description="Values shown before collapsing")
    options: tuple[LegacyFilterOption, ...] = Field(default_factory=tuple)

    @field_validator("key", mode="before")
    @classmethod
    def coerce_key(cls, value: Any) -> Any:
        """Accept integer attribute keys."""
        return _stringify_identifier(value)
