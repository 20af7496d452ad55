"""Facet model.

Generic structures describing filterable dimensions of a product
listing, independent of how the filters are defined upstream.

A facet template (``list[Facet]``) is built fresh for every request.
Activation is the only mutation performed on it, so instances must not
be shared between requests.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DisplayType(str, Enum):
    """How a facet is meant to be rendered."""

    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"


@dataclass
class Filter:
    """One selectable value within a facet.

    Attributes:
        label: Display label, unique within the parent facet.
        value: Value sent to the catalog when the filter is active.
        magnitude: Number of products matching this value.
        active: Whether the filter is part of the current selection.
        type: Legacy filter type inherited from the parent facet.
        properties: Extra presentation data (e.g. a colour swatch).
        next_encoded_facets: Navigation token that toggles this filter.
    """

    label: str
    value: str | None = None
    magnitude: int = 0
    active: bool = False
    type: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    next_encoded_facets: str | None = None


@dataclass
class Facet:
    """A filterable product dimension.

    Attributes:
        label: Display label, unique within a template.
        key: Attribute key used in legacy filter parameters.
        type: Legacy filter type (e.g. "id_attribute_group", "manufacturer").
        display_type: Rendering hint.
        multiple_selection_allowed: Whether several filters may be active.
        displayed: Whether the facet should be rendered at all.
        show_limit: Number of filters to show before collapsing, 0 for all.
        filters: Ordered filters of this facet.
    """

    label: str
    key: str | None = None
    type: str | None = None
    display_type: DisplayType = DisplayType.CHECKBOX
    multiple_selection_allowed: bool = True
    displayed: bool = True
    show_limit: int = 0
    filters: list[Filter] = field(default_factory=list)

    def find_filter(self, label: str) -> Filter | None:
        """Get filter by label.

        Args:
            label: Filter label.

        Returns:
            Filter if found, None otherwise.
        """
        for candidate in self.filters:
            if candidate.label == label:
                return candidate
        return None

    @property
    def active_filters(self) -> list[Filter]:
        """Get filters that are currently active."""
        return [f for f in self.filters if f.active]

    @property
    def has_active_filters(self) -> bool:
        """Check if any filter of this facet is active."""
        return any(f.active for f in self.filters)


def find_facet(template: Sequence[Facet], label: str) -> Facet | None:
    """Get facet by label.

    Templates hold a handful of facets, so a linear scan is used.

    Args:
        template: Facet template to search.
        label: Facet label.

    Returns:
        Facet if found, None otherwise.
    """
    for facet in template:
        if facet.label == label:
            return facet
    return None


def active_selection(template: Sequence[Facet]) -> dict[str, list[str]]:
    """Collect active filter labels per facet.

    Args:
        template: Facet template.

    Returns:
        Mapping of facet label to active filter labels, in template order.
        Facets without active filters are left out.
    """
    return {
        facet.label: [f.label for f in facet.active_filters]
        for facet in template
        if facet.has_active_filters
    }
