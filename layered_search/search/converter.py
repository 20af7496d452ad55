"""Conversion between legacy filter blocks and facets.

``FiltersConverter`` is the only component that knows both the legacy
filter block format emitted by the catalog store and the generic facet
model. Both directions are total: input is either converted completely
or rejected with a ``ConversionError``.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from layered_search.domain.exceptions import ConversionError, DuplicateLabelError
from layered_search.domain.facets import DisplayType, Facet, Filter
from layered_search.search.legacy import (
    FILTER_TYPE_DROPDOWN,
    FILTER_TYPE_RADIO,
    LegacyFilterDefinition,
    LegacyFilterParams,
)

logger = structlog.get_logger()

DISPLAY_TYPES = {
    FILTER_TYPE_RADIO: DisplayType.RADIO,
    FILTER_TYPE_DROPDOWN: DisplayType.DROPDOWN,
}


class FiltersConverter:
    """Maps legacy filter definitions to facets and back.

    Example usage:
        converter = FiltersConverter()
        template = converter.to_facets(await source.get_filter_definitions())
        template[0].filters[0].active = True
        params = converter.to_legacy_filters(template)
        # {"color": ["red"]}
    """

    def to_facets(
        self,
        definitions: Iterable[Mapping[str, Any] | LegacyFilterDefinition],
    ) -> list[Facet]:
        """Build a facet template from legacy filter definitions.

        One facet per definition and one filter per option, in source
        order. All filters start inactive.

        Args:
            definitions: Raw definitions or already validated models.

        Returns:
            Fresh facet template.

        Raises:
            ConversionError: If a definition is malformed or labels collide.
        """
        template: list[Facet] = []
        seen_labels: set[str] = set()
        seen_keys: set[str] = set()

        for index, raw in enumerate(definitions):
            definition = self._validate(raw, index)

            if definition.label in seen_labels:
                raise DuplicateLabelError(definition.label)
            if definition.key in seen_keys:
                raise ConversionError(
                    f"duplicate attribute key '{definition.key}'",
                    key=definition.key,
                    index=index,
                )
            seen_labels.add(definition.label)
            seen_keys.add(definition.key)

            template.append(self._definition_to_facet(definition))

        return template

    def to_legacy_filters(self, template: Sequence[Facet]) -> LegacyFilterParams:
        """Express the active filters of a template as legacy filter params.

        Args:
            template: Facet template, usually with activation applied.

        Returns:
            Mapping of attribute key to the values of its active filters.
            Facets without active filters do not appear.

        Raises:
            ConversionError: If labels collide or an active filter cannot
                be expressed as a legacy constraint.
        """
        self._check_unique_labels(template)

        params: LegacyFilterParams = {}
        for facet in template:
            active = facet.active_filters
            if not active:
                continue

            if not facet.key:
                raise ConversionError(
                    f"facet '{facet.label}' has active filters but no attribute key",
                    facet=facet.label,
                )
            if facet.key in params:
                raise ConversionError(
                    f"duplicate attribute key '{facet.key}'",
                    key=facet.key,
                    facet=facet.label,
                )

            values: list[str] = []
            for item in active:
                if item.value is None:
                    raise ConversionError(
                        f"active filter '{item.label}' in facet '{facet.label}' has no value",
                        facet=facet.label,
                        filter=item.label,
                    )
                values.append(item.value)
            params[facet.key] = values

        return params

    def _validate(
        self,
        raw: Mapping[str, Any] | LegacyFilterDefinition,
        index: int,
    ) -> LegacyFilterDefinition:
        """Validate one raw definition."""
        if isinstance(raw, LegacyFilterDefinition):
            return raw
        if not isinstance(raw, Mapping):
            raise ConversionError(
                f"definition must be a mapping, got {type(raw).__name__}",
                index=index,
            )
        try:
            return LegacyFilterDefinition.model_validate(dict(raw))
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            logger.warning(
                "Malformed legacy filter definition",
                index=index,
                label=raw.get("label"),
                errors=errors,
            )
            raise ConversionError(
                f"malformed definition at index {index}",
                index=index,
                errors=errors,
            ) from e

    def _definition_to_facet(self, definition: LegacyFilterDefinition) -> Facet:
        """Convert a validated definition."""
        display_type = DISPLAY_TYPES.get(definition.filter_type, DisplayType.CHECKBOX)
        facet = Facet(
            label=definition.label,
            key=definition.key,
            type=definition.type,
            display_type=display_type,
            multiple_selection_allowed=display_type is DisplayType.CHECKBOX,
            show_limit=definition.show_limit,
        )

        for option in definition.options:
            if facet.find_filter(option.label) is not None:
                raise DuplicateLabelError(option.label, facet=facet.label)

            properties: dict[str, Any] = {}
            if option.color:
                properties["color"] = option.color

            facet.filters.append(
                Filter(
                    label=option.label,
                    value=option.value,
                    magnitude=option.count,
                    type=definition.type,
                    properties=properties,
                )
            )

        return facet

    def _check_unique_labels(self, template: Sequence[Facet]) -> None:
        """Reject templates whose facet or filter labels collide."""
        facet_labels: set[str] = set()
        for facet in template:
            if facet.label in facet_labels:
                raise DuplicateLabelError(facet.label)
            facet_labels.add(facet.label)

            filter_labels: set[str] = set()
            for item in facet.filters:
                if item.label in filter_labels:
                    raise DuplicateLabelError(item.label, facet=facet.label)
                filter_labels.add(item.label)
