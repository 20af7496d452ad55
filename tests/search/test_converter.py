"""Tests for the legacy filter converter."""

from typing import Any

import pytest

from layered_search.domain import ConversionError, DisplayType, DuplicateLabelError, Facet, Filter
from layered_search.search import FiltersConverter, LegacyFilterDefinition


@pytest.fixture
def converter() -> FiltersConverter:
    """Create converter."""
    return FiltersConverter()


class TestToFacets:
    """Tests for legacy definitions to facets."""

    def test_one_facet_per_definition(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Definitions map to facets in source order."""
        template = converter.to_facets(definitions)
        assert [f.label for f in template] == ["Color", "Size"]
        assert [f.key for f in template] == ["color", "size"]

    def test_one_filter_per_option(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Options map to filters in source order with counts and values."""
        color = converter.to_facets(definitions)[0]
        assert [f.label for f in color.filters] == ["Red", "Blue"]
        assert [f.value for f in color.filters] == ["red", "blue"]
        assert [f.magnitude for f in color.filters] == [3, 2]
        assert all(f.type == "id_attribute_group" for f in color.filters)

    def test_all_filters_start_inactive(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Fresh templates have no active filter."""
        template = converter.to_facets(definitions)
        assert not any(f.active for facet in template for f in facet.filters)

    def test_color_becomes_property(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Option colour swatches are kept as filter properties."""
        color, size = converter.to_facets(definitions)
        assert color.filters[0].properties == {"color": "#ff0000"}
        assert size.filters[0].properties == {}

    def test_display_types(self, converter: FiltersConverter) -> None:
        """Legacy filter_type codes map to display types."""
        template = converter.to_facets(
            [
                {"key": "a", "label": "A", "filter_type": 0},
                {"key": "b", "label": "B", "filter_type": 1},
                {"key": "c", "label": "C", "filter_type": 2},
            ]
        )
        assert [f.display_type for f in template] == [
            DisplayType.CHECKBOX,
            DisplayType.RADIO,
            DisplayType.DROPDOWN,
        ]
        assert template[0].multiple_selection_allowed
        assert not template[1].multiple_selection_allowed

    def test_integer_identifiers_accepted(self, converter: FiltersConverter) -> None:
        """Numeric keys and values are accepted as strings."""
        template = converter.to_facets(
            [{"key": 3, "label": "Color", "options": [{"label": "Red", "value": 12}]}]
        )
        assert template[0].key == "3"
        assert template[0].filters[0].value == "12"

    def test_validated_models_accepted(self, converter: FiltersConverter) -> None:
        """Already validated definitions are used as they are."""
        definition = LegacyFilterDefinition.model_validate(
            {"key": "size", "label": "Size", "options": [{"label": "S", "value": "s"}]}
        )
        template = converter.to_facets([definition])
        assert template[0].filters[0].label == "S"

    def test_empty_definitions(self, converter: FiltersConverter) -> None:
        """No definitions give an empty template."""
        assert converter.to_facets([]) == []

    def test_each_call_builds_new_template(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Templates are never shared between calls."""
        first = converter.to_facets(definitions)
        second = converter.to_facets(definitions)
        first[0].filters[0].active = True
        assert not second[0].filters[0].active

    @pytest.mark.parametrize(
        "definition",
        [
            {"key": "color", "options": []},
            {"key": "color", "label": "", "options": []},
            {"label": "Color", "options": []},
            {"key": "color", "label": "Color", "options": [{"value": "red"}]},
            {"key": "color", "label": "Color", "options": [{"label": "Red"}]},
            {"key": "color", "label": "Color", "options": [{"label": "Red", "value": ""}]},
            {"key": "color", "label": "Color", "options": [{"label": "Red", "value": "r", "count": -1}]},
            {"key": "color", "label": "Color", "filter_type": 9},
        ],
    )
    def test_malformed_definition_raises_error(
        self, converter: FiltersConverter, definition: dict[str, Any]
    ) -> None:
        """Missing labels or values raise ConversionError."""
        with pytest.raises(ConversionError) as exc_info:
            converter.to_facets([definition])
        assert exc_info.value.details["index"] == 0
        assert exc_info.value.details["errors"]

    def test_non_mapping_definition_raises_error(self, converter: FiltersConverter) -> None:
        """Definitions must be mappings."""
        with pytest.raises(ConversionError):
            converter.to_facets(["Color"])  # type: ignore[list-item]

    def test_duplicate_facet_label_raises_error(self, converter: FiltersConverter) -> None:
        """Two facets with the same label are rejected."""
        with pytest.raises(DuplicateLabelError) as exc_info:
            converter.to_facets(
                [{"key": "a", "label": "Color"}, {"key": "b", "label": "Color"}]
            )
        assert exc_info.value.details["label"] == "Color"
        assert exc_info.value.details["facet"] is None

    def test_duplicate_key_raises_error(self, converter: FiltersConverter) -> None:
        """Two facets with the same attribute key are rejected."""
        with pytest.raises(ConversionError):
            converter.to_facets(
                [{"key": "color", "label": "Color"}, {"key": "color", "label": "Colour"}]
            )

    def test_duplicate_filter_label_raises_error(self, converter: FiltersConverter) -> None:
        """Two options with the same label in one facet are rejected, not merged."""
        with pytest.raises(DuplicateLabelError) as exc_info:
            converter.to_facets(
                [
                    {
                        "key": "color",
                        "label": "Color",
                        "options": [
                            {"label": "Red", "value": "red"},
                            {"label": "Red", "value": "crimson"},
                        ],
                    }
                ]
            )
        assert exc_info.value.details["facet"] == "Color"

    def test_same_filter_label_in_different_facets(self, converter: FiltersConverter) -> None:
        """Filter labels only need to be unique within their facet."""
        template = converter.to_facets(
            [
                {"key": "a", "label": "A", "options": [{"label": "Yes", "value": "1"}]},
                {"key": "b", "label": "B", "options": [{"label": "Yes", "value": "1"}]},
            ]
        )
        assert len(template) == 2


class TestToLegacyFilters:
    """Tests for facets to legacy filter params."""

    def test_no_activation_gives_no_constraints(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """An untouched template converts to an empty parameter set."""
        assert converter.to_legacy_filters(converter.to_facets(definitions)) == {}

    def test_active_filters_become_constraints(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Active filter values are grouped by facet key."""
        color, size = converter.to_facets(definitions)
        color.filters[0].active = True
        color.filters[1].active = True
        size.filters[1].active = True

        params = converter.to_legacy_filters([color, size])

        assert params == {"color": ["red", "blue"], "size": ["m"]}

    def test_inactive_facets_omitted(
        self, converter: FiltersConverter, definitions: list[dict[str, Any]]
    ) -> None:
        """Facets without active filters do not appear."""
        template = converter.to_facets(definitions)
        template[1].filters[0].active = True
        assert converter.to_legacy_filters(template) == {"size": ["s"]}

    def test_active_filter_without_value_raises_error(self, converter: FiltersConverter) -> None:
        """Active filters must carry a value."""
        template = [Facet(label="Color", key="color", filters=[Filter(label="Red", active=True)])]
        with pytest.raises(ConversionError):
            converter.to_legacy_filters(template)

    def test_active_facet_without_key_raises_error(self, converter: FiltersConverter) -> None:
        """Facets with active filters must carry a key."""
        template = [Facet(label="Color", filters=[Filter(label="Red", value="red", active=True)])]
        with pytest.raises(ConversionError):
            converter.to_legacy_filters(template)

    def test_duplicate_facet_labels_raise_error(self, converter: FiltersConverter) -> None:
        """Templates with colliding facet labels are rejected."""
        template = [Facet(label="Color", key="a"), Facet(label="Color", key="b")]
        with pytest.raises(DuplicateLabelError):
            converter.to_legacy_filters(template)

    def test_duplicate_filter_labels_raise_error(self, converter: FiltersConverter) -> None:
        """Templates with colliding filter labels are rejected."""
        template = [
            Facet(
                label="Color",
                key="color",
                filters=[Filter(label="Red", value="red"), Filter(label="Red", value="r")],
            )
        ]
        with pytest.raises(DuplicateLabelError):
            converter.to_legacy_filters(template)

    def test_duplicate_keys_raise_error(self, converter: FiltersConverter) -> None:
        """Two active facets sharing a key are rejected rather than merged."""
        template = [
            Facet(label="Color", key="c", filters=[Filter(label="Red", value="r", active=True)]),
            Facet(label="Colour", key="c", filters=[Filter(label="Blue", value="b", active=True)]),
        ]
        with pytest.raises(ConversionError):
            converter.to_legacy_filters(template)
