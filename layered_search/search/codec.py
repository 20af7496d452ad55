"""Navigation state codec.

Encodes the active filters of a facet template into a compact, URL-safe
token and decodes tokens back into a selection mapping.

Token format (before percent-encoding)::

    Color-Red-Blue/Size-S

Groups are separated by ``/``. Each group holds a facet label followed by
one or more filter labels, separated by ``-``. Reserved characters inside
labels are escaped with ``~`` (``~~``, ``~-``, ``~/``). The fragment is
then percent-encoded as UTF-8.
"""

from collections.abc import Mapping, Sequence
from urllib.parse import quote, unquote

from layered_search.domain.exceptions import DecodingError
from layered_search.domain.facets import Facet, active_selection

ESCAPE = "~"
FACET_SEPARATOR = "/"
FILTER_SEPARATOR = "-"
RESERVED = (ESCAPE, FACET_SEPARATOR, FILTER_SEPARATOR)

# facet label -> ordered, duplicate-free filter labels
Selection = dict[str, list[str]]


class NavigationStateCodec:
    """Serializes active facet selections to opaque tokens and back.

    Only active filters are encoded, so decoding yields exactly the
    active selection of the encoded template and nothing else.

    Example usage:
        codec = NavigationStateCodec()
        token = codec.encode_selection({"Color": ["Red", "Blue"]})
        # "Color-Red-Blue"
        codec.decode(token)
        # {"Color": ["Red", "Blue"]}
    """

    def encode(self, template: Sequence[Facet]) -> str:
        """Encode the active filters of a template.

        Args:
            template: Facet template.

        Returns:
            Token, empty when no filter is active.
        """
        return self.encode_selection(active_selection(template))

    def encode_selection(self, selection: Mapping[str, Sequence[str]]) -> str:
        """Encode a selection mapping.

        Args:
            selection: Facet label to active filter labels.

        Returns:
            Token, empty when the selection holds no filter.
        """
        groups = []
        for facet_label, filter_labels in selection.items():
            if not filter_labels:
                continue
            parts = [facet_label, *dict.fromkeys(filter_labels)]
            groups.append(FILTER_SEPARATOR.join(_escape(part) for part in parts))

        return quote(FACET_SEPARATOR.join(groups), safe=FACET_SEPARATOR)

    def decode(self, token: str | None) -> Selection:
        """Decode a token into a selection mapping.

        Args:
            token: Token as received from the client. None or empty
                decodes to an empty selection.

        Returns:
            Facet label to filter labels. Repeated facets are merged and
            repeated filters dropped, keeping first-seen order.

        Raises:
            DecodingError: If the token is malformed.
        """
        if not token:
            return {}

        try:
            fragment = unquote(token, errors="strict")
        except UnicodeDecodeError as e:
            raise DecodingError(token, "invalid percent-encoding") from e

        selection: Selection = {}
        for group in _split_groups(token, fragment):
            facet_label, *filter_labels = group
            labels = selection.setdefault(facet_label, [])
            for label in filter_labels:
                if label not in labels:
                    labels.append(label)
        return selection

    def toggle(
        self,
        selection: Mapping[str, Sequence[str]],
        facet_label: str,
        filter_label: str,
        exclusive: bool = False,
    ) -> Selection:
        """Flip one filter in a selection.

        Args:
            selection: Current selection (left untouched).
            facet_label: Facet of the filter.
            filter_label: Filter to activate or deactivate.
            exclusive: Activating replaces the other filters of the facet.

        Returns:
            New selection. A facet left without filters is removed.
        """
        toggled: Selection = {label: list(filters) for label, filters in selection.items()}
        labels = toggled.setdefault(facet_label, [])
        if filter_label in labels:
            labels.remove(filter_label)
        elif exclusive:
            labels[:] = [filter_label]
        else:
            labels.append(filter_label)
        if not labels:
            del toggled[facet_label]
        return toggled


def _escape(label: str) -> str:
    """Escape reserved characters of a label."""
    escaped = label.replace(ESCAPE, ESCAPE * 2)
    escaped = escaped.replace(FILTER_SEPARATOR, ESCAPE + FILTER_SEPARATOR)
    return escaped.replace(FACET_SEPARATOR, ESCAPE + FACET_SEPARATOR)


def _split_groups(token: str, fragment: str) -> list[list[str]]:
    """Split an unquoted fragment into groups of unescaped labels."""
    groups: list[list[str]] = []
    parts: list[str] = []
    current: list[str] = []
    escaping = False

    def close_part(position: int) -> None:
        label = "".join(current)
        if not label:
            raise DecodingError(token, "empty label", position)
        parts.append(label)
        current.clear()

    def close_group(position: int) -> None:
        close_part(position)
        if len(parts) < 2:
            raise DecodingError(token, f"facet '{parts[0]}' has no filters", position)
        groups.append(list(parts))
        parts.clear()

    for position, char in enumerate(fragment):
        if escaping:
            if char not in RESERVED:
                raise DecodingError(token, f"invalid escape sequence '~{char}'", position)
            current.append(char)
            escaping = False
        elif char == ESCAPE:
            escaping = True
        elif char == FILTER_SEPARATOR:
            close_part(position)
        elif char == FACET_SEPARATOR:
            close_group(position)
        else:
            current.append(char)

    if escaping:
        raise DecodingError(token, "dangling escape character", len(fragment))
    close_group(len(fragment))
    return groups
