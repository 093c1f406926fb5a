"""URL rendering from path templates and parameter mappings."""

from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence
from urllib.parse import quote_plus

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{[^{}/]+\}")


def encode(value: str) -> str:
    """Form-encode ``value`` as UTF-8 (space -> ``+``, ``/`` -> ``%2F``).

    ``_ . - ~`` and alphanumerics stay raw; everything else, ``*``
    included, is percent-encoded. Java's ``URLEncoder`` differs on two
    characters: it encodes ``~`` as ``%7E`` and leaves ``*`` raw.
    """
    return quote_plus(value, safe="", encoding="utf-8")


def render_path(
    template: str, path_params: Mapping[str, str] | None = None
) -> str:
    """Substitute every ``{key}`` in ``template`` with its encoded value.

    Placeholders without a matching parameter are left in place.
    """
    path = template
    for key, value in (path_params or {}).items():
        path = path.replace("{" + key + "}", encode(value))

    unresolved = _PLACEHOLDER.findall(path)
    if unresolved:
        logger.warning(
            "unresolved path placeholders left verbatim. template: %s, "
            "placeholders: %s",
            template,
            unresolved,
        )
    return path


def render_query(
    query_params: Mapping[str, Sequence[str]] | None = None,
) -> str:
    """Build ``?k=v&k=v2`` from a mapping of key -> list of values.

    Keys keep insertion order; a key with no values contributes nothing and
    an empty result has no leading ``?``. A bare ``str`` or ``bytes`` value
    is rejected with ``TypeError`` rather than split into characters.
    """
    pairs: list[str] = []
    for key, values in (query_params or {}).items():
        if isinstance(values, (str, bytes, bytearray)):
            raise TypeError(
                f"query parameter {key!r} must map to a list of values, "
                f"got {type(values).__name__}"
            )
        encoded_key = encode(key)
        for value in values:
            pairs.append(f"{encoded_key}={encode(value)}")
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


def is_absolute(path: str) -> bool:
    return path.startswith("http")


def resolve(base_url: str, path: str) -> str:
    """Prepend ``base_url`` unless ``path`` is already absolute."""
    return path if is_absolute(path) else base_url + path


def render_url(
    base_url: str,
    template: str,
    path_params: Mapping[str, str] | None = None,
    query_params: Mapping[str, Sequence[str]] | None = None,
) -> str:
    """Render the full request URL.

    Relative paths are appended to ``base_url``; a rendered path starting
    with ``http`` replaces it.
    """
    path = render_path(template, path_params)
    return resolve(base_url, path) + render_query(query_params)
