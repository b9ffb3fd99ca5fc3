"""Placeholder substitution for request templates."""

import re
from collections.abc import Mapping
from typing import Any

from .paths import render_value, resolve_path

TEMPLATE_PATTERN = r"(?P<open>\{\{)\s*(?P<path>[\w.]+)\s*(?P<close>\}\})"
TEMPLATE_REGEX = re.compile(TEMPLATE_PATTERN)


def contains_template(value: str) -> bool:
    return TEMPLATE_REGEX.search(value) is not None


def render_template(text: str, scope: Mapping[str, Any]) -> str:
    """Replace every ``{{ dotted.path }}`` in ``text`` with its value from ``scope``.

    Substitution is a single pass: placeholders appearing inside substituted
    values are kept verbatim. Unresolvable paths render as an empty string.
    """
    if not contains_template(text):
        return text

    def _repl(match: re.Match[str]) -> str:
        return render_value(resolve_path(scope, match.group("path")))

    return TEMPLATE_REGEX.sub(_repl, text)


def render_headers(headers: Mapping[str, str] | None, scope: Mapping[str, Any]) -> dict[str, str] | None:
    if headers is None:
        return None
    return {name: render_template(value, scope) for name, value in headers.items()}


def render_data(data: Any, scope: Mapping[str, Any]) -> Any:
    """Render string payloads; structured payloads are sent untouched."""
    if isinstance(data, str):
        return render_template(data, scope)
    return data
