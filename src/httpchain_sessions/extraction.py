import logging
from collections.abc import Mapping
from typing import Any

from .paths import resolve_path

logger = logging.getLogger(__name__)


def extract_fields(value: Any, extract: Mapping[str, str] | None) -> dict[str, Any]:
    """Pull named values out of ``value`` by dot-path.

    Paths that cannot be resolved produce ``MISSING`` for their variable
    instead of raising.
    """
    result: dict[str, Any] = {}
    for var_name, path in (extract or {}).items():
        result[var_name] = resolve_path(value, path)
        logger.info(f"Extracted {var_name} = {result[var_name]!r} (path '{path}')")
    return result
