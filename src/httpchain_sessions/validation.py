"""Response validation against declarative expectations.

Validation never raises: every outcome is reported as data, together with a
fixed human-readable reason for the body check.
"""

import logging
import re
from collections.abc import Iterator
from typing import Any

from .constants import BodyReason
from .models import BodyValidation, Expectation, ResponseData, ValidationResult
from .paths import canonical_json, get_segment

logger = logging.getLogger(__name__)


def _is_object(value: Any) -> bool:
    return isinstance(value, dict | list)


def _entries(value: dict[str, Any] | list[Any]) -> Iterator[tuple[str, Any]]:
    if isinstance(value, list):
        for index, item in enumerate(value):
            yield str(index), item
    else:
        yield from value.items()


def validate_status(actual: int, expected: int | None) -> bool:
    return expected is None or actual == expected


def validate_content_type(actual: str, expected: str | None) -> bool:
    return not expected or expected in actual


def validate_regex(body: Any, pattern: str) -> BodyValidation:
    target = body if isinstance(body, str) else canonical_json(body)
    matched = re.search(pattern, target or "") is not None
    return BodyValidation(
        matched=matched,
        reason=BodyReason.REGEX_MATCH_SUCCEEDED if matched else BodyReason.REGEX_MATCH_FAILED,
    )


def validate_partial(body: dict[str, Any] | list[Any], expected: dict[str, Any] | list[Any]) -> BodyValidation:
    """Every expected key must hold the same serialized value in ``body``; extra keys are ignored."""
    matched = all(canonical_json(get_segment(body, key)) == canonical_json(value) for key, value in _entries(expected))
    return BodyValidation(
        matched=matched,
        reason=BodyReason.PARTIAL_MATCH_SUCCEEDED if matched else BodyReason.PARTIAL_MATCH_FAILED,
    )


def validate_string(body: Any, expected: str) -> BodyValidation:
    matched = canonical_json(body) == expected or body == expected
    return BodyValidation(
        matched=matched,
        reason=BodyReason.STRING_MATCH_SUCCEEDED if matched else BodyReason.STRING_MATCH_FAILED,
    )


def validate_body(body: Any, expect: Expectation | None) -> BodyValidation:
    if expect is not None and expect.body_regex:
        return validate_regex(body, expect.body_regex)

    if expect is None or not expect.has_body:
        return BodyValidation(matched=True, reason=BodyReason.NO_EXPECTATION)

    expected = expect.body
    if _is_object(body) and _is_object(expected):
        return validate_partial(body, expected)
    if isinstance(expected, str):
        return validate_string(body, expected)
    return BodyValidation(matched=False, reason=BodyReason.TYPE_MISMATCH)


def validate_response(response: ResponseData, expect: Expectation | None) -> tuple[ValidationResult, BodyValidation]:
    validation = ValidationResult(
        status=validate_status(response.status, expect.status if expect else None),
        content_type=validate_content_type(response.content_type, expect.content_type if expect else None),
    )
    body_validation = validate_body(response.body, expect)

    if not is_passed(validation, body_validation):
        logger.info(
            f"Validation failed: status={validation.status}, content_type={validation.content_type}, "
            f"body={body_validation.matched} ({body_validation.reason})"
        )
    return validation, body_validation


def is_passed(validation: ValidationResult, body_validation: BodyValidation) -> bool:
    return validation.status and validation.content_type and body_validation.matched
