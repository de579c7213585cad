"""
Field Validators and Diff Suppressors

Validators take (value, key) and return a list of error messages.
Diff suppressors take (key, old, new, data) and return True when the
difference between old and new must be ignored.
"""

import json
import re
from typing import Any, List

from cpln_provider.constants import (
    NAME_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TAG_KEY_MAX_LENGTH,
    TAG_VALUE_MAX_LENGTH,
    SECRET_ENCODINGS,
)

NAME_PATTERN = re.compile(r"^[a-z][-a-z0-9]([-a-z0-9])*[a-z0-9]$")
AWS_ACCESS_KEY_PATTERN = re.compile(r"^AKIA[A-Z0-9]{16}$")
AWS_ROLE_ARN_PATTERN = re.compile(r"^arn:(aws|aws-us-gov|aws-cn):iam::[0-9]{12}:role/.+$")


def name_validator(value: Any, key: str) -> List[str]:
    if not isinstance(value, str):
        return [f"{key!r} must be a string"]

    errors = []
    if not NAME_PATTERN.match(value):
        errors.append(
            f"{key!r} is invalid, got: '{value}'. Use lowercase letters, digits "
            "and dashes, starting with a letter"
        )
    if len(value) > NAME_MAX_LENGTH:
        errors.append(
            f"{key!r} must be at most {NAME_MAX_LENGTH} characters, got: {len(value)}"
        )
    return errors


def description_validator(value: Any, key: str) -> List[str]:
    if not isinstance(value, str):
        return [f"{key!r} must be a string"]
    if len(value) > DESCRIPTION_MAX_LENGTH:
        return [
            f"{key!r} must be at most {DESCRIPTION_MAX_LENGTH} characters, got: {len(value)}"
        ]
    return []


def tag_validator(value: Any, key: str) -> List[str]:
    if not isinstance(value, dict):
        return [f"{key!r} must be a map"]

    errors = []
    for tag_key, tag_value in value.items():
        if not tag_key or len(tag_key) > TAG_KEY_MAX_LENGTH:
            errors.append(
                f"{key!r} key '{tag_key}' must be 1 to {TAG_KEY_MAX_LENGTH} characters"
            )
        if tag_value is not None and len(str(tag_value)) > TAG_VALUE_MAX_LENGTH:
            errors.append(
                f"{key!r} value for '{tag_key}' must be at most {TAG_VALUE_MAX_LENGTH} characters"
            )
    return errors


def encoding_validator(value: Any, key: str) -> List[str]:
    if value not in SECRET_ENCODINGS:
        return [f"{key!r} must be one of {', '.join(SECRET_ENCODINGS)}, got: '{value}'"]
    return []


def aws_access_key_validator(value: Any, key: str) -> List[str]:
    if not isinstance(value, str) or not AWS_ACCESS_KEY_PATTERN.match(value):
        return [f"{key!r} is not a valid AWS access key, got: '{value}'"]
    return []


def aws_role_arn_validator(value: Any, key: str) -> List[str]:
    # Empty means "no role"
    if value in (None, ""):
        return []
    if not isinstance(value, str) or not AWS_ROLE_ARN_PATTERN.match(value):
        return [f"{key!r} is not a valid AWS role ARN, got: '{value}'"]
    return []


def empty_validator(value: Any, key: str) -> List[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return [f"{key!r} must not be empty"]
    return []


def _normalize_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


def diff_suppress_json(key: str, old: Any, new: Any, data: Any) -> bool:
    """Treat two JSON documents as equal when they parse to the same value."""
    if old and new:
        return _normalize_json(old) == _normalize_json(new)
    return old == new


def diff_suppress_description(key: str, old: Any, new: Any, data: Any) -> bool:
    """An empty description is stored remotely as the resource name."""
    if old == new:
        return True
    return not new and old == data.get("name")
