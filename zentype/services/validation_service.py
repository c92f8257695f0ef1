"""
Submission validator - checks a raw test-result payload before any I/O.

Every rule is evaluated so the caller gets all violations in one response,
not one at a time.
"""

import math
from typing import Any

from zentype.core.exceptions import ValidationError
from zentype.models.test_result import TestResultSubmission


# Integers are stored as BSON int64; anything wider cannot be written
BSON_INT64_MIN = -(2 ** 63)
BSON_INT64_MAX = 2 ** 63 - 1


def _is_number(value: Any) -> bool:
    # bool is an int subclass, but `true` is not a valid WPM
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return BSON_INT64_MIN <= value <= BSON_INT64_MAX
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


# (payload key, check, message), in the order violations are reported
NUMERIC_RULES = (
    ("wpm", lambda v: 0 <= v <= 400, "WPM must be a valid number between 0 and 400"),
    ("accuracy", lambda v: 0 <= v <= 100, "Accuracy must be a valid number between 0 and 100"),
    ("errors", lambda v: v >= 0, "Errors must be a valid non-negative number"),
    ("timeTaken", lambda v: v > 0, "Time taken must be a valid positive number"),
    ("textLength", lambda v: v > 0, "Text length must be a valid positive number"),
)

STRING_RULES = (
    ("userInput", "User input is required and must be a string"),
    ("testType", "Test type is required and must be a string"),
    ("difficulty", "Difficulty is required and must be a string"),
    ("testId", "Test ID is required and must be a string"),
)


def collect_violations(payload: Any) -> list[str]:
    """Return one message per broken field rule (empty list when valid)."""
    if not isinstance(payload, dict):
        payload = {}

    violations = []

    for key, in_range, message in NUMERIC_RULES:
        value = payload.get(key)
        if not _is_number(value) or not in_range(value):
            violations.append(message)

    for key, message in STRING_RULES:
        if not _is_non_empty_string(payload.get(key)):
            violations.append(message)

    return violations


def validate_submission(payload: Any) -> TestResultSubmission:
    """
    Validate a raw payload and build the typed submission.

    Raises ValidationError carrying the full list of violations.
    """
    violations = collect_violations(payload)
    if violations:
        raise ValidationError(violations)

    return TestResultSubmission(
        wpm=payload["wpm"],
        accuracy=payload["accuracy"],
        errors=payload["errors"],
        timeTaken=payload["timeTaken"],
        textLength=payload["textLength"],
        userInput=payload["userInput"],
        testType=payload["testType"],
        difficulty=payload["difficulty"],
        testId=payload["testId"],
    )
