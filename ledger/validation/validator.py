"""
Input Validation

Names, amounts and collections are checked here before any record is built.

IMPORTANT: Validation NEVER silently fixes issues.
Bad input raises a LedgerError with a stable code; nothing is guessed
or replaced with a default value.
"""

import math
from collections.abc import Mapping, Sequence
from decimal import Decimal
from numbers import Real
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ledger.errors import ErrorCode, LedgerError, create_error

ModelT = TypeVar("ModelT", bound=BaseModel)


def normalize_name(raw: Any) -> str:
    """
    Build the comparison key for a name (trimmed and lowercased).

    Used for new names and lookup queries alike, so "  Bob" and "bob"
    always resolve to the same entry.
    """
    if not isinstance(raw, str):
        raise create_error(ErrorCode.ENTRY_INVALID_TYPE)
    return raw.strip().lower()


def sanitize_name(raw: Any) -> str:
    """Trim a display name, keeping its original case."""
    if not isinstance(raw, str):
        raise create_error(ErrorCode.ENTRY_INVALID_TYPE)
    trimmed = raw.strip()
    if not trimmed:
        raise create_error(ErrorCode.ENTRY_EMPTY)
    return trimmed


def validate_amount(value: Any) -> float:
    """
    Coerce an amount to a finite float.

    Accepts real numbers and numeric strings ("15.5", " 7 ").
    Booleans are not amounts even though bool subclasses int.
    """
    if isinstance(value, bool):
        raise create_error(ErrorCode.ASSIGN_INVALID_NUMBER)

    if isinstance(value, (Real, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        # float() also reads "1_000"; amounts typed by users never use underscores
        if "_" in value:
            raise create_error(ErrorCode.ASSIGN_INVALID_NUMBER)
        try:
            number = float(value.strip())
        except ValueError:
            raise create_error(ErrorCode.ASSIGN_INVALID_NUMBER) from None
    else:
        raise create_error(ErrorCode.ASSIGN_INVALID_NUMBER)

    if not math.isfinite(number):
        raise create_error(ErrorCode.ASSIGN_INVALID_NUMBER)
    return number


def coerce_amount(value: Any) -> float:
    """Lenient amount for aggregation: anything validate_amount rejects counts as 0."""
    try:
        return validate_amount(value)
    except LedgerError:
        return 0.0


def is_proper_sequence(value: Any) -> bool:
    """Lists and tuples count; strings and bytes do not."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def ensure_collection(
    value: Any,
    model: type[ModelT],
    code: ErrorCode,
) -> list[ModelT]:
    """
    Check a collection argument and return its items as models.

    Items that are already ``model`` instances are kept as-is (same objects).
    Mappings are validated into ``model``.

    Raises:
        LedgerError with ``code`` if value is not a proper sequence
        or one of its records is malformed
    """
    if not is_proper_sequence(value):
        raise create_error(code)

    items = []
    for item in value:
        if isinstance(item, model):
            items.append(item)
        elif isinstance(item, Mapping):
            try:
                items.append(model.model_validate(item))
            except ValidationError as e:
                raise create_error(code, str(e)) from e
        else:
            raise create_error(code)
    return items
