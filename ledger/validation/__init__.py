"""Validation package."""

from ledger.validation.validator import (
    coerce_amount,
    ensure_collection,
    is_proper_sequence,
    normalize_name,
    sanitize_name,
    validate_amount,
)

__all__ = [
    "coerce_amount",
    "ensure_collection",
    "is_proper_sequence",
    "normalize_name",
    "sanitize_name",
    "validate_amount",
]
