"""
Ledger Errors

Every failure raised by the ledger core is a caller-input error.
None of them are transient, so nothing here is ever retried.

DESIGN DECISION: Each error code gets its own exception class.
Hosts branch on ``error.code`` (stable, machine-readable) and never
on the message text, which is for humans only.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable machine-readable error codes."""
    ENTRY_INVALID_TYPE = "ENTRY_INVALID_TYPE"
    ENTRY_EMPTY = "ENTRY_EMPTY"
    ENTRY_INVALID_COLLECTION = "ENTRY_INVALID_COLLECTION"
    ENTRY_DUPLICATE = "ENTRY_DUPLICATE"
    ASSIGN_INVALID_COLLECTION = "ASSIGN_INVALID_COLLECTION"
    ASSIGN_INVALID_ENTRIES = "ASSIGN_INVALID_ENTRIES"
    ASSIGN_UNKNOWN_ENTRY = "ASSIGN_UNKNOWN_ENTRY"
    ASSIGN_INVALID_NUMBER = "ASSIGN_INVALID_NUMBER"
    SUMMARY_INVALID_COLLECTION = "SUMMARY_INVALID_COLLECTION"


class LedgerError(Exception):
    """Base exception for all ledger failures."""

    code: ErrorCode
    default_message = "Ledger operation failed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


# =============================================================================
# ENTRY ERRORS
# =============================================================================

class EntryError(LedgerError):
    """Failure while validating or creating an entry."""
    pass


class InvalidNameTypeError(EntryError):
    code = ErrorCode.ENTRY_INVALID_TYPE
    default_message = "Name must be a string."


class EmptyNameError(EntryError):
    code = ErrorCode.ENTRY_EMPTY
    default_message = "Name cannot be empty."


class InvalidEntriesCollectionError(EntryError):
    code = ErrorCode.ENTRY_INVALID_COLLECTION
    default_message = "Entries must be an array."


class DuplicateEntryError(EntryError):
    code = ErrorCode.ENTRY_DUPLICATE
    default_message = "This entry already exists."


# =============================================================================
# ASSIGNMENT ERRORS
# =============================================================================

class AssignmentError(LedgerError):
    """Failure while recording an assignment."""
    pass


class InvalidAssignmentsCollectionError(AssignmentError):
    code = ErrorCode.ASSIGN_INVALID_COLLECTION
    default_message = "Assignments must be an array."


class InvalidAssignmentEntriesError(AssignmentError):
    code = ErrorCode.ASSIGN_INVALID_ENTRIES
    default_message = "Entries must be an array."


class UnknownEntryError(AssignmentError):
    code = ErrorCode.ASSIGN_UNKNOWN_ENTRY
    default_message = "Entry was not found."


class InvalidAmountError(AssignmentError):
    code = ErrorCode.ASSIGN_INVALID_NUMBER
    default_message = "Amount must be a valid number."


# =============================================================================
# SUMMARY ERRORS
# =============================================================================

class SummaryError(LedgerError):
    """Failure while aggregating assignments."""
    pass


class InvalidSummaryCollectionError(SummaryError):
    code = ErrorCode.SUMMARY_INVALID_COLLECTION
    default_message = "Assignments must be an array."


_ERRORS_BY_CODE: dict[ErrorCode, type[LedgerError]] = {
    cls.code: cls
    for cls in (
        InvalidNameTypeError,
        EmptyNameError,
        InvalidEntriesCollectionError,
        DuplicateEntryError,
        InvalidAssignmentsCollectionError,
        InvalidAssignmentEntriesError,
        UnknownEntryError,
        InvalidAmountError,
        InvalidSummaryCollectionError,
    )
}


def create_error(code: ErrorCode | str, message: Optional[str] = None) -> LedgerError:
    """
    Build the exception matching an error code.

    Raises ValueError for codes that are not part of ErrorCode.
    """
    return _ERRORS_BY_CODE[ErrorCode(code)](message)


# Shown to non-technical users by host applications
_USER_MESSAGES = {
    ErrorCode.ENTRY_INVALID_TYPE: "Please type a name.",
    ErrorCode.ENTRY_EMPTY: "The name cannot be blank.",
    ErrorCode.ENTRY_INVALID_COLLECTION: "The saved entries could not be read.",
    ErrorCode.ENTRY_DUPLICATE: "Someone with this name is already in the ledger.",
    ErrorCode.ASSIGN_INVALID_COLLECTION: "The saved assignments could not be read.",
    ErrorCode.ASSIGN_INVALID_ENTRIES: "The saved entries could not be read.",
    ErrorCode.ASSIGN_UNKNOWN_ENTRY: "Add this name to the ledger before assigning an amount.",
    ErrorCode.ASSIGN_INVALID_NUMBER: "Please enter the amount as a number, e.g. 12.50.",
    ErrorCode.SUMMARY_INVALID_COLLECTION: "The saved assignments could not be read.",
}


def describe_error(error: LedgerError) -> str:
    """Get the user-facing message for a ledger error."""
    return _USER_MESSAGES.get(error.code, error.message)
