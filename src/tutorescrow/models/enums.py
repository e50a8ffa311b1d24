"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class SessionState(str, enum.Enum):
    """Session lifecycle states."""

    OPEN = "OPEN"
    ASSIGNED = "ASSIGNED"
    SCHEDULED = "SCHEDULED"
    DISPUTED = "DISPUTED"


class SessionAction(str, enum.Enum):
    """Operations recorded in the audit trail."""

    BOOK = "BOOK"
    REQUEST = "REQUEST"
    SUBMIT = "SUBMIT"
    DISPUTE = "DISPUTE"
    RESOLVE = "RESOLVE"
    RELEASE = "RELEASE"
    ADD_FUNDS = "ADD_FUNDS"
    REFUND = "REFUND"
    CANCEL = "CANCEL"
    UPDATE_CONTENT = "UPDATE_CONTENT"
    UPDATE_PRICE = "UPDATE_PRICE"
    FEEDBACK = "FEEDBACK"
    RATING = "RATING"
    DEADLINES = "DEADLINES"


class PayoutReason(str, enum.Enum):
    """Why escrowed funds left a session."""

    RELEASE = "RELEASE"
    REFUND = "REFUND"
    CANCEL_REFUND = "CANCEL_REFUND"
    DISPUTE_TO_TEACHER = "DISPUTE_TO_TEACHER"
    DISPUTE_TO_STUDENT = "DISPUTE_TO_STUDENT"
