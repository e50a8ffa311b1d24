"""Domain models package."""

from tutorescrow.models.enums import PayoutReason, SessionAction, SessionState
from tutorescrow.models.payout import Payout
from tutorescrow.models.session_audit_log import SessionAuditLog
from tutorescrow.models.tutoring_session import TutoringSession
from tutorescrow.models.tutoring_session_schemas import (
    DeadlinesSet,
    DeadlinesUpdate,
    DescriptionUpdate,
    FeedbackCreate,
    FundsDeposit,
    MaterialsUpdate,
    ObjectivesUpdate,
    PayoutRead,
    PriceUpdate,
    RatingCreate,
    ResolveRequest,
    SessionAuditLogRead,
    TeacherRequest,
    TutoringSessionCreate,
    TutoringSessionRead,
)

__all__ = [
    "DeadlinesSet",
    "DeadlinesUpdate",
    "DescriptionUpdate",
    "FeedbackCreate",
    "FundsDeposit",
    "MaterialsUpdate",
    "ObjectivesUpdate",
    "Payout",
    "PayoutRead",
    "PayoutReason",
    "PriceUpdate",
    "RatingCreate",
    "ResolveRequest",
    "SessionAction",
    "SessionAuditLog",
    "SessionAuditLogRead",
    "SessionState",
    "TeacherRequest",
    "TutoringSession",
    "TutoringSessionCreate",
    "TutoringSessionRead",
]
