"""Role-based authorization guard for session operations."""

import enum
from typing import NoReturn

from tutorescrow.core.errors import UnauthorizedError
from tutorescrow.core.logging import get_logger
from tutorescrow.models.tutoring_session import TutoringSession

logger = get_logger(__name__)


class Role(str, enum.Enum):
    """Who may perform an operation on a session."""

    STUDENT_ONLY = "STUDENT_ONLY"
    TEACHER_ONLY = "TEACHER_ONLY"
    EITHER_PARTY = "EITHER_PARTY"


def is_student(session: TutoringSession, caller_id: str) -> bool:
    return caller_id == session.student_id


def is_teacher(session: TutoringSession, caller_id: str) -> bool:
    return session.teacher_id is not None and caller_id == session.teacher_id


def has_role(session: TutoringSession, caller_id: str, role: Role) -> bool:
    """Pure predicate: does caller hold role on session?"""
    if role == Role.STUDENT_ONLY:
        return is_student(session, caller_id)
    if role == Role.TEACHER_ONLY:
        return is_teacher(session, caller_id)
    return is_student(session, caller_id) or is_teacher(session, caller_id)


def deny(session: TutoringSession, caller_id: str, action: str, **details: str) -> NoReturn:
    """Log the denial and raise UnauthorizedError."""
    logger.warning(
        "auth.permission_denied",
        session_id=str(session.id),
        caller_id=caller_id,
        action=action,
        **details,
    )
    raise UnauthorizedError(
        f"Caller may not {action} this session",
        details={**details, "action": action},
    )


def authorize(session: TutoringSession, caller_id: str, role: Role, action: str) -> None:
    """Raise UnauthorizedError unless caller holds role on session."""
    if not has_role(session, caller_id, role):
        deny(session, caller_id, action, required_role=role.value)
