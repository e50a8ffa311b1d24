# File: src/tutorescrow/core/lifecycle.py
"""Session lifecycle: transition table and every operation on a booking.

Each operation runs its checks in a fixed order (role, state, input) and only
then mutates the session, so a rejected call leaves the record untouched.
Operations that move money return a Settlement; executing the transfer is the
caller's job (see ``tutorescrow.core.transfers``).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from tutorescrow.core.authorization import Role, authorize, deny, is_student
from tutorescrow.core.errors import (
    AlreadyResolvedError,
    DeadlinePassedError,
    InvalidBookingError,
    InvalidSessionError,
    InvalidStateError,
    InvalidTeacherError,
    InvalidWithdrawalError,
    NotBookedError,
    ValidationError,
)
from tutorescrow.core.escrow import EscrowLedger
from tutorescrow.core.validators import (
    validate_amount,
    validate_caller_id,
    validate_materials,
    validate_rating,
    validate_text,
)
from tutorescrow.models.enums import PayoutReason, SessionAction, SessionState
from tutorescrow.models.tutoring_session import TutoringSession
from tutorescrow.utils.datetime import now_utc, to_naive_utc

# Valid state transitions. OPEN -> OPEN is the reset of an unassigned session.
_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.OPEN: frozenset({SessionState.ASSIGNED, SessionState.OPEN}),
    SessionState.ASSIGNED: frozenset(
        {SessionState.SCHEDULED, SessionState.DISPUTED, SessionState.OPEN}
    ),
    SessionState.SCHEDULED: frozenset({SessionState.DISPUTED, SessionState.OPEN}),
    SessionState.DISPUTED: frozenset({SessionState.OPEN}),
}

# Fields captured for the audit trail
_TRACKED_FIELDS = (
    "teacher_id",
    "state",
    "description",
    "learning_objectives",
    "materials",
    "price",
    "escrow",
    "progress",
    "feedback",
    "rating",
    "session_deadline",
    "assignment_deadline",
)


@dataclass
class Settlement:
    """Withdrawn escrow waiting to be transferred."""

    recipient_id: str
    amount: int
    reason: PayoutReason


@dataclass
class Outcome:
    """What a successful operation changed."""

    action: SessionAction
    old_values: dict[str, Any] = field(default_factory=dict)
    new_values: dict[str, Any] = field(default_factory=dict)
    settlement: Settlement | None = None


def can_transition(source: SessionState, target: SessionState) -> bool:
    return target in _TRANSITIONS[source]


def _require_transition(
    session: TutoringSession,
    target: SessionState,
    error_cls: type[InvalidStateError] = InvalidSessionError,
) -> None:
    source = session.session_state
    if not can_transition(source, target):
        raise error_cls(
            f"Cannot move session from {source.value} to {target.value}",
            details={"state": source.value, "target": target.value},
        )


def _validated(validator: Callable[..., Any], *args: Any) -> Any:
    """Run a ValueError-raising validator, re-raising as ValidationError."""
    try:
        return validator(*args)
    except ValueError as exc:
        raise ValidationError(str(exc)) from None


def _now(now: datetime | None) -> datetime:
    return to_naive_utc(now) if now is not None else now_utc()


def _check_deadline(session: TutoringSession, now: datetime) -> None:
    deadline = session.session_deadline
    if deadline is not None and now >= deadline:
        raise DeadlinePassedError(
            "Session deadline has passed",
            details={"session_deadline": deadline.isoformat(), "now": now.isoformat()},
        )


def _snapshot(session: TutoringSession) -> dict[str, Any]:
    values = {}
    for name in _TRACKED_FIELDS:
        value = getattr(session, name)
        values[name] = list(value) if isinstance(value, list) else value
    return values


def _finish(
    session: TutoringSession,
    before: dict[str, Any],
    action: SessionAction,
    caller_id: str,
    now: datetime,
    settlement: Settlement | None = None,
) -> Outcome:
    """Stamp audit columns and diff the tracked fields."""
    session.last_modified_at = now
    session.last_modified_by = caller_id

    after = _snapshot(session)
    changed = [name for name in _TRACKED_FIELDS if before[name] != after[name]]
    return Outcome(
        action=action,
        old_values={name: before[name] for name in changed},
        new_values={name: after[name] for name in changed},
        settlement=settlement,
    )


def _reset(session: TutoringSession) -> None:
    """Return to the pre-assignment shape. Escrow is handled by the caller."""
    session.teacher_id = None
    session.state = SessionState.OPEN.value
    session.progress = 0
    session.feedback = None
    session.rating = None


def _settle(
    session: TutoringSession,
    recipient_id: str,
    reason: PayoutReason,
) -> Settlement | None:
    amount = EscrowLedger(session).withdraw_all()
    if amount == 0:
        return None
    return Settlement(recipient_id=recipient_id, amount=amount, reason=reason)


# BOOKING


def book(
    student_id: str,
    description: str,
    learning_objectives: str,
    materials: list[str],
    price: int,
    now: datetime | None = None,
) -> TutoringSession:
    """Create a new OPEN session owned by student_id with an empty escrow."""
    student_id = _validated(validate_caller_id, student_id)
    description = _validated(validate_text, description, "Description")
    learning_objectives = _validated(validate_text, learning_objectives, "Learning objectives")
    materials = _validated(validate_materials, materials)
    price = _validated(validate_amount, price, "Price")

    now = _now(now)
    return TutoringSession(
        student_id=student_id,
        teacher_id=None,
        state=SessionState.OPEN.value,
        description=description,
        learning_objectives=learning_objectives,
        materials=materials,
        price=price,
        escrow=0,
        progress=0,
        feedback=None,
        rating=None,
        session_deadline=None,
        assignment_deadline=None,
        created_at=now,
        last_modified_at=now,
        last_modified_by=student_id,
    )


def request(
    session: TutoringSession,
    caller_id: str,
    teacher_id: str | None = None,
    now: datetime | None = None,
) -> Outcome:
    """OPEN -> ASSIGNED. The caller accepts the booking as its teacher."""
    now = _now(now)
    teacher_id = teacher_id or caller_id

    if session.teacher_id is not None:
        raise InvalidBookingError(
            "Session already has a teacher",
            details={"state": session.state},
        )
    _require_transition(session, SessionState.ASSIGNED, InvalidBookingError)

    if is_student(session, caller_id) or teacher_id == session.student_id:
        raise InvalidTeacherError("A student cannot teach their own session")

    if teacher_id != caller_id:
        deny(session, caller_id, "nominate another teacher for", teacher_id=teacher_id)

    before = _snapshot(session)
    session.teacher_id = teacher_id
    session.state = SessionState.ASSIGNED.value
    return _finish(session, before, SessionAction.REQUEST, caller_id, now)


def submit(session: TutoringSession, caller_id: str, now: datetime | None = None) -> Outcome:
    """ASSIGNED -> SCHEDULED. The teacher commits to deliver before the deadline."""
    now = _now(now)
    authorize(session, caller_id, Role.TEACHER_ONLY, "submit")

    if session.session_state != SessionState.ASSIGNED:
        raise InvalidSessionError(
            "Only an assigned session can be submitted",
            details={"state": session.state},
        )
    _require_transition(session, SessionState.SCHEDULED)
    _check_deadline(session, now)

    before = _snapshot(session)
    session.state = SessionState.SCHEDULED.value
    return _finish(session, before, SessionAction.SUBMIT, caller_id, now)


# markComplete is the same transition under its other name
mark_complete = submit


def dispute(session: TutoringSession, caller_id: str, now: datetime | None = None) -> Outcome:
    """ASSIGNED/SCHEDULED -> DISPUTED."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "dispute")

    if session.teacher_id is None:
        raise InvalidBookingError("Cannot dispute a session without a teacher")
    _require_transition(session, SessionState.DISPUTED)

    before = _snapshot(session)
    session.state = SessionState.DISPUTED.value
    return _finish(session, before, SessionAction.DISPUTE, caller_id, now)


def resolve(
    session: TutoringSession,
    caller_id: str,
    to_teacher: bool,
    now: datetime | None = None,
) -> Outcome:
    """DISPUTED -> OPEN, paying the whole escrow to the teacher or back to the student."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "resolve")

    if not session.disputed:
        raise AlreadyResolvedError(
            "Session has no open dispute",
            details={"state": session.state},
        )
    if session.teacher_id is None:
        raise InvalidBookingError("Disputed session has no teacher")
    _require_transition(session, SessionState.OPEN)

    before = _snapshot(session)
    if to_teacher:
        settlement = _settle(session, session.teacher_id, PayoutReason.DISPUTE_TO_TEACHER)
    else:
        settlement = _settle(session, session.student_id, PayoutReason.DISPUTE_TO_STUDENT)
    _reset(session)
    return _finish(session, before, SessionAction.RESOLVE, caller_id, now, settlement)


def release_payment(
    session: TutoringSession,
    caller_id: str,
    now: datetime | None = None,
) -> Outcome:
    """SCHEDULED -> OPEN, paying the whole escrow to the teacher."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "release payment for")

    if not session.scheduled:
        raise InvalidSessionError(
            "Payment can only be released for a scheduled session",
            details={"state": session.state},
        )
    if session.teacher_id is None:
        raise InvalidBookingError("Scheduled session has no teacher")
    _require_transition(session, SessionState.OPEN)

    before = _snapshot(session)
    settlement = _settle(session, session.teacher_id, PayoutReason.RELEASE)
    _reset(session)
    return _finish(session, before, SessionAction.RELEASE, caller_id, now, settlement)


def add_funds(
    session: TutoringSession,
    caller_id: str,
    amount: int,
    max_escrow: int | None = None,
    now: datetime | None = None,
) -> Outcome:
    """Deposit into escrow. Allowed in every state."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "add funds to")

    ledger = EscrowLedger(session, max_escrow=max_escrow)
    ledger.check_deposit(amount)

    before = _snapshot(session)
    ledger.deposit(amount)
    return _finish(session, before, SessionAction.ADD_FUNDS, caller_id, now)


def request_refund(
    session: TutoringSession,
    caller_id: str,
    now: datetime | None = None,
) -> Outcome:
    """Return the whole escrow to the student and reset, before the teacher commits."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "request a refund for")

    if session.session_state in (SessionState.SCHEDULED, SessionState.DISPUTED):
        raise InvalidWithdrawalError(
            "Refund is not available once the session is scheduled or disputed",
            details={"state": session.state},
        )
    _require_transition(session, SessionState.OPEN)
    _check_deadline(session, now)

    before = _snapshot(session)
    settlement = _settle(session, session.student_id, PayoutReason.REFUND)
    _reset(session)
    return _finish(session, before, SessionAction.REFUND, caller_id, now, settlement)


def cancel(session: TutoringSession, caller_id: str, now: datetime | None = None) -> Outcome:
    """Reset the session. Refunds the student only while a teacher is assigned but not committed."""
    now = _now(now)
    authorize(session, caller_id, Role.EITHER_PARTY, "cancel")

    before = _snapshot(session)
    settlement = None
    if session.session_state == SessionState.ASSIGNED:
        settlement = _settle(session, session.student_id, PayoutReason.CANCEL_REFUND)
    _reset(session)
    return _finish(session, before, SessionAction.CANCEL, caller_id, now, settlement)


# CONTENT


def update_description(
    session: TutoringSession,
    caller_id: str,
    description: str,
    now: datetime | None = None,
) -> Outcome:
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "update")
    description = _validated(validate_text, description, "Description")

    before = _snapshot(session)
    session.description = description
    return _finish(session, before, SessionAction.UPDATE_CONTENT, caller_id, now)


def update_learning_objectives(
    session: TutoringSession,
    caller_id: str,
    learning_objectives: str,
    now: datetime | None = None,
) -> Outcome:
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "update")
    learning_objectives = _validated(validate_text, learning_objectives, "Learning objectives")

    before = _snapshot(session)
    session.learning_objectives = learning_objectives
    return _finish(session, before, SessionAction.UPDATE_CONTENT, caller_id, now)


def update_materials(
    session: TutoringSession,
    caller_id: str,
    materials: list[str],
    now: datetime | None = None,
) -> Outcome:
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "update")
    materials = _validated(validate_materials, materials)

    before = _snapshot(session)
    session.materials = materials
    return _finish(session, before, SessionAction.UPDATE_CONTENT, caller_id, now)


def update_price(
    session: TutoringSession,
    caller_id: str,
    price: int,
    now: datetime | None = None,
) -> Outcome:
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "update")
    price = _validated(validate_amount, price, "Price")

    before = _snapshot(session)
    session.price = price
    return _finish(session, before, SessionAction.UPDATE_PRICE, caller_id, now)


def provide_feedback(
    session: TutoringSession,
    caller_id: str,
    feedback: str,
    now: datetime | None = None,
) -> Outcome:
    """Set feedback while SCHEDULED. Re-settable until the next reset."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "give feedback on")

    if not session.scheduled:
        raise NotBookedError(
            "Feedback can only be given on a scheduled session",
            details={"state": session.state},
        )
    feedback = _validated(validate_text, feedback, "Feedback")

    before = _snapshot(session)
    session.feedback = feedback
    return _finish(session, before, SessionAction.FEEDBACK, caller_id, now)


def provide_rating(
    session: TutoringSession,
    caller_id: str,
    rating: int,
    now: datetime | None = None,
) -> Outcome:
    """Set a 1-5 rating while SCHEDULED."""
    now = _now(now)
    authorize(session, caller_id, Role.STUDENT_ONLY, "rate")

    if not session.scheduled:
        raise NotBookedError(
            "A rating can only be given on a scheduled session",
            details={"state": session.state},
        )
    rating = _validated(validate_rating, rating)

    before = _snapshot(session)
    session.rating = rating
    return _finish(session, before, SessionAction.RATING, caller_id, now)


# DEADLINES


def set_deadlines(
    session: TutoringSession,
    caller_id: str,
    session_deadline: datetime | None,
    assignment_deadline: datetime | None,
    now: datetime | None = None,
) -> Outcome:
    """Overwrite both deadlines; None clears a deadline."""
    now = _now(now)
    authorize(session, caller_id, Role.EITHER_PARTY, "set deadlines for")

    before = _snapshot(session)
    session.session_deadline = to_naive_utc(session_deadline)
    session.assignment_deadline = to_naive_utc(assignment_deadline)
    return _finish(session, before, SessionAction.DEADLINES, caller_id, now)


def update_deadlines(
    session: TutoringSession,
    caller_id: str,
    session_deadline: datetime | None = None,
    assignment_deadline: datetime | None = None,
    now: datetime | None = None,
) -> Outcome:
    """Overwrite only the deadlines that are supplied."""
    now = _now(now)
    authorize(session, caller_id, Role.EITHER_PARTY, "update deadlines for")

    before = _snapshot(session)
    if session_deadline is not None:
        session.session_deadline = to_naive_utc(session_deadline)
    if assignment_deadline is not None:
        session.assignment_deadline = to_naive_utc(assignment_deadline)
    return _finish(session, before, SessionAction.DEADLINES, caller_id, now)
