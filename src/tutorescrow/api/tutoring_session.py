"""TutoringSession endpoints: booking, lifecycle transitions, escrow movements."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorescrow.api.auth import get_current_caller
from tutorescrow.api.tutoring_session_helpers import (
    commit_outcome,
    get_clock,
    get_escrow_settings,
    get_session,
    get_session_for_update,
    get_transfer_gateway,
)
from tutorescrow.core import lifecycle
from tutorescrow.core.authorization import Role, authorize
from tutorescrow.core.config import EscrowSettings
from tutorescrow.core.db import get_db
from tutorescrow.core.lifecycle import Outcome
from tutorescrow.core.transfers import TransferGateway
from tutorescrow.models import (
    DeadlinesSet,
    DeadlinesUpdate,
    DescriptionUpdate,
    FeedbackCreate,
    FundsDeposit,
    MaterialsUpdate,
    ObjectivesUpdate,
    PriceUpdate,
    RatingCreate,
    ResolveRequest,
    TeacherRequest,
    TutoringSession,
    TutoringSessionCreate,
    TutoringSessionRead,
)
from tutorescrow.models.enums import SessionAction, SessionState
from tutorescrow.utils.datetime import Clock

router = APIRouter(prefix="/tutoring-sessions", tags=["tutoring-sessions"])


@router.post("", response_model=TutoringSessionRead, status_code=status.HTTP_201_CREATED)
async def book_session(
    booking: TutoringSessionCreate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Book a new session. The caller becomes its student."""
    session = lifecycle.book(
        caller_id,
        booking.description,
        booking.learning_objectives,
        booking.materials,
        booking.price,
        now=clock(),
    )

    db.add(session)
    await db.flush()

    outcome = Outcome(
        action=SessionAction.BOOK,
        new_values={
            "state": session.state,
            "description": session.description,
            "learning_objectives": session.learning_objectives,
            "materials": list(session.materials),
            "price": session.price,
        },
    )
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.get("", response_model=list[TutoringSessionRead])
async def list_sessions(
    role: str | None = None,
    state: str | None = None,
    skip: int = 0,
    limit: int = 50,
    caller_id: str = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's sessions.

    role: "student" or "teacher" to narrow to one side (default: both)
    state: OPEN / ASSIGNED / SCHEDULED / DISPUTED
    """
    if skip < 0:
        skip = 0
    if limit <= 0:
        limit = 50
    if limit > 1000:  # Prevent excessive queries
        limit = 1000

    stmt = select(TutoringSession)

    if role == "student":
        stmt = stmt.where(TutoringSession.student_id == caller_id)
    elif role == "teacher":
        stmt = stmt.where(TutoringSession.teacher_id == caller_id)
    elif role is None:
        stmt = stmt.where(
            or_(
                TutoringSession.student_id == caller_id,
                TutoringSession.teacher_id == caller_id,
            )
        )
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="role must be 'student' or 'teacher'",
        )

    if state:
        try:
            state_value = SessionState(state.upper()).value
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown state: {state}",
            ) from None
        stmt = stmt.where(TutoringSession.state == state_value)

    stmt = stmt.order_by(TutoringSession.created_at.desc()).offset(skip).limit(limit)

    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/{session_id}", response_model=TutoringSessionRead)
async def get_session_detail(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Get session details.

    Open sessions are visible to any caller so prospective teachers can find
    them; once a teacher is assigned only the two parties may read it.
    """
    session = await get_session(db, session_id)
    if session.session_state != SessionState.OPEN:
        authorize(session, caller_id, Role.EITHER_PARTY, "view")
    return session


# LIFECYCLE


@router.post("/{session_id}/request", response_model=TutoringSessionRead)
async def request_session(
    session_id: str,
    body: TeacherRequest | None = None,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Accept an open session as its teacher."""
    session = await get_session_for_update(db, session_id)
    teacher_id = body.teacher_id if body else None
    outcome = lifecycle.request(session, caller_id, teacher_id, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/submit", response_model=TutoringSessionRead)
@router.post("/{session_id}/complete", response_model=TutoringSessionRead)
async def submit_session(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Teacher commits to deliver (ASSIGNED -> SCHEDULED)."""
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.submit(session, caller_id, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/dispute", response_model=TutoringSessionRead)
async def dispute_session(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.dispute(session, caller_id, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/resolve", response_model=TutoringSessionRead)
async def resolve_dispute(
    session_id: str,
    body: ResolveRequest,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Close a dispute, paying the escrow to the teacher or back to the student."""
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.resolve(session, caller_id, body.to_teacher, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/release", response_model=TutoringSessionRead)
async def release_payment(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Pay the teacher for a scheduled session."""
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.release_payment(session, caller_id, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/cancel", response_model=TutoringSessionRead)
async def cancel_session(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.cancel(session, caller_id, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


# ESCROW


@router.post("/{session_id}/funds", response_model=TutoringSessionRead)
async def add_funds(
    session_id: str,
    deposit: FundsDeposit,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    settings: EscrowSettings = Depends(get_escrow_settings),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.add_funds(
        session,
        caller_id,
        deposit.amount,
        max_escrow=settings.max_escrow,
        now=clock(),
    )
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/refund", response_model=TutoringSessionRead)
async def request_refund(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.request_refund(session, caller_id, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


# CONTENT


@router.patch("/{session_id}/description", response_model=TutoringSessionRead)
async def update_description(
    session_id: str,
    update: DescriptionUpdate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.update_description(session, caller_id, update.description, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.patch("/{session_id}/objectives", response_model=TutoringSessionRead)
async def update_learning_objectives(
    session_id: str,
    update: ObjectivesUpdate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.update_learning_objectives(
        session, caller_id, update.learning_objectives, now=clock()
    )
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.patch("/{session_id}/materials", response_model=TutoringSessionRead)
async def update_materials(
    session_id: str,
    update: MaterialsUpdate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.update_materials(session, caller_id, update.materials, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.patch("/{session_id}/price", response_model=TutoringSessionRead)
async def update_price(
    session_id: str,
    update: PriceUpdate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.update_price(session, caller_id, update.price, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/feedback", response_model=TutoringSessionRead)
async def provide_feedback(
    session_id: str,
    body: FeedbackCreate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.provide_feedback(session, caller_id, body.feedback, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.post("/{session_id}/rating", response_model=TutoringSessionRead)
async def provide_rating(
    session_id: str,
    body: RatingCreate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.provide_rating(session, caller_id, body.rating, now=clock())
    return await commit_outcome(db, session, caller_id, outcome, gateway)


# DEADLINES


@router.put("/{session_id}/deadlines", response_model=TutoringSessionRead)
async def set_deadlines(
    session_id: str,
    body: DeadlinesSet,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Replace both deadlines."""
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.set_deadlines(
        session,
        caller_id,
        body.session_deadline,
        body.assignment_deadline,
        now=clock(),
    )
    return await commit_outcome(db, session, caller_id, outcome, gateway)


@router.patch("/{session_id}/deadlines", response_model=TutoringSessionRead)
async def update_deadlines(
    session_id: str,
    body: DeadlinesUpdate,
    caller_id: str = Depends(get_current_caller),
    clock: Clock = Depends(get_clock),
    gateway: TransferGateway = Depends(get_transfer_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Change only the supplied deadlines."""
    session = await get_session_for_update(db, session_id)
    outcome = lifecycle.update_deadlines(
        session,
        caller_id,
        session_deadline=body.session_deadline,
        assignment_deadline=body.assignment_deadline,
        now=clock(),
    )
    return await commit_outcome(db, session, caller_id, outcome, gateway)
