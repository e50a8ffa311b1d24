# File: tests/test_escrow.py
"""Tests for the escrow ledger."""

import pytest

from tests.factories import STUDENT
from tutorescrow.core.errors import FundsCapExceededError, ValidationError
from tutorescrow.core.escrow import EscrowLedger
from tutorescrow.models import TutoringSession


def make_session(escrow=0) -> TutoringSession:
    return TutoringSession(
        student_id=STUDENT,
        description="Chemistry",
        learning_objectives="Balance equations",
        materials=["periodic-table.png"],
        price=20,
        escrow=escrow,
    )


class TestEscrowLedger:
    """Test deposit and withdraw-all semantics."""

    def test_balance_defaults_to_zero(self):
        session = make_session()
        session.escrow = None
        assert EscrowLedger(session).balance() == 0

    def test_deposit_adds_to_balance(self):
        session = make_session(escrow=5)
        ledger = EscrowLedger(session)

        assert ledger.deposit(7) == 12
        assert session.escrow == 12

    def test_check_deposit_does_not_mutate(self):
        session = make_session(escrow=5)

        assert EscrowLedger(session).check_deposit(3) == 8
        assert session.escrow == 5

    @pytest.mark.parametrize("amount", [0, -5, True, 2.5, "10"])
    def test_invalid_amounts_rejected(self, amount):
        session = make_session(escrow=5)

        with pytest.raises(ValidationError):
            EscrowLedger(session).deposit(amount)

        assert session.escrow == 5

    def test_cap_is_inclusive(self):
        session = make_session(escrow=90)
        ledger = EscrowLedger(session, max_escrow=100)

        assert ledger.deposit(10) == 100

        with pytest.raises(FundsCapExceededError) as exc_info:
            ledger.deposit(1)

        assert exc_info.value.details == {"amount": 1, "balance": 100, "max_escrow": 100}
        assert session.escrow == 100

    def test_no_cap_by_default(self):
        session = make_session()
        EscrowLedger(session).deposit(10**12)
        assert session.escrow == 10**12

    def test_withdraw_all_zeroes_balance(self):
        """Test the second withdrawal before a new deposit yields nothing."""
        session = make_session(escrow=30)
        ledger = EscrowLedger(session)

        assert ledger.withdraw_all() == 30
        assert ledger.withdraw_all() == 0
        assert session.escrow == 0
