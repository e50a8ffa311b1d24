"""Escrow ledger over a session's held balance."""

from tutorescrow.core.errors import FundsCapExceededError, ValidationError
from tutorescrow.core.validators import validate_amount
from tutorescrow.models.tutoring_session import TutoringSession


class EscrowLedger:
    """Deposit / withdraw-all / balance on one session's escrow.

    The balance never goes negative: the only way out is ``withdraw_all``,
    which zeroes it, so a second withdrawal before a new deposit yields 0.
    """

    def __init__(self, session: TutoringSession, max_escrow: int | None = None):
        self._session = session
        self._max_escrow = max_escrow

    def balance(self) -> int:
        return self._session.escrow or 0

    def check_deposit(self, amount: int) -> int:
        """Validate a deposit without applying it. Returns the resulting balance."""
        try:
            validate_amount(amount, "Deposit amount")
        except ValueError as exc:
            raise ValidationError(str(exc), details={"amount": amount}) from None

        new_balance = self.balance() + amount
        if self._max_escrow is not None and new_balance > self._max_escrow:
            raise FundsCapExceededError(
                "Deposit would exceed the maximum escrow balance",
                details={
                    "amount": amount,
                    "balance": self.balance(),
                    "max_escrow": self._max_escrow,
                },
            )
        return new_balance

    def deposit(self, amount: int) -> int:
        new_balance = self.check_deposit(amount)
        self._session.escrow = new_balance
        return new_balance

    def withdraw_all(self) -> int:
        """Read and zero the balance in one step. Returns the withdrawn amount."""
        amount = self.balance()
        self._session.escrow = 0
        return amount
