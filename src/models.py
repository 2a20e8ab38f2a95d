import threading
from collections import Counter
from dataclasses import dataclass
from decimal import Context, Decimal, MAX_EMAX, MAX_PREC, MIN_EMIN
from enum import Enum
from typing import Optional

ZERO = Decimal("0")

# Balances never round: sums are exact at any number of digits.
LEDGER_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_retained(self) -> bool:
        """Deposits and withdrawals are the only kinds kept for later disputes."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class LedgerEntryState(Enum):
    ACTIVE = "active"
    UNDER_DISPUTE = "under_dispute"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    APPLIED = "applied"
    ACCOUNT_LOCKED = "account_locked"
    MISSING_TRANSACTION_ID = "missing_transaction_id"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    MISSING_AMOUNT = "missing_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: Optional[int] = None
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.debit(amount)
        self.held = LEDGER_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.remove_held(amount)
        self.credit(amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)


@dataclass
class LedgerEntry:
    """
    Retained snapshot of an accepted deposit or withdrawal.
    Only the dispute state changes after creation.
    """

    transaction_id: int
    client_id: int
    transaction_type: TransactionType
    amount: Decimal = ZERO
    state: LedgerEntryState = LedgerEntryState.ACTIVE

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "LedgerEntry":
        return cls(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount if transaction.amount is not None else ZERO,
        )

    @property
    def disputed(self) -> bool:
        return self.state is LedgerEntryState.UNDER_DISPUTE


class ProcessingStats:
    """Thread-safe counters for tracking processing statistics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.rows_read = 0
        self.rows_dropped = 0
        self.applied = 0
        self.rejected: Counter = Counter()

    def record_row(self):
        with self._lock:
            self.rows_read += 1

    def record_dropped_row(self):
        with self._lock:
            self.rows_dropped += 1

    def record_result(self, result: ProcessingResult):
        with self._lock:
            if result is ProcessingResult.APPLIED:
                self.applied += 1
            else:
                self.rejected[result] += 1

    @property
    def total_rejected(self) -> int:
        return sum(self.rejected.values())
