from typing import Optional, Tuple

from models import (
    Transaction,
    TransactionType,
    ClientAccount,
    LedgerEntry,
    LedgerEntryState,
    ProcessingResult,
)
from state_manager import StateManager


class TransactionProcessor:
    """
    Applies transactions to the ledger, one at a time, in the order given.

    A record that cannot be applied leaves balances untouched and is reported
    only through the returned ProcessingResult; nothing is raised or logged
    here. Deposits and withdrawals are retained for later disputes whether or
    not their balance effect was applied.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: balances (and possibly dispute state) were updated
            anything else: the guard that rejected the record
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            result = ProcessingResult.ACCOUNT_LOCKED
        else:
            result = self._apply(account, transaction)

        self._state.retain_transaction(transaction)
        return result

    def _apply(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _check_new_funds_movement(self, transaction: Transaction) -> ProcessingResult:
        if transaction.transaction_id is None:
            return ProcessingResult.MISSING_TRANSACTION_ID
        if self._state.has_ledger_entry(transaction.transaction_id):
            return ProcessingResult.DUPLICATE_TRANSACTION
        if transaction.amount is None:
            return ProcessingResult.MISSING_AMOUNT
        return ProcessingResult.APPLIED

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_funds_movement(transaction)
        if result is not ProcessingResult.APPLIED:
            return result

        account.credit(transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_funds_movement(transaction)
        if result is not ProcessingResult.APPLIED:
            return result

        if account.available < transaction.amount:
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        return ProcessingResult.APPLIED

    def _find_referenced_entry(
        self, transaction: Transaction, expected_state: LedgerEntryState
    ) -> Tuple[Optional[LedgerEntry], ProcessingResult]:
        """Look up the entry a dispute/resolve/chargeback points at and check it may move."""
        if transaction.transaction_id is None:
            return None, ProcessingResult.MISSING_TRANSACTION_ID

        entry = self._state.get_ledger_entry(transaction.transaction_id)
        if entry is None:
            return None, ProcessingResult.UNKNOWN_TRANSACTION

        if entry.client_id != transaction.client_id:
            return None, ProcessingResult.CLIENT_MISMATCH

        if entry.state is not expected_state:
            return None, ProcessingResult.INVALID_DISPUTE_STATE

        return entry, ProcessingResult.APPLIED

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry, result = self._find_referenced_entry(transaction, LedgerEntryState.ACTIVE)
        if entry is None:
            return result

        # available may go negative when the disputed funds were already spent
        account.hold(entry.amount)
        entry.state = LedgerEntryState.UNDER_DISPUTE
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry, result = self._find_referenced_entry(transaction, LedgerEntryState.UNDER_DISPUTE)
        if entry is None:
            return result

        account.release_hold(entry.amount)
        entry.state = LedgerEntryState.ACTIVE
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry, result = self._find_referenced_entry(transaction, LedgerEntryState.UNDER_DISPUTE)
        if entry is None:
            return result

        account.remove_held(entry.amount)
        account.locked = True
        entry.state = LedgerEntryState.CHARGED_BACK
        return ProcessingResult.APPLIED
