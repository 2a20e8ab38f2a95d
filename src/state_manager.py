from typing import Dict, Optional

from models import Transaction, ClientAccount, LedgerEntry


class StateManager:
    """
    Holds client accounts and the ledger of disputable transactions.
    The two stores are independent: accounts are keyed by client id,
    ledger entries by transaction id.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._ledger: Dict[int, LedgerEntry] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def has_ledger_entry(self, transaction_id: int) -> bool:
        return transaction_id in self._ledger

    def get_ledger_entry(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve retained transaction by ID."""
        return self._ledger.get(transaction_id)

    def retain_transaction(self, transaction: Transaction) -> bool:
        """
        Keep a deposit or withdrawal for future dispute lookups.

        The first transaction stored under an id wins; later ones with the
        same id are not stored. Returns True if a new entry was created.
        """
        if not transaction.transaction_type.is_retained:
            return False
        if transaction.transaction_id is None:
            return False
        if transaction.transaction_id in self._ledger:
            return False

        self._ledger[transaction.transaction_id] = LedgerEntry.from_transaction(transaction)
        return True

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def ledger_size(self) -> int:
        return len(self._ledger)
