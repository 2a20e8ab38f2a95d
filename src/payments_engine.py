import logging
import threading
from typing import Dict, Iterable, Optional

from models import Transaction, ClientAccount, ProcessingResult, ProcessingStats
from message_queue import InMemoryQueue
from state_manager import StateManager
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Runs transactions through the ledger strictly in input order.

    process() takes already-decoded transactions. process_file() decodes a CSV
    file on a publisher thread while a single consumer applies the
    transactions, so decoding can run ahead without reordering anything.
    """

    def __init__(self):
        self._queue = InMemoryQueue()
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()
        self._publisher_error: Optional[BaseException] = None

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply transactions in order and return the resulting accounts."""
        for transaction in transactions:
            self._apply_transaction(transaction)
        return self._state.get_all_accounts()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        publisher_thread = threading.Thread(target=self._publish_transactions, args=(filepath,))
        publisher_thread.start()
        try:
            self._consume_transactions()
        finally:
            publisher_thread.join()

        if self._publisher_error is not None:
            raise self._publisher_error

        logger.info(
            f"Rows read: {self._stats.rows_read}, "
            f"dropped: {self._stats.rows_dropped}, "
            f"applied: {self._stats.applied}, "
            f"rejected: {self._stats.total_rejected}"
        )
        return self._state.get_all_accounts()

    def _publish_transactions(self, filepath: str) -> None:
        """Read CSV and publish transactions to queue."""
        try:
            for transaction in read_transactions(filepath, self._stats):
                self._queue.publish_message(transaction)
        except Exception as e:
            self._publisher_error = e
        finally:
            self._queue.shutdown()

    def _consume_transactions(self) -> None:
        """Consumer loop: pull from queue and apply until the publisher is done."""
        while True:
            transaction = self._queue.consume_message()
            if transaction is None:
                if self._queue.is_shutdown() and self._queue.is_empty():
                    break
                continue

            self._apply_transaction(transaction)

    def _apply_transaction(self, transaction: Transaction) -> ProcessingResult:
        result = self._processor.process_transaction(transaction)
        self._stats.record_result(result)
        if result is not ProcessingResult.APPLIED:
            logger.debug(f"Ignored {transaction}: {result.value}")
        return result
