import threading
from queue import Queue, Empty
from typing import Optional

from models import Transaction


class InMemoryQueue:
    """
    Thread-safe FIFO between the CSV decoder and the ledger.
    All synchronization is internal - callers never need to lock.
    Order is preserved only with a single consumer.
    """

    DEFAULT_TIMEOUT = 0.1

    def __init__(self):
        self._main_queue: Queue[Transaction] = Queue()
        self._shutdown_event = threading.Event()

    def publish_message(self, message: Transaction) -> None:
        """Add message to queue. Thread-safe."""
        self._main_queue.put(message)

    def consume_message(self) -> Optional[Transaction]:
        """
        Get next message from queue.
        Returns None if queue is empty after timeout.
        """
        try:
            return self._main_queue.get(timeout=self.DEFAULT_TIMEOUT)
        except Empty:
            return None

    def is_empty(self) -> bool:
        return self._main_queue.empty()

    def size(self) -> int:
        """Return approximate queue size."""
        return self._main_queue.qsize()

    def shutdown(self) -> None:
        """Signal no more messages will be published."""
        self._shutdown_event.set()

    def is_shutdown(self) -> bool:
        return self._shutdown_event.is_set()
