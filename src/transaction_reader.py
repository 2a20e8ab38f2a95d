import csv
import logging
import os
import stat
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional

from exceptions import (
    MissingInputError,
    InvalidExtensionError,
    InputNotFoundError,
    NotAFileError,
    InputNotReadableError,
)
from models import Transaction, TransactionType, ProcessingStats

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


def validate_input_path(filepath: Optional[str]) -> str:
    """
    Check the input path before anything is opened.

    The extension is checked first so a wrong argument is reported even when
    no such file exists.
    """
    if not filepath:
        raise MissingInputError()

    if not filepath.endswith(".csv"):
        raise InvalidExtensionError(filepath)

    if not os.path.exists(filepath):
        raise InputNotFoundError(filepath)

    try:
        mode = os.stat(filepath).st_mode
    except OSError as e:
        raise InputNotReadableError(filepath, reason="cannot access file metadata for") from e

    if not stat.S_ISREG(mode):
        raise NotAFileError(filepath)

    return filepath


def _parse_bounded_int(value: str, upper: int, field: str) -> int:
    digits = value[1:] if value.startswith("+") else value
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"{field} {value!r} is not an unsigned integer")
    number = int(value)
    if not 0 <= number <= upper:
        raise ValueError(f"{field} {number} out of range 0..{upper}")
    return number


def _parse_amount(value: str) -> Decimal:
    amount = Decimal(value)
    if not amount.is_finite():
        raise ValueError(f"amount {value!r} is not a finite decimal")
    return amount


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
    """Parse CSV row into Transaction. Returns None for rows that do not decode."""
    try:
        # Short rows give None values; surplus fields land under a None key.
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}
        for value in normalized.values():
            # raises UnicodeEncodeError (a ValueError) on bytes that were not UTF-8
            value.encode("utf-8")

        transaction_type_str = normalized["type"].lower()
        client_id = _parse_bounded_int(normalized["client"], MAX_CLIENT_ID, "client")

        transaction_id = None
        transaction_id_str = normalized.get("tx", "")
        if transaction_id_str:
            transaction_id = _parse_bounded_int(transaction_id_str, MAX_TRANSACTION_ID, "tx")

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = _parse_amount(amount_str)

        return Transaction(
            transaction_type=TransactionType(transaction_type_str),
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def read_transactions(filepath: str, stats: Optional[ProcessingStats] = None) -> Iterator[Transaction]:
    """Yield decoded transactions in file order, skipping rows that fail to decode."""
    try:
        # Undecodable bytes become lone surrogates so only their row is dropped.
        f = open(filepath, "r", newline="", encoding="utf-8-sig", errors="surrogateescape")
    except OSError as e:
        raise InputNotReadableError(filepath) from e

    with f:
        reader = csv.DictReader(f, skipinitialspace=True)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                logger.warning(f"Malformed CSV at line {reader.line_num}: {e}")
                row = None

            if stats is not None:
                stats.record_row()

            transaction = parse_csv_row(row) if row is not None else None
            if transaction is None:
                if stats is not None:
                    stats.record_dropped_row()
                continue

            yield transaction
