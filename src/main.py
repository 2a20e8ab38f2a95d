import logging
import os
import sys
from typing import List, Optional

from exceptions import InputFileError
from payments_engine import PaymentsEngine
from report_writer import write_accounts
from transaction_reader import validate_input_path

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.WARNING


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(level_name) if level_name else DEFAULT_LOG_LEVEL
    if not isinstance(level, int):
        level = DEFAULT_LOG_LEVEL

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    configure_logging()

    if len(args) > 1:
        print("Usage: payments-ledger <input.csv>", file=sys.stderr)
        return 1

    try:
        filepath = validate_input_path(args[0] if args else None)
        engine = PaymentsEngine()
        accounts = engine.process_file(filepath)
    except InputFileError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
